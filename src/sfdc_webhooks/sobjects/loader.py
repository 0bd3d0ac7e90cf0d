"""Loader for the bundled SObject datasets."""

from __future__ import annotations

from functools import lru_cache
from importlib import resources

import yaml

from sfdc_webhooks.sobjects.models import SObjectDataset, SObjectDescriptor

DATASET_PACKAGE = "sfdc_webhooks.sobjects"


def load_dataset(name: str) -> tuple[SObjectDescriptor, ...]:
    """Load ``data/<name>.yaml`` once and return its descriptors."""
    return _load_dataset_cached(name)


@lru_cache(maxsize=None)
def _load_dataset_cached(name: str) -> tuple[SObjectDescriptor, ...]:
    dataset_file = resources.files(DATASET_PACKAGE).joinpath("data").joinpath(f"{name}.yaml")
    if not dataset_file.is_file():
        raise FileNotFoundError(f"SObject dataset not found: {name}")
    with dataset_file.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    return tuple(SObjectDataset.from_yaml(data).root)
