"""Which SObject types can be watched for each event."""

from __future__ import annotations

from collections.abc import Iterable

from sfdc_webhooks.sobjects.loader import load_dataset
from sfdc_webhooks.sobjects.models import SObjectDescriptor

# Change events only support "after insert" triggers, so they are offered for
# "new" webhooks only.
EVENT_DATASETS: dict[str, tuple[str, ...]] = {
    "new": ("new", "new_change_events"),
    "updated": ("updated",),
    "deleted": ("deleted",),
}


def _descriptors(event: str) -> list[SObjectDescriptor]:
    descriptors: list[SObjectDescriptor] = []
    for dataset in EVENT_DATASETS.get(event, ()):
        descriptors.extend(load_dataset(dataset))
    return descriptors


def _sorted_by_label(descriptors: Iterable[SObjectDescriptor]) -> list[SObjectDescriptor]:
    return sorted(descriptors, key=lambda item: (item.label, item.name))


def allowed_sobjects(event: str, verbose: bool = False) -> list[str] | list[SObjectDescriptor]:
    """List the SObject types supported for ``event``.

    Returns sorted names, or with ``verbose`` the full descriptors sorted by
    label. Unknown events yield an empty list.
    """
    descriptors = _descriptors(event)
    if verbose:
        return _sorted_by_label(descriptors)
    return sorted({item.name for item in descriptors})


def is_allowed(event: str, sobject_type: str) -> bool:
    return any(item.name == sobject_type for item in _descriptors(event))
