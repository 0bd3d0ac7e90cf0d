"""SObject reference data models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, RootModel, field_validator


class SObjectDescriptor(BaseModel):
    name: str = Field(min_length=1)
    label: str = ""

    @field_validator("label", mode="before")
    @classmethod
    def _validate_label(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)


class SObjectDataset(RootModel[list[SObjectDescriptor]]):
    @field_validator("root", mode="before")
    @classmethod
    def _ensure_list(cls, v: Any) -> list:
        if v is None:
            return []
        return v

    @classmethod
    def from_yaml(cls, data: object) -> "SObjectDataset":
        return cls.model_validate(data)
