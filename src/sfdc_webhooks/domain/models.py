"""Domain objects for webhook provisioning."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from sfdc_webhooks.errors import InvalidArgumentError

EventType = Literal["new", "updated", "deleted"]
FieldsToCheckMode = Literal["any", "all"]

EVENT_TYPES: tuple[str, ...] = ("new", "updated", "deleted")
CHANGE_EVENT_ENTITY_TYPE = "ChangeEvent"


class _RequestBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    endpoint_url: str = ""
    sobject_type: str = Field(default="", alias="sObjectType")
    secret_token: str | None = None
    skip_validation: bool = False


class NewObjectRequest(_RequestBase):
    """Notify the endpoint whenever a record is created."""

    event: Literal["new"] = "new"


class UpdatedObjectRequest(_RequestBase):
    """Notify the endpoint whenever a record is updated.

    When ``fields_to_check`` is not empty the trigger only fires if any (or
    all, depending on ``fields_to_check_mode``) of those fields changed.
    """

    event: Literal["updated"] = "updated"
    fields_to_check: list[str] = Field(default_factory=list)
    fields_to_check_mode: FieldsToCheckMode = "any"


class DeletedObjectRequest(_RequestBase):
    """Notify the endpoint whenever a record is deleted."""

    event: Literal["deleted"] = "deleted"


WebhookRequest = Annotated[
    Union[NewObjectRequest, UpdatedObjectRequest, DeletedObjectRequest],
    Field(discriminator="event"),
]

_REQUEST_ADAPTER: TypeAdapter[WebhookRequest] = TypeAdapter(WebhookRequest)

_REQUEST_TYPES: dict[str, type[_RequestBase]] = {
    "new": NewObjectRequest,
    "updated": UpdatedObjectRequest,
    "deleted": DeletedObjectRequest,
}


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def parse_webhook_request(
    data: Mapping[str, Any] | _RequestBase,
    event: str | None = None,
) -> NewObjectRequest | UpdatedObjectRequest | DeletedObjectRequest:
    """Build the request variant for ``event`` (or ``data["event"]``).

    Accepts camelCase keys (``endpointUrl``, ``sObjectType``...) as well as
    the Python field names. Raises ``InvalidArgumentError`` for unknown
    events and ill-typed fields.
    """
    if isinstance(data, _RequestBase):
        payload: dict[str, Any] = data.model_dump()
    elif isinstance(data, Mapping):
        payload = dict(data)
    else:
        raise InvalidArgumentError("Webhook options must be a mapping.")

    if event is not None:
        payload["event"] = event
    resolved = payload.get("event")
    if resolved not in _REQUEST_TYPES:
        raise InvalidArgumentError(f"Invalid event type: {resolved}")
    payload = {key: value for key, value in payload.items() if value is not None}

    fields_to_check = _first_present(payload, "fieldsToCheck", "fields_to_check")
    if fields_to_check is not None and not (
        isinstance(fields_to_check, (list, tuple))
        and all(isinstance(item, str) for item in fields_to_check)
    ):
        raise InvalidArgumentError("Parameter 'fieldsToCheck' must be an array of strings.")
    mode = _first_present(payload, "fieldsToCheckMode", "fields_to_check_mode")
    if mode is not None and mode not in ("any", "all"):
        raise InvalidArgumentError("Parameter 'fieldsToCheckMode' must be either 'any' or 'all'.")

    try:
        return _REQUEST_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise InvalidArgumentError(
            f"Invalid webhook options: {_format_validation_error(exc)}"
        ) from exc


class WebhookResult(BaseModel):
    """Names of everything a webhook created in the organization.

    Keep this object (or its JSON form) around: it is all ``delete_webhook``
    needs to remove the webhook again.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    remote_site_name: str = ""
    class_names: list[str] = Field(default_factory=list)
    trigger_names: list[str] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | "WebhookResult") -> "WebhookResult":
        if isinstance(data, WebhookResult):
            return data
        if not isinstance(data, Mapping):
            raise InvalidArgumentError("Webhook data must be a mapping.")
        payload = {key: value for key, value in data.items() if value is not None}
        for key, label in (("class", "classNames"), ("trigger", "triggerNames")):
            value = payload.get(label, payload.get(f"{key}_names"))
            if not isinstance(value, (list, tuple)):
                raise InvalidArgumentError(f'Parameter "{label}" must be an array of strings.')
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise InvalidArgumentError(
                f"Invalid webhook data: {_format_validation_error(exc)}"
            ) from exc

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class Artifact:
    """A named piece of generated Apex code."""

    name: str
    body: str


@dataclass(frozen=True)
class ApexComponents:
    classes: tuple[Artifact, ...]
    triggers: tuple[Artifact, ...]

    @property
    def class_names(self) -> list[str]:
        return [artifact.name for artifact in self.classes]

    @property
    def trigger_names(self) -> list[str]:
        return [artifact.name for artifact in self.triggers]


@dataclass(frozen=True)
class SObjectDescription:
    """The part of an SObject describe result that drives template selection."""

    name: str
    associate_entity_type: str | None = None
    associate_parent_entity: str | None = None

    @property
    def is_change_event(self) -> bool:
        return self.associate_entity_type == CHANGE_EVENT_ENTITY_TYPE

    @classmethod
    def from_describe(cls, sobject_type: str, payload: object) -> "SObjectDescription":
        if not isinstance(payload, Mapping):
            return cls(name=sobject_type)
        return cls(
            name=str(payload.get("name") or sobject_type),
            associate_entity_type=payload.get("associateEntityType"),
            associate_parent_entity=payload.get("associateParentEntity"),
        )
