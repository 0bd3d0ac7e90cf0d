"""Choice of trigger and test templates for a webhook request."""

from __future__ import annotations

from dataclasses import dataclass

from sfdc_webhooks.domain.models import (
    DeletedObjectRequest,
    NewObjectRequest,
    SObjectDescription,
    UpdatedObjectRequest,
)
from sfdc_webhooks.errors import InvalidArgumentError, UnsupportedEventForChangeEventError
from sfdc_webhooks.rendering import TemplateId


@dataclass(frozen=True)
class TemplateSelection:
    trigger: TemplateId
    test: TemplateId
    associate_parent_entity: str | None = None


def select_new_templates(description: SObjectDescription) -> TemplateSelection:
    # Change events fire asynchronously after their parent entity changes, so
    # they get a dedicated trigger; the test still inserts a parent record.
    if description.is_change_event:
        return TemplateSelection(
            trigger=TemplateId.NEW_CHANGE_EVENT_TRIGGER,
            test=TemplateId.NEW_SOBJECT_TEST,
            associate_parent_entity=description.associate_parent_entity,
        )
    return TemplateSelection(
        trigger=TemplateId.NEW_SOBJECT_TRIGGER,
        test=TemplateId.NEW_SOBJECT_TEST,
    )


def select_updated_templates(
    request: UpdatedObjectRequest,
    description: SObjectDescription,
) -> TemplateSelection:
    if description.is_change_event:
        raise UnsupportedEventForChangeEventError(request.sobject_type, "updated")
    if not request.fields_to_check:
        return TemplateSelection(
            trigger=TemplateId.UPDATED_SOBJECT_TRIGGER,
            test=TemplateId.UPDATED_SOBJECT_TEST,
        )
    if request.fields_to_check_mode == "all":
        return TemplateSelection(
            trigger=TemplateId.UPDATED_ALL_FIELDS_TRIGGER,
            test=TemplateId.UPDATED_ALL_FIELDS_TEST,
        )
    return TemplateSelection(
        trigger=TemplateId.UPDATED_ANY_FIELDS_TRIGGER,
        test=TemplateId.UPDATED_ANY_FIELDS_TEST,
    )


def select_deleted_templates(
    request: DeletedObjectRequest,
    description: SObjectDescription,
) -> TemplateSelection:
    if description.is_change_event:
        raise UnsupportedEventForChangeEventError(request.sobject_type, "deleted")
    return TemplateSelection(
        trigger=TemplateId.DELETED_SOBJECT_TRIGGER,
        test=TemplateId.DELETED_SOBJECT_TEST,
    )


def select_templates(
    request: NewObjectRequest | UpdatedObjectRequest | DeletedObjectRequest,
    description: SObjectDescription,
) -> TemplateSelection:
    if isinstance(request, NewObjectRequest):
        return select_new_templates(description)
    if isinstance(request, UpdatedObjectRequest):
        return select_updated_templates(request, description)
    if isinstance(request, DeletedObjectRequest):
        return select_deleted_templates(request, description)
    raise InvalidArgumentError(f"Invalid event type: {getattr(request, 'event', None)}")
