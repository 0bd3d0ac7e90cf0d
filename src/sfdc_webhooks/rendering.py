"""Bundled Apex and SOAP templates.

Every template the library can render is listed in :class:`TemplateId`;
the enum value is the template's path inside the ``templates`` directory
shipped with the package. XML templates are autoescaped, Apex templates
are not and rely on the ``apex_string`` filters for string literals.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape


class TemplateId(str, Enum):
    # Trigger sources
    NEW_SOBJECT_TRIGGER = "apex/src/NewSObject.trigger.j2"
    NEW_CHANGE_EVENT_TRIGGER = "apex/src/NewChangeEvent.trigger.j2"
    UPDATED_SOBJECT_TRIGGER = "apex/src/UpdatedSObject.trigger.j2"
    UPDATED_ANY_FIELDS_TRIGGER = "apex/src/UpdatedAnyOfSObjectFields.trigger.j2"
    UPDATED_ALL_FIELDS_TRIGGER = "apex/src/UpdatedAllOfSObjectFields.trigger.j2"
    DELETED_SOBJECT_TRIGGER = "apex/src/DeletedSObject.trigger.j2"

    # Trigger tests
    NEW_SOBJECT_TEST = "apex/test/NewSObjectTriggerTest.cls.j2"
    UPDATED_SOBJECT_TEST = "apex/test/UpdatedSObjectTriggerTest.cls.j2"
    UPDATED_ANY_FIELDS_TEST = "apex/test/UpdatedAnyOfSObjectFieldsTriggerTest.cls.j2"
    UPDATED_ALL_FIELDS_TEST = "apex/test/UpdatedAllOfSObjectFieldsTriggerTest.cls.j2"
    DELETED_SOBJECT_TEST = "apex/test/DeletedSObjectTriggerTest.cls.j2"

    # Supporting classes
    WEBHOOK_CALLOUT = "apex/src/WebhookCallout.cls.j2"
    WEBHOOK_CALLOUT_MOCK = "apex/test/HttpCalloutMock.cls.j2"
    SOBJECT_FACTORY = "apex/test/SObjectFactory.cls.j2"

    # SOAP payloads
    DEPLOY_APEX_CODE = "soap/apex/DeployApexCode.xml.j2"
    DELETE_APEX_CODE = "soap/apex/DeleteApexCode.xml.j2"
    CREATE_REMOTE_SITE = "soap/metadata/CreateRemoteSite.xml.j2"
    DELETE_REMOTE_SITE = "soap/metadata/DeleteRemoteSite.xml.j2"


def apex_string(value: object) -> str:
    """Escape ``value`` for use inside a single-quoted Apex string literal."""
    if value is None:
        return ""
    text = str(value)
    return (
        text.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def apex_string_list(values: Iterable[object]) -> str:
    """Render ``values`` as the items of an Apex list initializer."""
    return ", ".join(f"'{apex_string(value)}'" for value in values)


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("sfdc_webhooks", "templates"),
        autoescape=select_autoescape(enabled_extensions=("xml.j2",), default=False),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["apex_string"] = apex_string
    env.filters["apex_string_list"] = apex_string_list
    return env


def render_template(template_id: TemplateId, **context: Any) -> str:
    template = get_environment().get_template(TemplateId(template_id).value)
    return template.render(**context)
