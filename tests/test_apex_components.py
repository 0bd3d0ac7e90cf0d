from __future__ import annotations

from sfdc_webhooks.apex.components import (
    build_components,
    common_components,
    get_webhook_callout,
    get_webhook_trigger,
)
from sfdc_webhooks.domain.models import Artifact
from sfdc_webhooks.rendering import TemplateId


def test_common_components_have_distinct_names() -> None:
    common = common_components()

    names = {
        common.sobject_factory.name,
        common.webhook_callout.name,
        common.webhook_callout_mock.name,
    }
    assert len(names) == 3
    assert common.sobject_factory.name.startswith("SW_SObjectFactory_")
    assert common.webhook_callout_mock.name.startswith("SW_CalloutMock_")
    assert f"public class {common.webhook_callout.name}" in common.webhook_callout.body


def test_callout_embeds_escaped_secret_token() -> None:
    callout = get_webhook_callout("it's secret")

    assert "SECRET_TOKEN = 'it\\'s secret';" in callout.body
    assert "X-Webhook-Token" in callout.body


def test_callout_without_secret_token() -> None:
    assert "SECRET_TOKEN = '';" in get_webhook_callout(None).body


def test_trigger_references_callout() -> None:
    callout = Artifact(name="SW_Callout_1", body="")

    trigger = get_webhook_trigger(
        TemplateId.DELETED_SOBJECT_TRIGGER,
        callout,
        endpoint_url="https://example.com/hook",
        sobject_type="Contact",
    )

    assert trigger.name.startswith("SW_Trigger_")
    assert f"trigger {trigger.name} on Contact (after delete)" in trigger.body
    assert "SW_Callout_1.callout(url, content);" in trigger.body


def test_build_components_wires_names_together() -> None:
    components = build_components(
        TemplateId.UPDATED_ANY_FIELDS_TRIGGER,
        TemplateId.UPDATED_ANY_FIELDS_TEST,
        endpoint_url="https://example.com/hook",
        sobject_type="Lead",
        secret_token="token",
        fields_to_check=["Email", "Phone"],
    )

    factory, callout, mock, test = components.classes
    (trigger,) = components.triggers
    assert components.class_names == [factory.name, callout.name, mock.name, test.name]
    assert components.trigger_names == [trigger.name]
    assert f"{callout.name}.callout(url, content);" in trigger.body
    assert "'Email', 'Phone'" in trigger.body
    assert f"new {mock.name}()" in test.body
    assert f"{factory.name}.create('Lead')" in test.body
    assert f"{factory.name}.mutate(record, fieldsToCheck[0]);" in test.body


def test_change_event_test_creates_parent_record() -> None:
    components = build_components(
        TemplateId.NEW_CHANGE_EVENT_TRIGGER,
        TemplateId.NEW_SOBJECT_TEST,
        endpoint_url="https://example.com/hook",
        sobject_type="AccountChangeEvent",
        associate_parent_entity="Account",
    )

    (trigger,) = components.triggers
    test = components.classes[-1]
    assert "on AccountChangeEvent (after insert)" in trigger.body
    assert ".create('Account')" in test.body


def test_every_build_uses_fresh_names() -> None:
    kwargs = {"endpoint_url": "https://example.com", "sobject_type": "Account"}
    first = build_components(TemplateId.NEW_SOBJECT_TRIGGER, TemplateId.NEW_SOBJECT_TEST, **kwargs)
    second = build_components(TemplateId.NEW_SOBJECT_TRIGGER, TemplateId.NEW_SOBJECT_TEST, **kwargs)

    assert set(first.class_names).isdisjoint(second.class_names)
    assert set(first.trigger_names).isdisjoint(second.trigger_names)
