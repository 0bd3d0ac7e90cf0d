"""Generation of the Apex code that makes up a webhook."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sfdc_webhooks.domain.models import ApexComponents, Artifact
from sfdc_webhooks.rendering import TemplateId, render_template
from sfdc_webhooks.utils.naming import generate_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommonComponents:
    """Classes every webhook deploys, whatever the trigger looks like."""

    sobject_factory: Artifact
    webhook_callout: Artifact
    webhook_callout_mock: Artifact


def get_sobject_factory() -> Artifact:
    name = generate_name("SObjectFactory")
    body = render_template(TemplateId.SOBJECT_FACTORY, sobject_factory_name=name)
    return Artifact(name=name, body=body)


def get_webhook_callout(secret_token: str | None = None) -> Artifact:
    name = generate_name("Callout")
    body = render_template(
        TemplateId.WEBHOOK_CALLOUT,
        webhook_callout_name=name,
        secret_token=secret_token or "",
    )
    return Artifact(name=name, body=body)


def get_webhook_callout_mock() -> Artifact:
    name = generate_name("CalloutMock")
    body = render_template(TemplateId.WEBHOOK_CALLOUT_MOCK, webhook_callout_mock_name=name)
    return Artifact(name=name, body=body)


def get_webhook_trigger(
    template: TemplateId,
    webhook_callout: Artifact,
    *,
    endpoint_url: str,
    sobject_type: str,
    associate_parent_entity: str | None = None,
    fields_to_check: Sequence[str] = (),
) -> Artifact:
    name = generate_name("Trigger")
    body = render_template(
        template,
        trigger_name=name,
        endpoint_url=endpoint_url,
        sobject_type=sobject_type,
        associate_parent_entity=associate_parent_entity,
        fields_to_check=list(fields_to_check),
        webhook_callout_name=webhook_callout.name,
    )
    return Artifact(name=name, body=body)


def get_webhook_trigger_test(
    template: TemplateId,
    webhook_callout_mock: Artifact,
    sobject_factory: Artifact,
    *,
    endpoint_url: str,
    sobject_type: str,
    fields_to_check: Sequence[str] = (),
) -> Artifact:
    name = generate_name("Test")
    body = render_template(
        template,
        test_class_name=name,
        endpoint_url=endpoint_url,
        sobject_type=sobject_type,
        fields_to_check=list(fields_to_check),
        sobject_factory_name=sobject_factory.name,
        webhook_callout_mock_name=webhook_callout_mock.name,
    )
    return Artifact(name=name, body=body)


def common_components(secret_token: str | None = None) -> CommonComponents:
    return CommonComponents(
        sobject_factory=get_sobject_factory(),
        webhook_callout=get_webhook_callout(secret_token),
        webhook_callout_mock=get_webhook_callout_mock(),
    )


def build_components(
    trigger_template: TemplateId,
    test_template: TemplateId,
    *,
    endpoint_url: str,
    sobject_type: str,
    secret_token: str | None = None,
    associate_parent_entity: str | None = None,
    fields_to_check: Sequence[str] = (),
) -> ApexComponents:
    """Render the trigger, its test and the classes both depend on.

    The trigger test for a change event has to create a record of the parent
    entity (``associate_parent_entity``), since change events cannot be
    inserted directly.

    The order of ``classes`` (factory, callout, callout mock, trigger test)
    is kept in every payload and in the returned names.
    """
    common = common_components(secret_token)

    trigger = get_webhook_trigger(
        trigger_template,
        common.webhook_callout,
        endpoint_url=endpoint_url,
        sobject_type=sobject_type,
        associate_parent_entity=associate_parent_entity,
        fields_to_check=fields_to_check,
    )

    sobject_under_test = associate_parent_entity or sobject_type
    trigger_test = get_webhook_trigger_test(
        test_template,
        common.webhook_callout_mock,
        common.sobject_factory,
        endpoint_url=endpoint_url,
        sobject_type=sobject_under_test,
        fields_to_check=fields_to_check,
    )

    logger.debug(
        "Generated Apex components for %s: trigger=%s test=%s",
        sobject_type,
        trigger.name,
        trigger_test.name,
    )
    return ApexComponents(
        classes=(
            common.sobject_factory,
            common.webhook_callout,
            common.webhook_callout_mock,
            trigger_test,
        ),
        triggers=(trigger,),
    )
