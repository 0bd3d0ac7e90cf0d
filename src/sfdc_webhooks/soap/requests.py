"""SOAP request bodies for the Apex and Metadata APIs."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sfdc_webhooks.domain.models import Artifact
from sfdc_webhooks.rendering import TemplateId, render_template
from sfdc_webhooks.utils.naming import generate_name

SOAP_ACTION_COMPILE_AND_TEST = "compileAndTest"
SOAP_ACTION_REMOTE_SITE_SETTING = "remoteSiteSetting"


@dataclass(frozen=True)
class RemoteSiteRequest:
    name: str
    body: str


def deploy_apex_code_body(
    auth_token: str,
    classes: Sequence[Artifact],
    triggers: Sequence[Artifact],
) -> str:
    return render_template(
        TemplateId.DEPLOY_APEX_CODE,
        auth_token=auth_token,
        class_bodies=[artifact.body for artifact in classes],
        trigger_bodies=[artifact.body for artifact in triggers],
    )


def delete_apex_code_body(
    auth_token: str,
    class_names: Sequence[str],
    trigger_names: Sequence[str],
) -> str:
    return render_template(
        TemplateId.DELETE_APEX_CODE,
        auth_token=auth_token,
        class_names=list(class_names),
        trigger_names=list(trigger_names),
    )


def create_remote_site_body(auth_token: str, endpoint_url: str) -> RemoteSiteRequest:
    """Render a ``createMetadata`` call for a fresh ``RemoteSiteSetting``.

    The generated setting name is returned alongside the body; it is the
    only handle to remove the setting later.
    """
    name = generate_name("Endpoint")
    body = render_template(
        TemplateId.CREATE_REMOTE_SITE,
        auth_token=auth_token,
        endpoint_url=endpoint_url,
        name=name,
    )
    return RemoteSiteRequest(name=name, body=body)


def delete_remote_site_body(auth_token: str, name: str) -> str:
    return render_template(
        TemplateId.DELETE_REMOTE_SITE,
        auth_token=auth_token,
        name=name,
    )
