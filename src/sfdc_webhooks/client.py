"""Salesforce client that creates and deletes webhooks.

A webhook is made of:

- a Remote Site Setting that allows Apex code to call the endpoint URL,
- an Apex trigger on the watched SObject type,
- the classes the trigger needs (callout, callout mock, SObject factory) and
  a test class, since Salesforce only deploys code covered by tests.

Creating a webhook registers the endpoint first and deploys the code second.
Neither step is rolled back when the other fails; callers clean up with
``delete_webhook``, feeding it the names returned by ``create_webhook``.

Example::

    async with SalesforceClient(auth_token=token, instance="na139") as client:
        result = await client.create_webhook(
            {"event": "new", "sObjectType": "Account", "endpointUrl": url}
        )
        ...
        await client.delete_webhook(result)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from sfdc_webhooks.apex.components import build_components
from sfdc_webhooks.apex.selection import TemplateSelection, select_templates
from sfdc_webhooks.config import API_VERSION_PATTERN, Settings, load_settings
from sfdc_webhooks.domain.models import (
    ApexComponents,
    DeletedObjectRequest,
    NewObjectRequest,
    SObjectDescription,
    UpdatedObjectRequest,
    WebhookResult,
    parse_webhook_request,
)
from sfdc_webhooks.errors import (
    InvalidArgumentError,
    InvalidConfigError,
    MalformedResponseError,
    RemoteRejectionError,
    TransportError,
    WebhookError,
)
from sfdc_webhooks.soap.requests import (
    SOAP_ACTION_COMPILE_AND_TEST,
    SOAP_ACTION_REMOTE_SITE_SETTING,
    create_remote_site_body,
    delete_apex_code_body,
    delete_remote_site_body,
    deploy_apex_code_body,
)
from sfdc_webhooks.soap.response import describe_failures, is_successful_response
from sfdc_webhooks.sobjects.models import SObjectDescriptor
from sfdc_webhooks.sobjects.policy import allowed_sobjects, is_allowed
from sfdc_webhooks.transport.http import HttpTransport, Transport
from sfdc_webhooks.utils.masking import redact_sensitive_fields

logger = logging.getLogger(__name__)

WebhookRequestLike = (
    Mapping[str, Any] | NewObjectRequest | UpdatedObjectRequest | DeletedObjectRequest
)


def _rejection_message(failure_message: str, failures: list[dict[str, str]]) -> str:
    details = []
    for failure in failures:
        label = failure.get("fullName") or failure.get("name") or failure.get("faultcode")
        reason = (
            failure.get("problem")
            or failure.get("message")
            or failure.get("faultstring")
            or failure.get("statusCode")
        )
        if label and reason:
            details.append(f"{label}: {reason}")
        elif label or reason:
            details.append(label or reason)
    if not details:
        return failure_message
    return f"{failure_message}: {'; '.join(details)}"


class SalesforceClient:
    """Create and delete webhooks in one Salesforce organization.

    Args:
        api_version: Salesforce API version, ``"<digits>.0"`` (defaults to
            ``SALESFORCE_API_VERSION`` or ``"50.0"``).
        auth_token: Salesforce API bearer token (defaults to
            ``SALESFORCE_AUTH_TOKEN``).
        instance: server instance hosting the organization, e.g. ``na139``
            (defaults to ``SALESFORCE_INSTANCE``).
        transport: HTTP transport; an ``HttpTransport`` is created (and
            closed by ``aclose``) when omitted.
        settings: configuration used for the defaults above; loaded from the
            environment when omitted.

    Raises:
        InvalidConfigError: if the token or instance is missing, or the API
            version is malformed.
    """

    def __init__(
        self,
        api_version: str | None = None,
        auth_token: str | None = None,
        instance: str | None = None,
        *,
        transport: Transport | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or load_settings()
        api_version = api_version or settings.salesforce.api_version
        auth_token = auth_token or settings.salesforce.auth_token
        instance = instance or settings.salesforce.instance
        self._validate_constructor_args(api_version, auth_token, instance)

        self.api_version = api_version
        self.auth_token = auth_token
        self.instance = instance

        base_url = f"https://{instance}.salesforce.com/services"
        self.metadata_api_url = f"{base_url}/Soap/m/{api_version}"
        self.soap_api_url = f"{base_url}/Soap/s/{api_version}"
        self.sobjects_api_url = f"{base_url}/data/v{api_version}/sobjects"

        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpTransport(settings.http)

    @staticmethod
    def _validate_constructor_args(
        api_version: str,
        auth_token: str | None,
        instance: str | None,
    ) -> None:
        if not API_VERSION_PATTERN.match(api_version or ""):
            raise InvalidConfigError(f"Invalid API version parameter: {api_version}")
        if not auth_token:
            raise InvalidConfigError("An authentication token must be provided.")
        if not instance:
            raise InvalidConfigError("Instance information must be provided.")

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> "SalesforceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ HTTP

    def _base_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.auth_token}",
            "Content-Type": "text/xml",
        }

    def _soap_headers(self, action: str) -> dict[str, str]:
        return {**self._base_headers(), "SOAPAction": action}

    async def _get_sobject_description(self, sobject_type: str) -> SObjectDescription:
        url = f"{self.sobjects_api_url}/{sobject_type}/describe"
        try:
            payload = await self._transport.get(url, self._base_headers())
        except httpx.HTTPError as exc:
            logger.error("Could not describe SObject %s: %s", sobject_type, exc)
            raise TransportError(
                f"Could not describe SObject {sobject_type}: {exc}",
                step="describe",
                context={"sObjectType": sobject_type},
            ) from exc
        return SObjectDescription.from_describe(sobject_type, payload)

    async def _post_soap(
        self,
        *,
        step: str,
        url: str,
        body: str,
        action: str,
        failure_message: str,
        context: dict[str, Any],
    ) -> str:
        """POST a SOAP request and fail unless every record succeeded."""
        safe_context = redact_sensitive_fields(context)
        try:
            response = await self._transport.post(url, body, self._soap_headers(action))
        except httpx.HTTPError as exc:
            logger.error("%s: %s (context=%s)", failure_message, exc, safe_context)
            raise TransportError(
                f"{failure_message}: {exc}",
                step=step,
                context=context,
            ) from exc

        try:
            succeeded = is_successful_response(response)
            failures = [] if succeeded else describe_failures(response)
        except MalformedResponseError as exc:
            logger.error("%s: %s (context=%s)", failure_message, exc, safe_context)
            raise MalformedResponseError(
                f"{failure_message}: {exc}",
                step=step,
                context=context,
            ) from exc

        if not succeeded:
            logger.error("%s: %s (context=%s)", failure_message, failures, safe_context)
            raise RemoteRejectionError(
                _rejection_message(failure_message, failures),
                step=step,
                response=response,
                context=context,
                failures=failures,
            )
        return response

    # ---------------------------------------------------------------- create

    def _validate_create_request(
        self,
        request: NewObjectRequest | UpdatedObjectRequest | DeletedObjectRequest,
    ) -> None:
        if not request.endpoint_url:
            raise InvalidArgumentError("Parameter 'endpointUrl' is required.")
        if not request.sobject_type:
            raise InvalidArgumentError("Parameter 'sObjectType' is required.")
        if not request.skip_validation and not is_allowed(request.event, request.sobject_type):
            raise InvalidArgumentError(
                f'{request.sobject_type} is not supported for events of type "{request.event}".'
            )

    async def _create_remote_site_setting(self, endpoint_url: str) -> str:
        remote_site = create_remote_site_body(self.auth_token, endpoint_url)
        logger.info("Registering remote site %s for %s", remote_site.name, endpoint_url)
        await self._post_soap(
            step="create_remote_site",
            url=self.metadata_api_url,
            body=remote_site.body,
            action=SOAP_ACTION_REMOTE_SITE_SETTING,
            failure_message="Could not setup remote site in Salesforce",
            context={"remoteSiteName": remote_site.name, "endpointUrl": endpoint_url},
        )
        return remote_site.name

    async def _deploy_apex_code(self, components: ApexComponents) -> None:
        body = deploy_apex_code_body(self.auth_token, components.classes, components.triggers)
        logger.info(
            "Deploying Apex code: classes=%s triggers=%s",
            components.class_names,
            components.trigger_names,
        )
        await self._post_soap(
            step="deploy_apex_code",
            url=self.soap_api_url,
            body=body,
            action=SOAP_ACTION_COMPILE_AND_TEST,
            failure_message="Could not deploy Apex code to Salesforce",
            context={
                "classNames": components.class_names,
                "triggerNames": components.trigger_names,
            },
        )

    async def _create_webhook_workflow(
        self,
        request: NewObjectRequest | UpdatedObjectRequest | DeletedObjectRequest,
        selection: TemplateSelection,
    ) -> WebhookResult:
        remote_site_name = await self._create_remote_site_setting(request.endpoint_url)

        components = build_components(
            selection.trigger,
            selection.test,
            endpoint_url=request.endpoint_url,
            sobject_type=request.sobject_type,
            secret_token=request.secret_token,
            associate_parent_entity=selection.associate_parent_entity,
            fields_to_check=getattr(request, "fields_to_check", ()),
        )
        try:
            await self._deploy_apex_code(components)
        except WebhookError as exc:
            # The remote site stays registered; let the caller remove it.
            if isinstance(exc, (TransportError, RemoteRejectionError, MalformedResponseError)):
                exc.context.setdefault("remoteSiteName", remote_site_name)
            logger.warning(
                "Remote site %s was left registered after a failed deployment",
                remote_site_name,
            )
            raise

        return WebhookResult(
            remote_site_name=remote_site_name,
            class_names=components.class_names,
            trigger_names=components.trigger_names,
        )

    async def create_webhook_new(self, opts: WebhookRequestLike) -> WebhookResult:
        """Create a webhook called whenever a new SObject is created.

        Change events (e.g. ``AccountChangeEvent``) are supported: their
        trigger forwards the creation events of the parent entity.
        """
        request = parse_webhook_request(opts, event="new")
        self._validate_create_request(request)
        description = await self._get_sobject_description(request.sobject_type)
        return await self._create_webhook_workflow(request, select_templates(request, description))

    async def create_webhook_updated(self, opts: WebhookRequestLike) -> WebhookResult:
        """Create a webhook called whenever an SObject is updated.

        With ``fieldsToCheck`` the webhook only fires when any (or all, see
        ``fieldsToCheckMode``) of those fields changed.
        """
        request = parse_webhook_request(opts, event="updated")
        self._validate_create_request(request)
        description = await self._get_sobject_description(request.sobject_type)
        return await self._create_webhook_workflow(request, select_templates(request, description))

    async def create_webhook_deleted(self, opts: WebhookRequestLike) -> WebhookResult:
        """Create a webhook called whenever an SObject is deleted."""
        request = parse_webhook_request(opts, event="deleted")
        self._validate_create_request(request)
        description = await self._get_sobject_description(request.sobject_type)
        return await self._create_webhook_workflow(request, select_templates(request, description))

    async def create_webhook(self, opts: WebhookRequestLike) -> WebhookResult:
        """Create a webhook for the event named in ``opts`` (new, updated, deleted).

        Returns the names of the entities created in the organization; keep
        them to delete the webhook later.
        """
        request = parse_webhook_request(opts)
        if isinstance(request, NewObjectRequest):
            return await self.create_webhook_new(request)
        if isinstance(request, UpdatedObjectRequest):
            return await self.create_webhook_updated(request)
        return await self.create_webhook_deleted(request)

    # ---------------------------------------------------------------- delete

    @staticmethod
    def _validate_delete_args(
        remote_site_name: str,
        class_names: Sequence[str],
        trigger_names: Sequence[str],
    ) -> None:
        if not remote_site_name:
            logger.warning('Parameter "remoteSiteName" is empty.')
        if not class_names:
            logger.warning('Parameter "classNames" is empty.')
        if not trigger_names:
            logger.warning('Parameter "triggerNames" is empty.')

    async def _delete_apex_code(self, class_names: Sequence[str], trigger_names: Sequence[str]) -> None:
        body = delete_apex_code_body(self.auth_token, class_names, trigger_names)
        logger.info("Deleting Apex code: classes=%s triggers=%s", class_names, trigger_names)
        await self._post_soap(
            step="delete_apex_code",
            url=self.soap_api_url,
            body=body,
            action=SOAP_ACTION_COMPILE_AND_TEST,
            failure_message="Could not delete Apex code from Salesforce",
            context={"classNames": list(class_names), "triggerNames": list(trigger_names)},
        )

    async def _delete_remote_site_setting(self, remote_site_name: str) -> None:
        body = delete_remote_site_body(self.auth_token, remote_site_name)
        logger.info("Deleting remote site %s", remote_site_name)
        await self._post_soap(
            step="delete_remote_site",
            url=self.metadata_api_url,
            body=body,
            action=SOAP_ACTION_REMOTE_SITE_SETTING,
            failure_message="Could not delete remote site setting from Salesforce",
            context={"remoteSiteName": remote_site_name},
        )

    async def delete_webhook(self, opts: WebhookResult | Mapping[str, Any]) -> None:
        """Delete the entities of a webhook created by ``create_webhook``.

        The Apex code goes first, the remote site second. A failure stops the
        flow, so a remote site is never removed while code calling it remains.
        """
        result = WebhookResult.from_mapping(opts)
        self._validate_delete_args(result.remote_site_name, result.class_names, result.trigger_names)
        await self._delete_apex_code(result.class_names, result.trigger_names)
        await self._delete_remote_site_setting(result.remote_site_name)

    # ----------------------------------------------------------------- query

    @staticmethod
    def get_allowed_sobjects(
        event: str,
        verbose: bool = False,
    ) -> list[str] | list[SObjectDescriptor]:
        """SObject types that can be watched for ``event``."""
        return allowed_sobjects(event, verbose)
