"""SOAP payloads and responses."""

from sfdc_webhooks.soap.requests import (
    SOAP_ACTION_COMPILE_AND_TEST,
    SOAP_ACTION_REMOTE_SITE_SETTING,
    RemoteSiteRequest,
    create_remote_site_body,
    delete_apex_code_body,
    delete_remote_site_body,
    deploy_apex_code_body,
)
from sfdc_webhooks.soap.response import describe_failures, is_successful_response

__all__ = [
    "RemoteSiteRequest",
    "SOAP_ACTION_COMPILE_AND_TEST",
    "SOAP_ACTION_REMOTE_SITE_SETTING",
    "create_remote_site_body",
    "delete_apex_code_body",
    "delete_remote_site_body",
    "deploy_apex_code_body",
    "describe_failures",
    "is_successful_response",
]
