"""Create and delete webhooks in Salesforce organizations."""

from sfdc_webhooks.client import SalesforceClient
from sfdc_webhooks.domain.models import (
    DeletedObjectRequest,
    NewObjectRequest,
    UpdatedObjectRequest,
    WebhookResult,
)
from sfdc_webhooks.errors import (
    InvalidArgumentError,
    InvalidConfigError,
    MalformedResponseError,
    RemoteRejectionError,
    TransportError,
    UnsupportedEventForChangeEventError,
    WebhookError,
)

__version__ = "0.1.0"

__all__ = [
    "DeletedObjectRequest",
    "InvalidArgumentError",
    "InvalidConfigError",
    "MalformedResponseError",
    "NewObjectRequest",
    "RemoteRejectionError",
    "SalesforceClient",
    "TransportError",
    "UnsupportedEventForChangeEventError",
    "UpdatedObjectRequest",
    "WebhookError",
    "WebhookResult",
    "__version__",
]
