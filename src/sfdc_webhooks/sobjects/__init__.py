"""SObject reference data."""

from sfdc_webhooks.sobjects.models import SObjectDescriptor
from sfdc_webhooks.sobjects.policy import allowed_sobjects, is_allowed

__all__ = ["SObjectDescriptor", "allowed_sobjects", "is_allowed"]
