"""Transport layer."""

from sfdc_webhooks.transport.http import HttpTransport, Transport

__all__ = ["HttpTransport", "Transport"]
