"""Error taxonomy for webhook provisioning."""

from __future__ import annotations

from typing import Any


class WebhookError(Exception):
    """Base class for every error raised by this library."""

    code = "webhook_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidConfigError(WebhookError):
    """Raised when the client cannot be built from the given settings."""

    code = "invalid_config"


class InvalidArgumentError(WebhookError):
    """Raised by pre-flight validation. No remote call has been made."""

    code = "invalid_argument"


class UnsupportedEventForChangeEventError(WebhookError):
    """Change events only support notifications about new records."""

    code = "unsupported_event"

    def __init__(self, sobject_type: str, event: str) -> None:
        super().__init__(f'{sobject_type} does not support "{event}" events')
        self.sobject_type = sobject_type
        self.event = event


class _StepError(WebhookError):
    def __init__(
        self,
        message: str,
        *,
        step: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        self.context = dict(context or {})


class MalformedResponseError(_StepError):
    """Raised when a SOAP response cannot be parsed.

    ``step`` and ``context`` are set once the client knows which remote call
    produced the response.
    """

    code = "malformed_response"


class TransportError(_StepError):
    """A remote call failed at the network or HTTP level."""

    code = "transport_failure"


class RemoteRejectionError(_StepError):
    """The remote call went through but Salesforce reported a failed record."""

    code = "remote_rejection"

    def __init__(
        self,
        message: str,
        *,
        step: str,
        response: str,
        context: dict[str, Any] | None = None,
        failures: list[dict[str, str]] | None = None,
    ) -> None:
        super().__init__(message, step=step, context=context)
        self.response = response
        self.failures = list(failures or [])
