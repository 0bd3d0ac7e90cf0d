"""HTTP transport used to talk to Salesforce."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import httpx

from sfdc_webhooks.config import HttpSettings

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """What the webhook workflows need from an HTTP client."""

    async def post(self, url: str, body: str, headers: Mapping[str, str]) -> str: ...

    async def get(self, url: str, headers: Mapping[str, str]) -> Any: ...


def _is_soap_fault(response: httpx.Response) -> bool:
    # Salesforce answers SOAP faults with HTTP 500 and an envelope body.
    return response.status_code == 500 and "Fault>" in response.text


class HttpTransport:
    """``httpx.AsyncClient`` backed transport.

    ``post`` returns the response text; ``get`` decodes JSON. HTTP errors
    surface as ``httpx.HTTPError`` (``httpx.DecodingError`` for a body that is
    not JSON), except SOAP faults, which are returned so the caller can report
    them like any other rejected request.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or HttpSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.timeout_seconds,
            verify=settings.verify_tls,
        )

    async def post(self, url: str, body: str, headers: Mapping[str, str]) -> str:
        response = await self._client.post(url, content=body.encode("utf-8"), headers=dict(headers))
        logger.debug("POST %s -> %s", url, response.status_code)
        if _is_soap_fault(response):
            return response.text
        response.raise_for_status()
        return response.text

    async def get(self, url: str, headers: Mapping[str, str]) -> Any:
        response = await self._client.get(url, headers=dict(headers))
        logger.debug("GET %s -> %s", url, response.status_code)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            # e.g. an HTML login page served with status 200
            raise httpx.DecodingError(
                f"Expected a JSON response from {url}: {exc}",
                request=response.request,
            ) from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
