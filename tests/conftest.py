from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from sfdc_webhooks import config
from sfdc_webhooks.client import SalesforceClient
from sfdc_webhooks.config import SalesforceSettings, Settings

METADATA_SUCCESS = """<?xml version="1.0" encoding="UTF-8"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/" xmlns="http://soap.sforce.com/2006/04/metadata">
  <soapenv:Body>
    <createMetadataResponse>
      <result>
        <fullName>SW_Endpoint_abc</fullName>
        <success>true</success>
      </result>
    </createMetadataResponse>
  </soapenv:Body>
</soapenv:Envelope>
"""

APEX_SUCCESS = """<?xml version="1.0" encoding="UTF-8"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/" xmlns="http://soap.sforce.com/2006/08/apex">
  <soapenv:Body>
    <compileAndTestResponse>
      <result>
        <classes><name>SW_Callout_abc</name><success>true</success></classes>
        <triggers><name>SW_Trigger_abc</name><success>true</success></triggers>
        <success>true</success>
      </result>
    </compileAndTestResponse>
  </soapenv:Body>
</soapenv:Envelope>
"""

APEX_FAILURE = """<?xml version="1.0" encoding="UTF-8"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/" xmlns="http://soap.sforce.com/2006/08/apex">
  <soapenv:Body>
    <compileAndTestResponse>
      <result>
        <classes><name>SW_Callout_abc</name><success>true</success></classes>
        <triggers>
          <name>SW_Trigger_abc</name>
          <problem>Invalid type: Foo</problem>
          <success>false</success>
        </triggers>
        <success>false</success>
      </result>
    </compileAndTestResponse>
  </soapenv:Body>
</soapenv:Envelope>
"""

SOAP_FAULT = """<?xml version="1.0" encoding="UTF-8"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/">
  <soapenv:Body>
    <soapenv:Fault>
      <faultcode>sf:INVALID_SESSION_ID</faultcode>
      <faultstring>INVALID_SESSION_ID: Invalid Session ID found in SessionHeader</faultstring>
    </soapenv:Fault>
  </soapenv:Body>
</soapenv:Envelope>
"""


class FakeTransport:
    """Records every call; answers with queued responses, then success."""

    def __init__(self) -> None:
        self.posts: list[dict[str, Any]] = []
        self.gets: list[dict[str, Any]] = []
        self.describe: Any = {}
        self.responses: list[str | Exception] = []
        self.get_error: Exception | None = None

    async def post(self, url: str, body: str, headers: Mapping[str, str]) -> str:
        self.posts.append({"url": url, "body": body, "headers": dict(headers)})
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        if headers.get("SOAPAction") == "remoteSiteSetting":
            return METADATA_SUCCESS
        return APEX_SUCCESS

    async def get(self, url: str, headers: Mapping[str, str]) -> Any:
        self.gets.append({"url": url, "headers": dict(headers)})
        if self.get_error is not None:
            raise self.get_error
        return self.describe


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in config.ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(salesforce=SalesforceSettings(auth_token="token-123", instance="na139"))


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(settings: Settings, transport: FakeTransport) -> SalesforceClient:
    return SalesforceClient(settings=settings, transport=transport)
