"""Configuration management for the Salesforce webhooks client."""

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from sfdc_webhooks.errors import InvalidConfigError

_config_logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "50.0"
API_VERSION_PATTERN = re.compile(r"^\d+\.0$")


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class HttpSettings(BaseModel):
    timeout_seconds: float = Field(default=30.0, ge=1, le=300)
    verify_tls: bool = Field(default=True)


class SalesforceSettings(BaseModel):
    """Target organization settings.

    ``auth_token`` and ``instance`` are optional here because they may also be
    passed straight to :class:`sfdc_webhooks.client.SalesforceClient`; the
    client reports a missing value when it is built.
    """

    api_version: str = Field(default=DEFAULT_API_VERSION)
    auth_token: str | None = Field(default=None)
    instance: str | None = Field(default=None)

    @field_validator("api_version")
    @classmethod
    def _validate_api_version(cls, value: str) -> str:
        if not API_VERSION_PATTERN.match(value):
            raise ValueError(f"Invalid API version parameter: {value}")
        return value

    @field_validator("auth_token", "instance", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Settings(BaseModel):
    salesforce: SalesforceSettings = Field(default_factory=SalesforceSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_KEYS = {
    "api_version": "SALESFORCE_API_VERSION",
    "auth_token": "SALESFORCE_AUTH_TOKEN",
    "instance": "SALESFORCE_INSTANCE",
    "http_timeout": "SALESFORCE_HTTP_TIMEOUT_SECONDS",
    "http_verify_tls": "SALESFORCE_HTTP_VERIFY_TLS",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
}

_TRUE_VALUES = frozenset({"1", "true", "yes"})


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        _config_logger.warning(
            "Invalid float value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")

    settings_data: dict[str, object] = {
        "salesforce": {
            "api_version": os.getenv(ENV_KEYS["api_version"], DEFAULT_API_VERSION),
            "auth_token": os.getenv(ENV_KEYS["auth_token"]),
            "instance": os.getenv(ENV_KEYS["instance"]),
        },
        "http": {
            "timeout_seconds": _env_float(
                ENV_KEYS["http_timeout"],
                HttpSettings().timeout_seconds,
            ),
            "verify_tls": _env_bool(
                ENV_KEYS["http_verify_tls"],
                HttpSettings().verify_tls,
            ),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": os.getenv(ENV_KEYS["log_file"]) or None,
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc
