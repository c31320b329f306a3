"""Pydantic settings for the Azure DevOps client.

Settings are grouped into small ``BaseModel`` sections (HTTP, retry, logging)
aggregated by :class:`AdoSettings`, a ``pydantic-settings`` model reading
``ADO_``-prefixed environment variables. Nested sections use ``__`` as the
delimiter, so ``ADO_RETRY__MAX_RETRIES=3`` sets ``settings.retry.max_retries``.

The resolved settings are memoised by :func:`get_settings`; tests call
:func:`reset_settings` after changing the environment.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOTAL_ELAPSED,
    HTTP2_ENABLED,
    HTTP_CONNECT_TIMEOUT,
    HTTP_POOL_TIMEOUT,
    HTTP_READ_TIMEOUT,
    HTTP_WRITE_TIMEOUT,
    KEEPALIVE_EXPIRY,
    MAX_CONNECTIONS,
    MAX_KEEPALIVE_CONNECTIONS,
)
from .retry import RetryMode, RetryOptions

__all__ = [
    "HttpSettings",
    "RetrySettings",
    "LoggingSettings",
    "AdoSettings",
    "get_settings",
    "reset_settings",
]

logger = logging.getLogger(__name__)


class HttpSettings(BaseModel):
    """Connection, timeout and pool configuration for the HTTPX client."""

    timeout_connect: float = Field(default=HTTP_CONNECT_TIMEOUT, gt=0.0, le=300.0)
    timeout_read: float = Field(default=HTTP_READ_TIMEOUT, gt=0.0, le=3600.0)
    timeout_write: float = Field(default=HTTP_WRITE_TIMEOUT, gt=0.0, le=3600.0)
    timeout_pool: float = Field(default=HTTP_POOL_TIMEOUT, gt=0.0, le=300.0)
    pool_max_connections: int = Field(default=MAX_CONNECTIONS, ge=1, le=1024)
    pool_keepalive_max: int = Field(default=MAX_KEEPALIVE_CONNECTIONS, ge=0, le=1024)
    keepalive_expiry: float = Field(default=KEEPALIVE_EXPIRY, ge=0.0, le=600.0)
    http2: bool = Field(default=HTTP2_ENABLED, description="Negotiate HTTP/2 (needs the h2 package)")
    trust_env: bool = Field(default=True, description="Honour proxy environment variables")
    verify_tls: bool = Field(default=True, description="Verify server certificates")
    user_agent_suffix: Optional[str] = Field(
        default=None, description="Application id prepended to the User-Agent header"
    )
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    model_config = {"validate_assignment": True, "extra": "ignore"}


class RetrySettings(BaseModel):
    """Retry behaviour applied by :class:`~AdoRest.Core.retry.RetryPolicy`."""

    mode: RetryMode = Field(default=RetryMode.EXPONENTIAL)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, le=50)
    initial_delay: float = Field(default=DEFAULT_INITIAL_DELAY, ge=0.0, le=60.0)
    max_delay: float = Field(default=DEFAULT_MAX_DELAY, ge=0.0, le=600.0)
    max_total_elapsed: float = Field(default=DEFAULT_MAX_TOTAL_ELAPSED, ge=0.0, le=3600.0)

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, value: object) -> object:
        """Accept mode names in any case."""

        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_options(self) -> RetryOptions:
        """Return the equivalent immutable :class:`RetryOptions`."""

        if self.mode is RetryMode.NONE:
            return RetryOptions.none()
        return RetryOptions(
            mode=self.mode,
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            max_total_elapsed=self.max_total_elapsed,
        )

    model_config = {"validate_assignment": True, "extra": "ignore"}


class LoggingSettings(BaseModel):
    """Logging-related configuration."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    json_logs: bool = Field(default=False, description="Emit JSON lines instead of plain text")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Normalise logging levels and ensure they match the supported set."""

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
        upper = value.upper()
        if upper not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        return upper

    model_config = {"validate_assignment": True}


class AdoSettings(BaseSettings):
    """Top-level settings resolved from ``ADO_*`` environment variables."""

    organization: Optional[str] = Field(default=None, description="Azure DevOps organization name")
    project: Optional[str] = Field(default=None, description="Default project name or id")
    token: Optional[SecretStr] = Field(default=None, description="Personal access token (ADO_TOKEN)")
    artifacts_endpoint: str = Field(default="https://feeds.dev.azure.com")
    work_item_tracking_endpoint: str = Field(default="https://dev.azure.com")

    http: HttpSettings = Field(default_factory=HttpSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="ADO_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("artifacts_endpoint", "work_item_tracking_endpoint")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("https://", "http://")):
            raise ValueError(f"endpoint must be an http(s) URL, got {value!r}")
        return value.rstrip("/")

    @field_validator("organization", "project")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None


_SETTINGS_CACHE: Optional[AdoSettings] = None
_SETTINGS_LOCK = threading.Lock()


def get_settings(*, copy: bool = False) -> AdoSettings:
    """Return memoised :class:`AdoSettings` built from the environment."""

    global _SETTINGS_CACHE  # noqa: PLW0603

    with _SETTINGS_LOCK:
        if _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = AdoSettings()
            logger.debug(
                "settings loaded",
                extra={
                    "organization": _SETTINGS_CACHE.organization,
                    "retry_mode": _SETTINGS_CACHE.retry.mode.value,
                },
            )
        cached = _SETTINGS_CACHE
    if copy:
        return cached.model_copy(deep=True)
    return cached


def reset_settings() -> None:
    """Invalidate the cached settings."""

    global _SETTINGS_CACHE  # noqa: PLW0603

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None
