"""Exception hierarchy shared by the request pipeline and service clients.

Requests pass through configuration, credential acquisition, transport I/O,
and response deserialization. This module groups those failure modes into a
small hierarchy so callers can react to high-level categories (for example,
an HTTP error status vs. a dropped connection) while still having access to
the status code and server error code when finer-grained handling is required.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from .constants import ERROR_CODE_HEADER

__all__ = [
    "AdoRestError",
    "ConfigurationError",
    "CredentialError",
    "TransportError",
    "HttpResponseError",
    "DeserializationError",
]


class AdoRestError(RuntimeError):
    """Base exception for every failure raised by this package."""


class ConfigurationError(AdoRestError):
    """Raised when settings or client options are invalid."""


class CredentialError(AdoRestError):
    """Raised when no credential is available or a token cannot be obtained."""


class TransportError(AdoRestError):
    """Raised when the request could not be sent or the response not read."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class DeserializationError(AdoRestError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, message: str, *, body: Optional[bytes] = None) -> None:
        super().__init__(message)
        self.body = body


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = json.loads(response.content or b"null")
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


class HttpResponseError(AdoRestError):
    """Raised when the service answers with a status the operation does not expect.

    Attributes:
        status_code: HTTP status returned by the service.
        error_code: Server-provided error code, when one is present.
        response: The ``httpx.Response`` that triggered the error.
    """

    def __init__(
        self,
        status_code: int,
        *,
        error_code: Optional[str] = None,
        message: Optional[str] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.response = response
        self.reason = message
        text = f"HTTP {status_code}"
        if error_code:
            text += f" ({error_code})"
        if message:
            text += f": {message}"
        super().__init__(text)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "HttpResponseError":
        """Build an error from ``response``, extracting the server error code and message.

        Azure DevOps reports failures as ``{"message": ..., "typeKey": ...}``;
        other Azure front ends use ``{"code": ...}`` or ``{"error": {"code": ...}}``.
        The ``x-ms-error-code`` header wins when present.
        """

        body = _error_body(response)
        nested = body.get("error") if isinstance(body.get("error"), dict) else {}
        error_code = (
            response.headers.get(ERROR_CODE_HEADER)
            or body.get("typeKey")
            or body.get("code")
            or nested.get("code")
        )
        message = body.get("message") or nested.get("message")
        return cls(
            response.status_code,
            error_code=str(error_code) if error_code else None,
            message=str(message) if message else None,
            response=response,
        )
# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.errors",
#   "purpose": "Define the exception hierarchy used by the pipeline and service clients",
#   "sections": [
#     {"id": "base", "name": "Base Exceptions", "anchor": "BAS", "kind": "api"},
#     {"id": "transport", "name": "Transport Errors", "anchor": "TRN", "kind": "api"},
#     {"id": "http", "name": "HTTP Response Errors", "anchor": "HTTP", "kind": "api"}
#   ]
# }
# === /NAVMAP ===
