# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.policies",
#   "purpose": "Header, telemetry and authentication policies.",
#   "sections": [
#     {
#       "id": "useragentpolicy",
#       "name": "UserAgentPolicy",
#       "anchor": "class-useragentpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "requestidpolicy",
#       "name": "RequestIdPolicy",
#       "anchor": "class-requestidpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "headerspolicy",
#       "name": "HeadersPolicy",
#       "anchor": "class-headerspolicy",
#       "kind": "class"
#     },
#     {
#       "id": "loggingpolicy",
#       "name": "LoggingPolicy",
#       "anchor": "class-loggingpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "authenticationpolicy",
#       "name": "AuthenticationPolicy",
#       "anchor": "class-authenticationpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "redact-url",
#       "name": "redact_url",
#       "anchor": "function-redact-url",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Header, telemetry and authentication policies.

These are the policies a service client installs around the retry policy:
- :class:`UserAgentPolicy` and :class:`RequestIdPolicy` run once per call.
- :class:`AuthenticationPolicy` runs once per attempt so every retry carries a
  current token.
- :class:`LoggingPolicy` sits next to the transport and times each attempt.
"""

from __future__ import annotations

import logging
import platform
import time
import uuid
from typing import Mapping, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

import httpx

from .constants import (
    ADO_SCOPE,
    ATTEMPT_EXTENSION,
    AUTH_REFRESH_ATTEMPT,
    AUTHORIZATION,
    CLIENT_REQUEST_ID,
    META_EXTENSION,
    SDK_NAME,
    SDK_VERSION,
    USER_AGENT,
)
from .credentials import Credential
from .pipeline import NextPolicy, Policy

logger = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Strip query string and fragment, keeping scheme, host and path."""

    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def pipeline_meta(request: httpx.Request) -> dict:
    """Return the mutable per-request metadata dict, creating it on first use."""

    meta = request.extensions.get(META_EXTENSION)
    if meta is None:
        meta = {}
        request.extensions[META_EXTENSION] = meta
    return meta


class UserAgentPolicy(Policy):
    """Set the ``User-Agent`` header unless the caller already supplied one."""

    def __init__(
        self,
        sdk_name: str = SDK_NAME,
        sdk_version: str = SDK_VERSION,
        application_id: Optional[str] = None,
    ) -> None:
        agent = (
            f"azsdk-python-{sdk_name}/{sdk_version} "
            f"Python/{platform.python_version()} ({platform.platform(terse=True)})"
        )
        if application_id:
            agent = f"{application_id} {agent}"
        self.user_agent = agent

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        if USER_AGENT not in request.headers or request.headers[USER_AGENT].startswith("python-httpx/"):
            request.headers[USER_AGENT] = self.user_agent
        return next_policy(request)


class RequestIdPolicy(Policy):
    """Stamp a client request id so service-side traces can be correlated."""

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        if CLIENT_REQUEST_ID not in request.headers:
            request.headers[CLIENT_REQUEST_ID] = str(uuid.uuid4())
        return next_policy(request)


class HeadersPolicy(Policy):
    """Add fixed headers to every request without overriding explicit ones."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self.headers = dict(headers)

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        for name, value in self.headers.items():
            request.headers.setdefault(name, value)
        return next_policy(request)

    def __repr__(self) -> str:
        return f"HeadersPolicy({sorted(self.headers)!r})"


class LoggingPolicy(Policy):
    """Log one line per attempt with method, redacted URL, status and timing."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._logger = log or logger

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        attempt = request.extensions.get(ATTEMPT_EXTENSION, 1)
        url = redact_url(str(request.url))
        request_id = request.headers.get(CLIENT_REQUEST_ID)
        started = time.perf_counter()
        try:
            response = next_policy(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            pipeline_meta(request)["elapsed_ms"] = elapsed_ms
            self._logger.warning(
                "%s %s failed after %.1f ms: %s",
                request.method,
                url,
                elapsed_ms,
                exc,
                extra={"attempt": attempt, "request_id": request_id, "elapsed_ms": elapsed_ms},
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        pipeline_meta(request)["elapsed_ms"] = elapsed_ms
        level = logging.DEBUG if response.status_code < 400 else logging.INFO
        self._logger.log(
            level,
            "%s %s -> %d (%.1f ms)",
            request.method,
            url,
            response.status_code,
            elapsed_ms,
            extra={
                "attempt": attempt,
                "request_id": request_id,
                "status": response.status_code,
                "elapsed_ms": elapsed_ms,
            },
        )
        return response


class AuthenticationPolicy(Policy):
    """Inject the ``Authorization`` header from a credential on every attempt.

    A 401 answered to a refreshable credential invalidates the rejected token
    and records the attempt number under ``AUTH_REFRESH_ATTEMPT`` in the
    pipeline metadata. The response is returned as is; the retry policy treats
    that one 401 as retryable, so the fresh token goes out on the next counted
    attempt. This happens at most once per request.
    """

    def __init__(self, credential: Credential, scopes: Sequence[str] = (ADO_SCOPE,)) -> None:
        self.credential = credential
        self.scopes = tuple(scopes)

    def _authorize(self, request: httpx.Request) -> Optional[str]:
        header = self.credential.authorization_header(self.scopes)
        if header is None:
            request.headers.pop(AUTHORIZATION, None)
        else:
            request.headers[AUTHORIZATION] = header
        return header

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        header = self._authorize(request)
        response = next_policy(request)
        if response.status_code == 401 and header is not None and self.credential.can_refresh:
            meta = pipeline_meta(request)
            if AUTH_REFRESH_ATTEMPT not in meta:
                logger.info("401 received; invalidating cached token")
                self.credential.invalidate(header)
                meta[AUTH_REFRESH_ATTEMPT] = request.extensions.get(ATTEMPT_EXTENSION, 1)
        return response

    def __repr__(self) -> str:
        return f"AuthenticationPolicy({self.credential!r}, scopes={list(self.scopes)!r})"


__all__ = [
    "UserAgentPolicy",
    "RequestIdPolicy",
    "HeadersPolicy",
    "LoggingPolicy",
    "AuthenticationPolicy",
    "redact_url",
    "pipeline_meta",
]
