# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.transport",
#   "purpose": "HTTPX transport policy and shared client factory.",
#   "sections": [
#     {
#       "id": "transportpolicy",
#       "name": "TransportPolicy",
#       "anchor": "class-transportpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "get-http-client",
#       "name": "get_http_client",
#       "anchor": "function-get-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "close-http-client",
#       "name": "close_http_client",
#       "anchor": "function-close-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "reset-http-client",
#       "name": "reset_http_client",
#       "anchor": "function-reset-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "create-http-client",
#       "name": "create_http_client",
#       "anchor": "function-create-http-client",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""HTTPX transport policy and shared client factory.

The transport is the terminal link of every pipeline: it hands the prepared
request to an :class:`httpx.Client`, reads the body, and converts low-level
network failures into :class:`~AdoRest.Core.errors.TransportError`.

Key design:
- **Lazy initialization**: the shared client is created on first use, not at
  import time.
- **PID-aware**: if the process forks, the child detects this and rebuilds the
  client on first use to avoid sharing sockets with the parent.
- **Thread-safe**: creation is guarded by a lock; the connection pool is the
  only state shared between concurrent requests.
- **Caller-owned clients**: a client passed to :class:`TransportPolicy` is
  never closed by this module.

Example:
    >>> from AdoRest.Core.transport import TransportPolicy, close_http_client
    >>> transport = TransportPolicy()
    >>> close_http_client()  # at process shutdown or test cleanup
"""

from __future__ import annotations

import logging
import os
import ssl
import threading
from typing import Optional, TYPE_CHECKING

import certifi
import httpx

from .constants import (
    HTTP2_ENABLED,
    HTTP_CONNECT_TIMEOUT,
    HTTP_POOL_TIMEOUT,
    HTTP_READ_TIMEOUT,
    HTTP_WRITE_TIMEOUT,
    KEEPALIVE_EXPIRY,
    MAX_CONNECTIONS,
    MAX_KEEPALIVE_CONNECTIONS,
)
from .errors import TransportError
from .pipeline import NextPolicy, Policy

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .settings import HttpSettings

logger = logging.getLogger(__name__)


# ============================================================================
# Global Client State
# ============================================================================

_client: httpx.Client | None = None
_client_lock = threading.Lock()
_client_bind_pid: int | None = None


# ============================================================================
# Public API
# ============================================================================


def get_http_client() -> httpx.Client:
    """Get or create the shared HTTPX client.

    Behavior:
        - First call: creates the client and binds it to the current PID.
        - Subsequent calls: return the same client (thread-safe).
        - Process forked: the child rebuilds the client on first call.
    """
    global _client, _client_bind_pid

    if _client is not None and _client_bind_pid == os.getpid():
        return _client

    with _client_lock:
        if _client is not None and _client_bind_pid == os.getpid():
            return _client

        if _client is not None and _client_bind_pid != os.getpid():
            logger.debug("Process forked; dropping inherited HTTP client and rebuilding.")
            _client = None

        _client = create_http_client()
        _client_bind_pid = os.getpid()
        logger.debug("HTTP client initialized", extra={"pid": _client_bind_pid})
        return _client


def close_http_client() -> None:
    """Close the shared HTTP client and release its connections.

    Safe to call multiple times or when no client has been created.
    """
    global _client

    with _client_lock:
        if _client is not None:
            try:
                _client.close()
                logger.debug("HTTP client closed")
            finally:
                _client = None


def reset_http_client() -> None:
    """Close the shared client and forget its PID binding (test isolation)."""

    global _client_bind_pid

    close_http_client()
    _client_bind_pid = None


def _create_ssl_context(verify: bool = True) -> ssl.SSLContext:
    """Create an SSL context backed by the certifi bundle."""

    if not verify:
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        logger.warning("TLS verification DISABLED (development only!)")
        return ctx

    ctx = ssl.create_default_context(cafile=certifi.where())
    ctx.check_hostname = True
    ctx.verify_mode = ssl.CERT_REQUIRED
    return ctx


def create_http_client(settings: Optional["HttpSettings"] = None) -> httpx.Client:
    """Create an HTTPX client with per-phase timeouts and bounded pooling.

    Args:
        settings: Optional HTTP settings; module defaults are used when omitted.

    Returns:
        Configured ``httpx.Client``. Redirects are followed because Azure
        DevOps answers some resource URLs with a redirect to blob storage.
    """
    if settings is None:
        timeout = httpx.Timeout(
            connect=HTTP_CONNECT_TIMEOUT,
            read=HTTP_READ_TIMEOUT,
            write=HTTP_WRITE_TIMEOUT,
            pool=HTTP_POOL_TIMEOUT,
        )
        limits = httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            keepalive_expiry=KEEPALIVE_EXPIRY,
        )
        http2 = HTTP2_ENABLED
        trust_env = True
        verify = True
    else:
        timeout = httpx.Timeout(
            connect=settings.timeout_connect,
            read=settings.timeout_read,
            write=settings.timeout_write,
            pool=settings.timeout_pool,
        )
        limits = httpx.Limits(
            max_connections=settings.pool_max_connections,
            max_keepalive_connections=settings.pool_keepalive_max,
            keepalive_expiry=settings.keepalive_expiry,
        )
        http2 = settings.http2
        trust_env = settings.trust_env
        verify = settings.verify_tls

    client = httpx.Client(
        timeout=timeout,
        limits=limits,
        http2=http2,
        follow_redirects=True,
        trust_env=trust_env,
        verify=_create_ssl_context(verify),
    )

    logger.debug(
        "HTTPX client created",
        extra={
            "http2": http2,
            "max_connections": limits.max_connections,
            "max_keepalive": limits.max_keepalive_connections,
        },
    )
    return client


# ============================================================================
# Transport Policy
# ============================================================================


class TransportPolicy(Policy):
    """Terminal policy sending requests with an ``httpx.Client``.

    Args:
        client: Client to send with. When omitted the shared client from
            :func:`get_http_client` is used.
        owns_client: Close ``client`` in :meth:`close`. Clients supplied by
            callers stay open unless they opt in.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        owns_client: bool = False,
    ) -> None:
        self._client = client
        self._owns_client = owns_client and client is not None

    @classmethod
    def from_settings(cls, settings: "HttpSettings") -> "TransportPolicy":
        return cls(create_http_client(settings), owns_client=True)

    @property
    def client(self) -> httpx.Client:
        return self._client if self._client is not None else get_http_client()

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        client = self.client
        try:
            response = client.send(request)
            response.read()
        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError) as exc:
            raise TransportError(f"{request.method} {request.url}: {exc}", retryable=False) from exc
        except httpx.TransportError as exc:
            raise TransportError(f"{request.method} {request.url}: {exc}", retryable=True) from exc
        return response

    def close(self) -> None:
        """Close an owned client; the shared client is left to :func:`close_http_client`."""

        if self._owns_client and self._client is not None:
            self._client.close()

    def __repr__(self) -> str:
        if self._client is None:
            owner = "shared"
        else:
            owner = "owned" if self._owns_client else "external"
        return f"TransportPolicy({owner})"


__all__ = [
    "TransportPolicy",
    "get_http_client",
    "close_http_client",
    "reset_http_client",
    "create_http_client",
]
