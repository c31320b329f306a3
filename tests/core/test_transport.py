"""Tests for the HTTPX transport policy and shared client.

Tests cover:
- Network failures mapped to TransportError with the right retry flag
- Response bodies read before the policy returns
- Owned vs. caller-supplied client lifetimes
- Shared client singleton and reset
"""

from __future__ import annotations

import httpx
import pytest

from AdoRest.Core.errors import TransportError
from AdoRest.Core.pipeline import Pipeline
from AdoRest.Core.settings import HttpSettings
from AdoRest.Core.transport import (
    TransportPolicy,
    close_http_client,
    create_http_client,
    get_http_client,
)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _request() -> httpx.Request:
    return httpx.Request("GET", "https://dev.azure.com/org/_apis/projects")


def test_response_returned_with_body() -> None:
    client = _client(lambda request: httpx.Response(200, json={"count": 0}))
    pipeline = Pipeline([], TransportPolicy(client))

    response = pipeline.send(_request())

    assert response.status_code == 200
    assert response.json() == {"count": 0}
    client.close()


def test_connect_error_is_retryable() -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(_refuse)

    with pytest.raises(TransportError) as excinfo:
        Pipeline([], TransportPolicy(client)).send(_request())

    assert excinfo.value.retryable
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    client.close()


def test_unsupported_protocol_is_terminal() -> None:
    def _reject(request: httpx.Request) -> httpx.Response:
        raise httpx.UnsupportedProtocol("ftp not supported", request=request)

    client = _client(_reject)

    with pytest.raises(TransportError) as excinfo:
        Pipeline([], TransportPolicy(client)).send(_request())

    assert not excinfo.value.retryable
    client.close()


def test_external_client_left_open() -> None:
    client = _client(lambda request: httpx.Response(204))
    policy = TransportPolicy(client)

    policy.close()

    assert not client.is_closed
    assert "external" in repr(policy)
    client.close()


def test_owned_client_closed() -> None:
    policy = TransportPolicy.from_settings(HttpSettings(timeout_read=5.0))

    policy.close()

    assert policy.client.is_closed
    assert "owned" in repr(policy)


def test_shared_client_singleton() -> None:
    policy = TransportPolicy()

    assert policy.client is get_http_client()
    assert "shared" in repr(policy)

    first = get_http_client()
    close_http_client()
    assert get_http_client() is not first


def test_create_http_client_applies_settings() -> None:
    client = create_http_client(HttpSettings(timeout_connect=2.5, timeout_read=7.0))
    try:
        assert client.timeout.connect == 2.5
        assert client.timeout.read == 7.0
        assert client.follow_redirects
    finally:
        client.close()
