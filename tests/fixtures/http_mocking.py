"""
HTTP mocking fixtures for hermetic pipeline testing.

Provides an HTTPX MockTransport handler that replays queued responses and
records every request it receives, plus a response builder and a factory for
service clients wired to the mock transport. No test touches the network.
"""

from __future__ import annotations

import json
from collections import deque
from typing import Any, Callable, Deque, Generator, List, Optional, Union

import httpx
import pytest

from AdoRest.Core.credentials import Credential
from AdoRest.Core.retry import RetryOptions

Outcome = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class MockResponseBuilder:
    """Builder for constructing mock HTTP responses with fluent API."""

    def __init__(self, status_code: int = 200, content: bytes = b""):
        self.status_code = status_code
        self.content = content
        self.headers: dict[str, str] = {}

    def with_status(self, code: int) -> MockResponseBuilder:
        self.status_code = code
        return self

    def with_json(self, data: Any) -> MockResponseBuilder:
        """Set response content as JSON."""
        self.content = json.dumps(data).encode("utf-8")
        self.headers["content-type"] = "application/json"
        return self

    def with_header(self, name: str, value: str) -> MockResponseBuilder:
        self.headers[name] = value
        return self

    def build(self) -> httpx.Response:
        return httpx.Response(
            status_code=self.status_code,
            content=self.content,
            headers=self.headers,
        )


def json_response(data: Any, status_code: int = 200, **headers: str) -> httpx.Response:
    builder = MockResponseBuilder(status_code).with_json(data)
    for name, value in headers.items():
        builder.with_header(name.replace("_", "-"), value)
    return builder.build()


class RecordingTransport:
    """MockTransport handler replaying queued outcomes and recording requests.

    Queued outcomes are consumed in order: a response is returned, an exception
    is raised, a callable is invoked with the request. Once the queue is empty
    the ``default`` outcome (if any) answers every request.
    """

    def __init__(self, default: Optional[Outcome] = None) -> None:
        self._queue: Deque[Outcome] = deque()
        self.default = default
        self.requests: List[httpx.Request] = []

    def queue(self, *outcomes: Outcome) -> "RecordingTransport":
        self._queue.extend(outcomes)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self._queue:
            outcome = self._queue.popleft()
        elif self.default is not None:
            outcome = self.default
        else:
            raise AssertionError(f"unexpected request {request.method} {request.url}")
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        return outcome(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def sleeps() -> List[float]:
    """Delays requested by retry policies; pass ``sleeps.append`` as the sleep function."""
    return []


@pytest.fixture
def make_client(
    recording_transport: RecordingTransport, sleeps: List[float]
) -> Generator[Callable[..., Any], None, None]:
    """Factory building a service client whose transport is ``recording_transport``.

    Example:
        def test_get_feed(make_client, recording_transport):
            recording_transport.queue(json_response({"id": "f1"}))
            client = make_client(ArtifactsClient)
            client.feed_management_client().get_feed("org", "f1")
    """

    httpx_client = recording_transport.client()

    def _factory(
        client_cls: type,
        *,
        credential: Optional[Credential] = None,
        retry: Optional[RetryOptions] = None,
        **option_kwargs: Any,
    ) -> Any:
        from AdoRest.Core.client import ClientOptions

        options = ClientOptions(
            retry=retry or RetryOptions.fixed(0.0, max_retries=2),
            transport=httpx_client,
            sleep=sleeps.append,
            **option_kwargs,
        )
        return client_cls(credential or Credential.from_pat("test-pat"), options=options)

    yield _factory
    httpx_client.close()
