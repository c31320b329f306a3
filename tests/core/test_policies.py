"""Tests for header, logging and authentication policies."""

from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import httpx
import pytest

from AdoRest.Core.constants import ADO_SCOPE, ATTEMPT_EXTENSION, META_EXTENSION
from AdoRest.Core.credentials import BearerTokenCredential, Credential
from AdoRest.Core.pipeline import NextPolicy, Pipeline, Policy
from AdoRest.Core.policies import (
    AuthenticationPolicy,
    HeadersPolicy,
    LoggingPolicy,
    RequestIdPolicy,
    UserAgentPolicy,
    redact_url,
)
from AdoRest.Core.retry import RetryOptions, RetryPolicy

from tests.fixtures.credentials import CountingTokenSource


class Capture(Policy):
    """Terminal policy answering with scripted statuses and keeping header snapshots."""

    def __init__(self, statuses: Optional[List[int]] = None) -> None:
        self.statuses = list(statuses or [200])
        self.seen: List[httpx.Headers] = []
        self.attempts: List[Optional[int]] = []

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        self.seen.append(httpx.Headers(request.headers))
        self.attempts.append(request.extensions.get(ATTEMPT_EXTENSION))
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return httpx.Response(status, request=request)


SCOPES = (ADO_SCOPE,)


def _auth_pipeline(credential: Credential, transport: Policy, sleeps: List[float]) -> Pipeline:
    retry = RetryPolicy(RetryOptions.fixed(0.0, max_retries=3), sleep=sleeps.append)
    return Pipeline([retry, AuthenticationPolicy(credential)], transport)


def _request(**headers: str) -> httpx.Request:
    return httpx.Request(
        "GET", "https://dev.azure.com/org/_apis/projects?api-version=7.1", headers=headers
    )


class TestUserAgentPolicy:
    def test_sets_sdk_user_agent(self) -> None:
        capture = Capture()
        Pipeline([UserAgentPolicy("adorest", "1.2.3")], capture).send(_request())

        agent = capture.seen[0]["User-Agent"]
        assert agent.startswith("azsdk-python-adorest/1.2.3 Python/")

    def test_application_id_prefix(self) -> None:
        capture = Capture()
        Pipeline([UserAgentPolicy(application_id="release-bot")], capture).send(_request())

        assert capture.seen[0]["User-Agent"].startswith("release-bot azsdk-python-")

    def test_explicit_user_agent_kept(self) -> None:
        capture = Capture()
        Pipeline([UserAgentPolicy()], capture).send(_request(**{"User-Agent": "custom/1"}))

        assert capture.seen[0]["User-Agent"] == "custom/1"


class TestRequestIdPolicy:
    def test_generates_uuid(self) -> None:
        capture = Capture()
        Pipeline([RequestIdPolicy()], capture).send(_request())

        uuid.UUID(capture.seen[0]["x-ms-client-request-id"])

    def test_keeps_caller_id(self) -> None:
        capture = Capture()
        Pipeline([RequestIdPolicy()], capture).send(
            _request(**{"x-ms-client-request-id": "abc"})
        )

        assert capture.seen[0]["x-ms-client-request-id"] == "abc"


def test_headers_policy_does_not_override() -> None:
    capture = Capture()
    policy = HeadersPolicy({"X-TFS-FedAuthRedirect": "Suppress", "Accept": "application/json"})

    Pipeline([policy], capture).send(_request(Accept="text/plain"))

    assert capture.seen[0]["X-TFS-FedAuthRedirect"] == "Suppress"
    assert capture.seen[0]["Accept"] == "text/plain"


class TestLoggingPolicy:
    def test_records_elapsed_time_and_extras(self, caplog: pytest.LogCaptureFixture) -> None:
        log = logging.getLogger("tests.logging_policy")
        request = _request(**{"x-ms-client-request-id": "rid-1"})
        request.extensions[ATTEMPT_EXTENSION] = 2

        with caplog.at_level(logging.DEBUG, logger="tests.logging_policy"):
            Pipeline([LoggingPolicy(log)], Capture([404])).send(request)

        assert request.extensions[META_EXTENSION]["elapsed_ms"] >= 0.0
        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.status == 404
        assert record.attempt == 2
        assert record.request_id == "rid-1"
        assert "api-version" not in record.getMessage()

    def test_logs_and_reraises_failures(self, caplog: pytest.LogCaptureFixture) -> None:
        class Failing(Policy):
            def send(self, request, next_policy):
                raise ConnectionError("reset")

        log = logging.getLogger("tests.logging_policy")
        with caplog.at_level(logging.DEBUG, logger="tests.logging_policy"):
            with pytest.raises(ConnectionError):
                Pipeline([LoggingPolicy(log)], Failing()).send(_request())

        assert caplog.records[-1].levelno == logging.WARNING


def test_redact_url_drops_query() -> None:
    assert (
        redact_url("https://dev.azure.com/org/_apis/x?api-version=7.1&token=s#frag")
        == "https://dev.azure.com/org/_apis/x"
    )


class TestAuthenticationPolicy:
    def test_pat_header_set(self) -> None:
        capture = Capture()
        Pipeline([AuthenticationPolicy(Credential.from_pat("p"))], capture).send(_request())

        assert capture.seen[0]["Authorization"].startswith("Basic ")

    def test_anonymous_removes_header(self) -> None:
        capture = Capture()
        Pipeline([AuthenticationPolicy(Credential.unauthenticated())], capture).send(
            _request(Authorization="Basic stale")
        )

        assert "Authorization" not in capture.seen[0]

    def test_bearer_401_resent_on_next_attempt(
        self, token_source: CountingTokenSource, sleeps: List[float]
    ) -> None:
        capture = Capture([401, 200])
        credential = BearerTokenCredential(token_source)

        response = _auth_pipeline(credential, capture, sleeps).send(_request())

        assert response.status_code == 200
        assert [headers["Authorization"] for headers in capture.seen] == [
            "Bearer token-1",
            "Bearer token-2",
        ]
        assert capture.attempts == [1, 2]
        assert sleeps == [0.0]

    def test_second_401_returned(
        self, token_source: CountingTokenSource, sleeps: List[float]
    ) -> None:
        capture = Capture([401])
        credential = BearerTokenCredential(token_source)

        response = _auth_pipeline(credential, capture, sleeps).send(_request())

        assert response.status_code == 401
        assert capture.attempts == [1, 2]
        assert token_source.calls == 2

    def test_401_without_retry_policy_sent_once(self, token_source: CountingTokenSource) -> None:
        capture = Capture([401])
        credential = BearerTokenCredential(token_source)

        response = Pipeline([AuthenticationPolicy(credential)], capture).send(_request())

        assert response.status_code == 401
        assert len(capture.seen) == 1
        assert credential.authorization_header(SCOPES) == "Bearer token-2"

    def test_pat_401_not_resent(self, sleeps: List[float]) -> None:
        capture = Capture([401])

        response = _auth_pipeline(Credential.from_pat("p"), capture, sleeps).send(_request())

        assert response.status_code == 401
        assert len(capture.seen) == 1
        assert sleeps == []

    def test_concurrent_401s_share_one_refresh(self) -> None:
        source = CountingTokenSource()
        credential = BearerTokenCredential(source)
        credential.authorization_header(SCOPES)
        workers = 6
        barrier = threading.Barrier(workers)

        class StaleTokenRejected(Policy):
            def send(self, request, next_policy):
                if request.headers["Authorization"] == "Bearer token-1":
                    barrier.wait(timeout=5)
                    return httpx.Response(401, request=request)
                return httpx.Response(200, request=request)

        pipeline = _auth_pipeline(credential, StaleTokenRejected(), [])

        with ThreadPoolExecutor(max_workers=workers) as pool:
            statuses = list(pool.map(lambda _: pipeline.send(_request()).status_code, range(workers)))

        assert statuses == [200] * workers
        assert source.calls == 2

    def test_scopes_passed_to_source(self, token_source: CountingTokenSource) -> None:
        policy = AuthenticationPolicy(BearerTokenCredential(token_source), scopes=["custom/.default"])

        Pipeline([policy], Capture()).send(_request())

        assert token_source.scopes == [("custom/.default",)]
