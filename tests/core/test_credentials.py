"""Tests for credential sources.

Tests cover:
- PAT encoding as Basic auth with an empty user name
- Bearer token caching per scope set and refresh before expiry
- Single-flight refresh under concurrent callers
- Invalidation and error wrapping
- Credential selection from ADO_* settings
"""

from __future__ import annotations

import base64
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from AdoRest.Core.credentials import (
    AnonymousCredential,
    BearerTokenCredential,
    Credential,
    PatCredential,
    credential_from_environment,
)
from AdoRest.Core.errors import CredentialError
from AdoRest.Core.settings import AdoSettings

from tests.fixtures.credentials import CountingTokenSource

SCOPES = ("499b84ac-1321-427f-aa17-267ca6975798/.default",)


class TestPatCredential:
    def test_basic_header_with_empty_user(self) -> None:
        header = Credential.from_pat("  secret-pat\n").authorization_header(SCOPES)

        scheme, encoded = header.split(" ", 1)
        assert scheme == "Basic"
        assert base64.b64decode(encoded).decode("utf-8") == ":secret-pat"

    @pytest.mark.parametrize("pat", ["", "   "])
    def test_empty_pat_rejected(self, pat: str) -> None:
        with pytest.raises(CredentialError):
            PatCredential(pat)

    def test_repr_hides_secret(self) -> None:
        assert "secret" not in repr(PatCredential("secret"))

    def test_cannot_refresh(self) -> None:
        assert not PatCredential("x").can_refresh


def test_anonymous_credential_sends_nothing() -> None:
    credential = Credential.unauthenticated()
    assert isinstance(credential, AnonymousCredential)
    assert credential.authorization_header(SCOPES) is None


class TestBearerTokenCredential:
    def test_token_cached_per_scope_set(self, token_source: CountingTokenSource) -> None:
        credential = Credential.from_token_credential(token_source)

        first = credential.authorization_header(SCOPES)
        second = credential.authorization_header(SCOPES)
        other = credential.authorization_header(("other/.default",))

        assert first == second == "Bearer token-1"
        assert other == "Bearer token-2"
        assert token_source.scopes == [SCOPES, ("other/.default",)]

    def test_refreshes_inside_margin(self, token_source: CountingTokenSource) -> None:
        now = [time.time()]
        credential = BearerTokenCredential(token_source, refresh_margin=300, clock=lambda: now[0])

        assert credential.authorization_header(SCOPES) == "Bearer token-1"

        now[0] += 3000
        assert credential.authorization_header(SCOPES) == "Bearer token-1"

        now[0] += 400
        assert credential.authorization_header(SCOPES) == "Bearer token-2"
        assert token_source.calls == 2

    def test_invalidate_forces_refetch(self, token_source: CountingTokenSource) -> None:
        credential = BearerTokenCredential(token_source)
        credential.authorization_header(SCOPES)

        credential.invalidate()

        assert credential.authorization_header(SCOPES) == "Bearer token-2"
        assert credential.can_refresh

    def test_invalidate_keeps_token_refreshed_since_rejection(
        self, token_source: CountingTokenSource
    ) -> None:
        credential = BearerTokenCredential(token_source)
        rejected = credential.authorization_header(SCOPES)

        credential.invalidate(rejected)
        fresh = credential.authorization_header(SCOPES)
        credential.invalidate(rejected)

        assert fresh == "Bearer token-2"
        assert credential.authorization_header(SCOPES) == fresh
        assert token_source.calls == 2

    def test_concurrent_refresh_is_single_flight(self) -> None:
        source = CountingTokenSource(delay=0.05)
        credential = BearerTokenCredential(source)
        barrier = threading.Barrier(8)

        def _header(_: int) -> str:
            barrier.wait()
            return credential.authorization_header(SCOPES)

        with ThreadPoolExecutor(max_workers=8) as pool:
            headers = list(pool.map(_header, range(8)))

        assert source.calls == 1
        assert source.peak_active == 1
        assert set(headers) == {"Bearer token-1"}

    def test_source_failure_wrapped(self) -> None:
        class Broken:
            def get_token(self, *scopes):
                raise OSError("no az login")

        with pytest.raises(CredentialError, match="no az login"):
            BearerTokenCredential(Broken()).authorization_header(SCOPES)

    def test_source_without_get_token_rejected(self) -> None:
        with pytest.raises(CredentialError):
            BearerTokenCredential(object())  # type: ignore[arg-type]


class TestCredentialFromEnvironment:
    def test_pat_from_ado_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ADO_TOKEN", "env-pat")

        credential = credential_from_environment()

        assert isinstance(credential, PatCredential)
        encoded = credential.authorization_header(SCOPES).split(" ", 1)[1]
        assert base64.b64decode(encoded) == b":env-pat"

    def test_explicit_settings_win(self) -> None:
        credential = credential_from_environment(AdoSettings(token="from-settings"))
        assert isinstance(credential, PatCredential)

    def test_missing_identity_package(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "azure.identity", None)

        with pytest.raises(CredentialError, match="azure-identity"):
            credential_from_environment(AdoSettings())
