# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.credentials",
#   "purpose": "Credential sources producing Authorization header values.",
#   "sections": [
#     {
#       "id": "accesstoken",
#       "name": "AccessToken",
#       "anchor": "class-accesstoken",
#       "kind": "class"
#     },
#     {
#       "id": "credential",
#       "name": "Credential",
#       "anchor": "class-credential",
#       "kind": "class"
#     },
#     {
#       "id": "patcredential",
#       "name": "PatCredential",
#       "anchor": "class-patcredential",
#       "kind": "class"
#     },
#     {
#       "id": "bearertokencredential",
#       "name": "BearerTokenCredential",
#       "anchor": "class-bearertokencredential",
#       "kind": "class"
#     },
#     {
#       "id": "anonymouscredential",
#       "name": "AnonymousCredential",
#       "anchor": "class-anonymouscredential",
#       "kind": "class"
#     },
#     {
#       "id": "credential-from-environment",
#       "name": "credential_from_environment",
#       "anchor": "function-credential-from-environment",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Credential sources producing Authorization header values.

Azure DevOps accepts two kinds of credential:
- **Personal access tokens** sent as HTTP Basic auth with an empty user name.
- **Entra ID bearer tokens** obtained from any object exposing
  ``get_token(*scopes)`` (for example an ``azure-identity`` credential).

Bearer tokens are cached per scope set and refreshed shortly before expiry.
Refresh is serialized with a lock: when several threads find the cached token
stale at once, exactly one calls ``get_token`` and the others wait and reuse
the token it fetched.
"""

from __future__ import annotations

import abc
import base64
import logging
import threading
import time
from typing import Any, Callable, Dict, NamedTuple, Optional, Protocol, Sequence, Tuple, TYPE_CHECKING

from .constants import TOKEN_REFRESH_MARGIN_SECONDS
from .errors import CredentialError

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .settings import AdoSettings

logger = logging.getLogger(__name__)


class AccessToken(NamedTuple):
    """Bearer token and its expiry as a POSIX timestamp."""

    token: str
    expires_on: int


class TokenSource(Protocol):
    """Anything that can mint bearer tokens, e.g. ``azure.identity.DefaultAzureCredential``."""

    def get_token(self, *scopes: str, **kwargs: Any) -> Any:  # pragma: no cover - protocol
        ...


class Credential(abc.ABC):
    """Produces the ``Authorization`` header for a request, or ``None`` to omit it."""

    @abc.abstractmethod
    def authorization_header(self, scopes: Sequence[str]) -> Optional[str]:
        """Return the header value for ``scopes``."""

    def invalidate(self, header: Optional[str] = None) -> None:
        """Drop cached secrets so the next call fetches a fresh one.

        Args:
            header: The ``Authorization`` value that was rejected. When given,
                only a cache entry still producing that value is dropped.
        """

    @property
    def can_refresh(self) -> bool:
        """Whether :meth:`invalidate` followed by a new request may yield a different header."""
        return False

    @staticmethod
    def from_pat(pat: str) -> "PatCredential":
        return PatCredential(pat)

    @staticmethod
    def from_token_credential(
        source: TokenSource,
        *,
        refresh_margin: float = TOKEN_REFRESH_MARGIN_SECONDS,
    ) -> "BearerTokenCredential":
        return BearerTokenCredential(source, refresh_margin=refresh_margin)

    @staticmethod
    def unauthenticated() -> "AnonymousCredential":
        return AnonymousCredential()


class PatCredential(Credential):
    """Personal access token sent as Basic auth with an empty user name."""

    def __init__(self, pat: str) -> None:
        if not pat or not pat.strip():
            raise CredentialError("personal access token must not be empty")
        encoded = base64.b64encode(f":{pat.strip()}".encode("utf-8")).decode("ascii")
        self._header = f"Basic {encoded}"

    def authorization_header(self, scopes: Sequence[str]) -> Optional[str]:
        return self._header

    def __repr__(self) -> str:
        return "PatCredential(***)"


class AnonymousCredential(Credential):
    """Sends no Authorization header; useful for public endpoints such as badges."""

    def authorization_header(self, scopes: Sequence[str]) -> Optional[str]:
        return None


class BearerTokenCredential(Credential):
    """Cached, refresh-serialized wrapper around a bearer token source.

    Args:
        source: Object exposing ``get_token(*scopes)``; the result must carry
            ``token`` and ``expires_on`` attributes.
        refresh_margin: Seconds before expiry at which a token counts as stale.
        clock: Time function; injectable for tests.
    """

    def __init__(
        self,
        source: TokenSource,
        *,
        refresh_margin: float = TOKEN_REFRESH_MARGIN_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not callable(getattr(source, "get_token", None)):
            raise CredentialError(f"{type(source).__name__} does not provide get_token()")
        self._source = source
        self._refresh_margin = refresh_margin
        self._clock = clock
        self._tokens: Dict[Tuple[str, ...], AccessToken] = {}
        self._refresh_lock = threading.Lock()

    @property
    def can_refresh(self) -> bool:
        return True

    def _is_fresh(self, token: Optional[AccessToken]) -> bool:
        return token is not None and token.expires_on - self._refresh_margin > self._clock()

    def get_token(self, scopes: Sequence[str]) -> AccessToken:
        """Return a cached token for ``scopes``, refreshing it when stale."""

        key = tuple(scopes)
        token = self._tokens.get(key)
        if self._is_fresh(token):
            return token  # type: ignore[return-value]

        with self._refresh_lock:
            # Another thread may have refreshed while we waited.
            token = self._tokens.get(key)
            if self._is_fresh(token):
                return token  # type: ignore[return-value]

            logger.debug("fetching bearer token", extra={"scopes": list(key)})
            try:
                raw = self._source.get_token(*key)
            except CredentialError:
                raise
            except Exception as exc:
                raise CredentialError(f"failed to acquire token: {exc}") from exc
            token = AccessToken(str(raw.token), int(raw.expires_on))
            self._tokens[key] = token
            return token

    def authorization_header(self, scopes: Sequence[str]) -> Optional[str]:
        return f"Bearer {self.get_token(scopes).token}"

    def invalidate(self, header: Optional[str] = None) -> None:
        with self._refresh_lock:
            if header is None:
                self._tokens.clear()
                return
            # A token refreshed by another caller after the rejection stays cached.
            for key, token in list(self._tokens.items()):
                if f"Bearer {token.token}" == header:
                    del self._tokens[key]

    def __repr__(self) -> str:
        return f"BearerTokenCredential({type(self._source).__name__})"


def credential_from_environment(settings: Optional["AdoSettings"] = None) -> Credential:
    """Pick a credential the way the command-line tools do.

    A PAT in ``ADO_TOKEN`` wins. Otherwise an ``azure-identity``
    ``DefaultAzureCredential`` is used, which covers the Azure CLI, managed
    identity, and environment service principals.

    Raises:
        CredentialError: When no PAT is set and ``azure-identity`` is not installed.
    """
    if settings is None:
        from .settings import get_settings

        settings = get_settings()

    if settings.token is not None and settings.token.get_secret_value().strip():
        logger.debug("Using personal access token from settings")
        return PatCredential(settings.token.get_secret_value())

    try:
        from azure.identity import DefaultAzureCredential
    except ImportError as exc:
        raise CredentialError(
            "No ADO_TOKEN set and azure-identity is not installed; "
            "install the 'identity' extra or provide a personal access token"
        ) from exc

    logger.debug("Using DefaultAzureCredential")
    return BearerTokenCredential(DefaultAzureCredential())


__all__ = [
    "AccessToken",
    "TokenSource",
    "Credential",
    "PatCredential",
    "AnonymousCredential",
    "BearerTokenCredential",
    "credential_from_environment",
]
