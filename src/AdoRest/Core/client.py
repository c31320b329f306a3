# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.client",
#   "purpose": "Service client base, options and builder.",
#   "sections": [
#     {
#       "id": "clientoptions",
#       "name": "ClientOptions",
#       "anchor": "class-clientoptions",
#       "kind": "class"
#     },
#     {
#       "id": "build-pipeline",
#       "name": "build_pipeline",
#       "anchor": "function-build-pipeline",
#       "kind": "function"
#     },
#     {
#       "id": "serviceclient",
#       "name": "ServiceClient",
#       "anchor": "class-serviceclient",
#       "kind": "class"
#     },
#     {
#       "id": "subclient",
#       "name": "SubClient",
#       "anchor": "class-subclient",
#       "kind": "class"
#     },
#     {
#       "id": "serviceclientbuilder",
#       "name": "ServiceClientBuilder",
#       "anchor": "class-serviceclientbuilder",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Service client base, options and builder.

A :class:`ServiceClient` owns one :class:`~AdoRest.Core.pipeline.Pipeline`
assembled in a fixed order::

    UserAgentPolicy, RequestIdPolicy
    + client per-call policies + options per-call policies
    + RetryPolicy
    + client per-retry policies (authentication) + options per-retry policies
    + LoggingPolicy
    + TransportPolicy

Per-call policies run once per operation; per-retry policies run once per
attempt. Service clients (Artifacts, WorkItemTracking) subclass
:class:`ServiceClient` and only add their default endpoint, api-version and
sub-client accessors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Generic, List, Optional, Sequence, Type, TypeVar, TYPE_CHECKING

import httpx

from .constants import ADO_SCOPE, SDK_NAME, SDK_VERSION
from .credentials import Credential
from .errors import ConfigurationError
from .operation import Operation
from .pipeline import Pipeline, Policy
from .policies import (
    AuthenticationPolicy,
    HeadersPolicy,
    LoggingPolicy,
    RequestIdPolicy,
    UserAgentPolicy,
)
from .retry import RetryOptions, RetryPolicy
from .transport import TransportPolicy

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .settings import AdoSettings, HttpSettings

logger = logging.getLogger(__name__)


@dataclass
class ClientOptions:
    """Pipeline configuration shared by every service client.

    Attributes:
        retry: Retry behaviour for the retry policy.
        per_call_policies: Extra policies run once per operation, before retry.
        per_retry_policies: Extra policies run once per attempt, after authentication.
        transport: Caller-owned ``httpx.Client``; never closed by the library.
        http_settings: Settings for a client-owned ``httpx.Client`` when
            ``transport`` is not given. The shared client is used when both are ``None``.
        application_id: Prefix for the ``User-Agent`` header.
        headers: Fixed headers added to every request.
        sleep: Sleep function used between retries.
    """

    retry: RetryOptions = field(default_factory=RetryOptions)
    per_call_policies: List[Policy] = field(default_factory=list)
    per_retry_policies: List[Policy] = field(default_factory=list)
    transport: Optional[httpx.Client] = None
    http_settings: Optional["HttpSettings"] = None
    application_id: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    sleep: Optional[Callable[[float], None]] = None

    @classmethod
    def from_settings(cls, settings: "AdoSettings") -> "ClientOptions":
        return cls(
            retry=settings.retry.to_options(),
            http_settings=settings.http,
            application_id=settings.http.user_agent_suffix,
            headers=dict(settings.http.extra_headers),
        )

    def with_retry(self, retry: RetryOptions) -> "ClientOptions":
        return replace(self, retry=retry)


def build_pipeline(
    options: ClientOptions,
    *,
    per_call: Sequence[Policy] = (),
    per_retry: Sequence[Policy] = (),
    transport: Optional[Policy] = None,
    sdk_name: str = SDK_NAME,
    sdk_version: str = SDK_VERSION,
) -> Pipeline:
    """Assemble a pipeline from client-specific and option-supplied policies."""

    retry_policy = (
        RetryPolicy(options.retry, sleep=options.sleep)
        if options.sleep is not None
        else RetryPolicy(options.retry)
    )
    policies: List[Policy] = [
        UserAgentPolicy(sdk_name, sdk_version, options.application_id),
        RequestIdPolicy(),
        *per_call,
        *options.per_call_policies,
        retry_policy,
        *per_retry,
        *options.per_retry_policies,
        LoggingPolicy(),
    ]
    if transport is None:
        if options.transport is not None:
            transport = TransportPolicy(options.transport)
        elif options.http_settings is not None:
            transport = TransportPolicy.from_settings(options.http_settings)
        else:
            transport = TransportPolicy()
    return Pipeline(policies, transport)


class ServiceClient:
    """Base for service clients: endpoint, credential, scopes and pipeline.

    Args:
        credential: Source of the ``Authorization`` header.
        endpoint: Service root, e.g. ``https://dev.azure.com``.
        scopes: Token scopes requested from bearer credentials.
        api_version: Value sent as ``api-version`` on every operation.
        options: Pipeline configuration.
    """

    DEFAULT_ENDPOINT: str = "https://dev.azure.com"
    DEFAULT_API_VERSION: Optional[str] = None

    def __init__(
        self,
        credential: Credential,
        *,
        endpoint: Optional[str] = None,
        scopes: Optional[Sequence[str]] = None,
        api_version: Optional[str] = None,
        options: Optional[ClientOptions] = None,
    ) -> None:
        if not isinstance(credential, Credential):
            raise ConfigurationError(
                f"credential must be a Credential, got {type(credential).__name__}"
            )
        endpoint = (endpoint or self.DEFAULT_ENDPOINT).rstrip("/")
        if not endpoint.startswith(("https://", "http://")):
            raise ConfigurationError(f"endpoint must be an http(s) URL, got {endpoint!r}")
        self.endpoint = endpoint
        self.credential = credential
        self.scopes = tuple(scopes) if scopes else (ADO_SCOPE,)
        self.api_version = api_version or self.DEFAULT_API_VERSION
        self.options = options or ClientOptions()
        self.pipeline = build_pipeline(
            self.options,
            per_call=self._per_call_policies(),
            per_retry=[AuthenticationPolicy(credential, self.scopes)],
        )

    def _per_call_policies(self) -> List[Policy]:
        if self.options.headers:
            return [HeadersPolicy(self.options.headers)]
        return []

    @classmethod
    def builder(cls, credential: Credential) -> "ServiceClientBuilder":
        return ServiceClientBuilder(credential, client_cls=cls)

    @classmethod
    def from_settings(
        cls, credential: Optional[Credential] = None, settings: Optional["AdoSettings"] = None
    ):
        """Build a client from :class:`~AdoRest.Core.settings.AdoSettings` and the environment."""

        from .credentials import credential_from_environment
        from .settings import get_settings

        settings = settings or get_settings()
        credential = credential or credential_from_environment(settings)
        return cls(
            credential,
            endpoint=cls._endpoint_from_settings(settings),
            options=ClientOptions.from_settings(settings),
        )

    @classmethod
    def _endpoint_from_settings(cls, settings: "AdoSettings") -> Optional[str]:
        return None

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send ``request`` through the pipeline."""

        return self.pipeline.send(request)

    def close(self) -> None:
        close = getattr(self.pipeline.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint={self.endpoint!r})"


class SubClient:
    """Group of related operations sharing one parent client's pipeline."""

    def __init__(self, client: ServiceClient) -> None:
        self._client = client

    @property
    def client(self) -> ServiceClient:
        return self._client

    def _operation(
        self,
        method: str,
        path: str,
        organization: str,
        project: Optional[str] = None,
        *,
        expected: Sequence[int] = (200,),
        **path_params: object,
    ) -> Operation:
        return Operation(
            self._client,
            method,
            path,
            organization=organization,
            project=project,
            expected=expected,
            **path_params,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._client!r})"


ClientT = TypeVar("ClientT", bound=ServiceClient)


class ServiceClientBuilder(Generic[ClientT]):
    """Fluent builder for a :class:`ServiceClient` subclass."""

    def __init__(self, credential: Credential, *, client_cls: Type[ClientT]) -> None:
        self._credential = credential
        self._client_cls = client_cls
        self._endpoint: Optional[str] = None
        self._scopes: Optional[Sequence[str]] = None
        self._api_version: Optional[str] = None
        self._options = ClientOptions()

    def endpoint(self, endpoint: str) -> "ServiceClientBuilder[ClientT]":
        self._endpoint = endpoint
        return self

    def scopes(self, scopes: Sequence[str]) -> "ServiceClientBuilder[ClientT]":
        self._scopes = tuple(scopes)
        return self

    def api_version(self, api_version: str) -> "ServiceClientBuilder[ClientT]":
        self._api_version = api_version
        return self

    def retry(self, retry: RetryOptions) -> "ServiceClientBuilder[ClientT]":
        self._options = replace(self._options, retry=retry)
        return self

    def transport(self, client: httpx.Client) -> "ServiceClientBuilder[ClientT]":
        self._options = replace(self._options, transport=client)
        return self

    def per_call_policies(self, policies: Sequence[Policy]) -> "ServiceClientBuilder[ClientT]":
        self._options = replace(self._options, per_call_policies=list(policies))
        return self

    def per_retry_policies(self, policies: Sequence[Policy]) -> "ServiceClientBuilder[ClientT]":
        self._options = replace(self._options, per_retry_policies=list(policies))
        return self

    def options(self, options: ClientOptions) -> "ServiceClientBuilder[ClientT]":
        self._options = options
        return self

    def build(self) -> ClientT:
        return self._client_cls(
            self._credential,
            endpoint=self._endpoint,
            scopes=self._scopes,
            api_version=self._api_version,
            options=self._options,
        )


__all__ = ["ClientOptions", "ServiceClient", "SubClient", "ServiceClientBuilder", "build_pipeline"]
