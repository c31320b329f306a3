"""Core request pipeline: policies, retry, credentials, transport and settings.

This package provides the machinery every Azure DevOps operation funnels through:
- HTTPX: connection-pooled transport with per-phase timeouts
- Tenacity: bounded retry with jittered backoff and Retry-After support
- Pydantic: camelCase payload models and environment-driven settings

Modules:
- pipeline: Policy chain and continuation mechanics
- policies: User-Agent, request id, headers, logging and authentication policies
- retry: Tenacity-based retry policy and transient-failure classification
- transport: Terminal HTTPX policy and shared client factory
- credentials: PAT, bearer-token and anonymous credentials
- operation: Request builder used by service sub-clients
- client: ServiceClient base, ClientOptions and builder
- settings: ADO_* environment settings
- logging_utils: JSON formatter and logging setup

Example:
    >>> from AdoRest.Core import Credential, RetryOptions
    >>> from AdoRest.Artifacts import ArtifactsClient
    >>>
    >>> client = (
    ...     ArtifactsClient.builder(Credential.from_pat("..."))
    ...     .retry(RetryOptions.exponential(max_retries=3))
    ...     .build()
    ... )
    >>> feeds = client.feed_management_client().get_feeds("my-org")
"""

from AdoRest.Core.client import ClientOptions, ServiceClient, ServiceClientBuilder, build_pipeline
from AdoRest.Core.constants import ADO_SCOPE, SDK_NAME, SDK_VERSION
from AdoRest.Core.credentials import (
    AccessToken,
    AnonymousCredential,
    BearerTokenCredential,
    Credential,
    PatCredential,
    credential_from_environment,
)
from AdoRest.Core.errors import (
    AdoRestError,
    ConfigurationError,
    CredentialError,
    DeserializationError,
    HttpResponseError,
    TransportError,
)
from AdoRest.Core.logging_utils import (
    JSONFormatter,
    mask_sensitive_data,
    setup_logging,
    setup_logging_from_settings,
)
from AdoRest.Core.models import AdoModel, JsonPatchOperation
from AdoRest.Core.operation import Operation
from AdoRest.Core.pipeline import NextPolicy, Pipeline, Policy
from AdoRest.Core.policies import (
    AuthenticationPolicy,
    HeadersPolicy,
    LoggingPolicy,
    RequestIdPolicy,
    UserAgentPolicy,
)
from AdoRest.Core.retry import RetryMode, RetryOptions, RetryPolicy
from AdoRest.Core.settings import (
    AdoSettings,
    HttpSettings,
    LoggingSettings,
    RetrySettings,
    get_settings,
    reset_settings,
)
from AdoRest.Core.transport import (
    TransportPolicy,
    close_http_client,
    get_http_client,
    reset_http_client,
)

__all__ = [
    # Pipeline
    "Pipeline",
    "Policy",
    "NextPolicy",
    "AuthenticationPolicy",
    "HeadersPolicy",
    "LoggingPolicy",
    "RequestIdPolicy",
    "UserAgentPolicy",
    "RetryMode",
    "RetryOptions",
    "RetryPolicy",
    "TransportPolicy",
    "get_http_client",
    "close_http_client",
    "reset_http_client",
    # Credentials
    "AccessToken",
    "Credential",
    "PatCredential",
    "BearerTokenCredential",
    "AnonymousCredential",
    "credential_from_environment",
    "ADO_SCOPE",
    # Clients
    "ClientOptions",
    "ServiceClient",
    "ServiceClientBuilder",
    "build_pipeline",
    "Operation",
    "AdoModel",
    "JsonPatchOperation",
    # Errors
    "AdoRestError",
    "ConfigurationError",
    "CredentialError",
    "TransportError",
    "HttpResponseError",
    "DeserializationError",
    # Settings & logging
    "AdoSettings",
    "HttpSettings",
    "RetrySettings",
    "LoggingSettings",
    "get_settings",
    "reset_settings",
    "JSONFormatter",
    "mask_sensitive_data",
    "setup_logging",
    "setup_logging_from_settings",
    "SDK_NAME",
    "SDK_VERSION",
]
