# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.constants",
#   "purpose": "Request pipeline constants and defaults.",
#   "sections": []
# }
# === /NAVMAP ===

"""Request pipeline constants and defaults.

Defines timeout budgets, connection pooling limits, retry defaults, and the
header/query names shared by the policies and service clients. Values mirror
the defaults of the Azure SDK core pipeline so behaviour is familiar to anyone
who has used the other Azure clients.
"""

#: Package version reported in the User-Agent header
SDK_VERSION = "0.1.0"

#: Package name reported in the User-Agent header
SDK_NAME = "adorest"


# ============================================================================
# Timeout Budgets (seconds)
# ============================================================================

#: Connection establishment timeout
HTTP_CONNECT_TIMEOUT = 10.0

#: Read timeout (time between data packets on established connection)
HTTP_READ_TIMEOUT = 60.0

#: Write timeout (time to send request body)
HTTP_WRITE_TIMEOUT = 30.0

#: Pool timeout (acquiring a connection from the pool)
HTTP_POOL_TIMEOUT = 10.0


# ============================================================================
# Connection Pooling
# ============================================================================

#: Maximum concurrent connections (total across all hosts)
MAX_CONNECTIONS = 100

#: Maximum idle connections kept for reuse
MAX_KEEPALIVE_CONNECTIONS = 20

#: How long to keep idle connections alive (seconds)
KEEPALIVE_EXPIRY = 30.0

#: HTTP/2 requires the optional ``h2`` package; off by default
HTTP2_ENABLED = False


# ============================================================================
# Retry Defaults
# ============================================================================

#: Retries after the initial attempt (total attempts = MAX_RETRIES + 1)
DEFAULT_MAX_RETRIES = 8

#: First backoff delay in seconds
DEFAULT_INITIAL_DELAY = 0.2

#: Ceiling for a single backoff delay, including Retry-After guidance
DEFAULT_MAX_DELAY = 30.0

#: Wall-clock budget across all attempts of one request
DEFAULT_MAX_TOTAL_ELAPSED = 60.0

#: Status codes treated as transient
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


# ============================================================================
# Authentication
# ============================================================================

#: Azure DevOps resource id used when requesting Entra ID tokens
ADO_SCOPE = "499b84ac-1321-427f-aa17-267ca6975798/.default"

#: Refresh bearer tokens this many seconds before they expire
TOKEN_REFRESH_MARGIN_SECONDS = 300


# ============================================================================
# Headers, Query Parameters & Extensions
# ============================================================================

AUTHORIZATION = "Authorization"
USER_AGENT = "User-Agent"
CONTENT_TYPE = "Content-Type"
CLIENT_REQUEST_ID = "x-ms-client-request-id"
ERROR_CODE_HEADER = "x-ms-error-code"
RETRY_AFTER = "Retry-After"

API_VERSION = "api-version"

JSON_CONTENT_TYPE = "application/json"
JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"

#: ``httpx.Request.extensions`` key holding the 1-based attempt number
ATTEMPT_EXTENSION = "ado_attempt"

#: ``httpx.Request.extensions`` key holding per-request pipeline metadata
META_EXTENSION = "ado_pipeline_meta"

#: Pipeline metadata key recording the attempt whose 401 invalidated the token
AUTH_REFRESH_ATTEMPT = "auth_refresh_attempt"


__all__ = [
    "SDK_VERSION",
    "SDK_NAME",
    # Timeouts
    "HTTP_CONNECT_TIMEOUT",
    "HTTP_READ_TIMEOUT",
    "HTTP_WRITE_TIMEOUT",
    "HTTP_POOL_TIMEOUT",
    # Connection pooling
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "KEEPALIVE_EXPIRY",
    "HTTP2_ENABLED",
    # Retry
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_TOTAL_ELAPSED",
    "RETRYABLE_STATUS_CODES",
    # Auth
    "ADO_SCOPE",
    "TOKEN_REFRESH_MARGIN_SECONDS",
    # Names
    "AUTHORIZATION",
    "USER_AGENT",
    "CONTENT_TYPE",
    "CLIENT_REQUEST_ID",
    "ERROR_CODE_HEADER",
    "RETRY_AFTER",
    "API_VERSION",
    "JSON_CONTENT_TYPE",
    "JSON_PATCH_CONTENT_TYPE",
    "ATTEMPT_EXTENSION",
    "META_EXTENSION",
    "AUTH_REFRESH_ATTEMPT",
]
