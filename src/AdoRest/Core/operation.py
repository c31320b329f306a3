# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.operation",
#   "purpose": "Declarative request builder shared by every service operation.",
#   "sections": [
#     {
#       "id": "operation",
#       "name": "Operation",
#       "anchor": "class-operation",
#       "kind": "class"
#     },
#     {
#       "id": "format-query-value",
#       "name": "format_query_value",
#       "anchor": "function-format-query-value",
#       "kind": "function"
#     },
#     {
#       "id": "encode-body",
#       "name": "encode_body",
#       "anchor": "function-encode-body",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Declarative request builder shared by every service operation.

An :class:`Operation` captures one REST call: HTTP method, a path template
below ``/_apis/``, its path parameters, query parameters and body. It renders
an ``httpx.Request``, sends it through the owning client's pipeline, checks the
status against the operation's expected statuses and deserializes the body.

URL layout::

    {endpoint}/{organization}[/{project}]/_apis/{path}?api-version=...

Path parameters are percent-encoded as single segments. Query parameters set
to ``None`` are omitted and booleans render as ``true``/``false``.

Example:
    >>> op = Operation(client, "GET", "packaging/feeds/{feedId}", organization="org", feedId="f1")
    >>> feed = op.query("includeDeletedUpstreams", False).into(Feed)
"""

from __future__ import annotations

import enum
import json
import logging
import string
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Protocol, Tuple, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from .constants import API_VERSION, CONTENT_TYPE, JSON_CONTENT_TYPE, JSON_PATCH_CONTENT_TYPE
from .errors import ConfigurationError, DeserializationError, HttpResponseError
from .models import parse_model, parse_model_list

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SupportsSend(Protocol):
    """The slice of :class:`~AdoRest.Core.client.ServiceClient` an operation needs."""

    endpoint: str
    api_version: Optional[str]

    def send(self, request: httpx.Request) -> httpx.Response:  # pragma: no cover - protocol
        ...


def format_query_value(value: Any) -> str:
    """Render a query value the way the service parses it."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        # Naive values are local time; the service expects an explicit offset.
        return value.astimezone(timezone.utc).isoformat()
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (list, tuple, set)):
        return ",".join(format_query_value(item) for item in value)
    return str(value)


def encode_body(body: Any) -> bytes:
    """Serialize a model, a list of models, or plain JSON data into bytes."""

    def _plain(value: Any) -> Any:
        if isinstance(value, BaseModel):
            to_wire = getattr(value, "to_wire", None)
            if callable(to_wire):
                return to_wire()
            return value.model_dump(mode="json", by_alias=True, exclude_none=True)
        if isinstance(value, (list, tuple)):
            return [_plain(item) for item in value]
        if isinstance(value, dict):
            return {key: _plain(item) for key, item in value.items()}
        return value

    return json.dumps(_plain(body), separators=(",", ":")).encode("utf-8")


def _segment(value: Any, name: str) -> str:
    text = str(value)
    if not text:
        raise ConfigurationError(f"path parameter {name!r} must not be empty")
    return quote(text, safe="")


class Operation:
    """One REST call bound to a service client.

    Args:
        client: Client providing ``endpoint``, ``api_version`` and ``send``.
        method: HTTP method.
        path: Template below ``_apis/`` using ``{name}`` placeholders.
        organization: Azure DevOps organization.
        project: Project name or id; the segment is omitted when ``None``.
        expected: Statuses treated as success.
        **path_params: Values for the placeholders in ``path``.
    """

    def __init__(
        self,
        client: SupportsSend,
        method: str,
        path: str,
        *,
        organization: str,
        project: Optional[str] = None,
        expected: Iterable[int] = (200,),
        **path_params: Any,
    ) -> None:
        self._client = client
        self.method = method.upper()
        self.path = path
        self.organization = organization
        self.project = project
        self.expected = frozenset(expected)
        self.path_params = path_params
        self._query: List[Tuple[str, str]] = []
        self._headers: dict[str, str] = {}
        self._body: Optional[bytes] = None
        self._api_version = client.api_version

    # -- building ----------------------------------------------------------

    def query(self, name: str, value: Any) -> "Operation":
        if value is not None:
            self._query.append((name, format_query_value(value)))
        return self

    def header(self, name: str, value: Optional[str]) -> "Operation":
        if value is not None:
            self._headers[name] = value
        return self

    def api_version(self, version: Optional[str]) -> "Operation":
        self._api_version = version
        return self

    def json(self, body: Any) -> "Operation":
        self._body = encode_body(body)
        self._headers[CONTENT_TYPE] = JSON_CONTENT_TYPE
        return self

    def json_patch(self, body: Any) -> "Operation":
        self._body = encode_body(body)
        self._headers[CONTENT_TYPE] = JSON_PATCH_CONTENT_TYPE
        return self

    def url(self) -> str:
        """Render the absolute URL without the query string."""

        if not self.organization:
            raise ConfigurationError("organization is required")
        names = {name for _, name, _, _ in string.Formatter().parse(self.path) if name}
        missing = names - self.path_params.keys()
        if missing:
            raise ConfigurationError(f"missing path parameters: {sorted(missing)}")
        rendered = self.path.format(
            **{name: _segment(self.path_params[name], name) for name in names}
        )
        parts = [self._client.endpoint.rstrip("/"), _segment(self.organization, "organization")]
        if self.project is not None:
            parts.append(_segment(self.project, "project"))
        parts.append("_apis")
        parts.append(rendered)
        return "/".join(parts)

    def build_request(self) -> httpx.Request:
        params: List[Tuple[str, str]] = []
        if self._api_version:
            params.append((API_VERSION, self._api_version))
        params.extend(self._query)
        return httpx.Request(
            self.method,
            self.url(),
            params=params,
            headers=self._headers,
            content=self._body,
        )

    # -- execution ---------------------------------------------------------

    def send(self) -> httpx.Response:
        """Send through the pipeline and raise :class:`HttpResponseError` on unexpected status."""

        request = self.build_request()
        response = self._client.send(request)
        if response.status_code not in self.expected:
            error = HttpResponseError.from_response(response)
            logger.debug(
                "unexpected status",
                extra={"status": response.status_code, "error_code": error.error_code},
            )
            raise error
        return response

    def _payload(self, response: httpx.Response) -> Any:
        if not response.content:
            raise DeserializationError(
                f"{self.method} {self.path}: empty response body", body=response.content
            )
        try:
            return response.json()
        except ValueError as exc:
            raise DeserializationError(
                f"{self.method} {self.path}: response is not JSON", body=response.content
            ) from exc

    def into(self, model: Type[ModelT]) -> ModelT:
        """Send and parse the body as ``model``."""

        return parse_model(model, self._payload(self.send()))

    def into_list(self, model: Type[ModelT]) -> List[ModelT]:
        """Send and parse a JSON array (or ``{"value": [...]}`` envelope) of ``model``."""

        return parse_model_list(model, self._payload(self.send()))

    def into_json(self) -> Any:
        """Send and return the decoded JSON body."""

        return self._payload(self.send())

    def into_text(self) -> str:
        """Send and return the body as text."""

        return self.send().text

    def into_none(self) -> None:
        """Send and discard the body."""

        self.send()

    def __repr__(self) -> str:
        return f"Operation({self.method} {self.path})"


__all__ = ["Operation", "SupportsSend", "format_query_value", "encode_body"]
