"""Base model for Azure DevOps payloads.

The REST API speaks camelCase JSON and adds fields between API versions. Models
therefore alias their snake_case attributes to camelCase, accept either name on
input, and keep unknown fields instead of rejecting them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import DeserializationError

__all__ = ["AdoModel", "JsonPatchOperation", "parse_model", "parse_model_list"]

ModelT = TypeVar("ModelT", bound=BaseModel)


class AdoModel(BaseModel):
    """camelCase-aliased model tolerant of fields it does not declare."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON the service expects, omitting unset ``None`` fields."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class JsonPatchOperation(AdoModel):
    """One RFC 6902 operation as accepted by ``application/json-patch+json`` endpoints."""

    op: str
    path: str
    value: Any = None
    from_: Optional[str] = Field(default=None, alias="from")

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"op": self.op, "path": self.path}
        if self.from_ is not None:
            payload["from"] = self.from_
        if self.op not in ("remove", "move", "copy") or self.value is not None:
            payload["value"] = self.value
        return payload


def parse_model(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` as ``model``, raising :class:`DeserializationError` on mismatch."""

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DeserializationError(f"invalid {model.__name__} payload: {exc}") from exc


def parse_model_list(model: Type[ModelT], payload: Any) -> List[ModelT]:
    """Validate a list payload, accepting the ``{"count": n, "value": [...]}`` envelope."""

    if isinstance(payload, dict) and "value" in payload:
        payload = payload["value"]
    if not isinstance(payload, list):
        raise DeserializationError(f"expected a list of {model.__name__}, got {type(payload).__name__}")
    return [parse_model(model, item) for item in payload]
