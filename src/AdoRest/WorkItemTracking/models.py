"""Payload models for work item tracking."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from AdoRest.Core.models import AdoModel

__all__ = [
    "WorkItemExpand",
    "WorkItemRelation",
    "WorkItem",
    "WorkItemReference",
    "WorkItemFieldReference",
    "Wiql",
    "WorkItemQueryResult",
]


class WorkItemExpand(str, enum.Enum):
    """Sections of a work item the service should inline."""

    NONE = "None"
    RELATIONS = "Relations"
    FIELDS = "Fields"
    LINKS = "Links"
    ALL = "All"


class WorkItemRelation(AdoModel):
    """A link from one work item to another item or an external resource."""

    rel: str
    url: str
    attributes: Dict[str, Any] = {}

    @property
    def name(self) -> Optional[str]:
        """Display name of the link type (``attributes.name``)."""

        value = self.attributes.get("name")
        return value if isinstance(value, str) else None


class WorkItem(AdoModel):
    id: Optional[int] = None
    rev: Optional[int] = None
    url: Optional[str] = None
    fields: Dict[str, Any] = {}
    relations: List[WorkItemRelation] = []

    @property
    def title(self) -> Optional[str]:
        return self.fields.get("System.Title")

    @property
    def state(self) -> Optional[str]:
        return self.fields.get("System.State")

    @property
    def work_item_type(self) -> Optional[str]:
        return self.fields.get("System.WorkItemType")


class WorkItemReference(AdoModel):
    id: int
    url: Optional[str] = None


class WorkItemFieldReference(AdoModel):
    reference_name: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None


class Wiql(AdoModel):
    query: str


class WorkItemQueryResult(AdoModel):
    query_type: Optional[str] = None
    query_result_type: Optional[str] = None
    as_of: Optional[datetime] = None
    columns: List[WorkItemFieldReference] = []
    work_items: List[WorkItemReference] = []

    @property
    def ids(self) -> List[int]:
        return [ref.id for ref in self.work_items]
