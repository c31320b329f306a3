"""Helpers for walking work item links.

Link type reference names follow
https://learn.microsoft.com/en-us/azure/devops/boards/queries/link-type-reference
"""

from __future__ import annotations

from typing import List
from urllib.parse import urlsplit

from AdoRest.Core.errors import DeserializationError

from .models import WorkItem, WorkItemRelation

__all__ = [
    "CHILD_RELATION_TYPE",
    "PARENT_RELATION_TYPE",
    "RELATED_RELATION_TYPE",
    "work_item_id_from_url",
    "work_item_relations",
    "relation_name",
]

CHILD_RELATION_TYPE = "System.LinkTypes.Hierarchy-Forward"
PARENT_RELATION_TYPE = "System.LinkTypes.Hierarchy-Reverse"
RELATED_RELATION_TYPE = "System.LinkTypes.Related"


def work_item_id_from_url(url: str) -> int:
    """Extract the id from ``.../_apis/wit/workItems/<id>``.

    Raises:
        DeserializationError: When the last path segment is not an integer.
    """

    segment = urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1]
    try:
        return int(segment)
    except ValueError as exc:
        raise DeserializationError(f"Failed to parse work item id from url: {url}") from exc


def work_item_relations(work_item: WorkItem, relation_type: str) -> List[int]:
    """Ids of items linked to ``work_item`` by ``relation_type``.

    Relations whose URL does not end in a work item id (hyperlinks, artifact
    links) are skipped.
    """

    ids: List[int] = []
    for relation in work_item.relations:
        if relation.rel != relation_type:
            continue
        try:
            ids.append(work_item_id_from_url(relation.url))
        except DeserializationError:
            continue
    return ids


def relation_name(relation: WorkItemRelation) -> str:
    return relation.name or "<unknown>"
