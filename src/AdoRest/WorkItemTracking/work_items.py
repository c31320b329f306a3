"""Work item reads and WIQL queries."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterator, List, Optional, Sequence, Union

from AdoRest.Core.client import SubClient
from AdoRest.Core.errors import ConfigurationError
from AdoRest.Core.models import parse_model

from .models import Wiql, WorkItem, WorkItemExpand, WorkItemQueryResult

__all__ = ["WorkItemsClient", "MAX_BATCH_IDS", "chunked"]

logger = logging.getLogger(__name__)

# Service limit on ids per ``wit/workitems`` list call.
MAX_BATCH_IDS = 200


def chunked(ids: Sequence[int], size: int = MAX_BATCH_IDS) -> Iterator[List[int]]:
    """Split ``ids`` into lists of at most ``size`` items, preserving order."""

    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    for start in range(0, len(ids), size):
        yield list(ids[start : start + size])


def _check_expand_fields(expand: object, fields: Optional[Sequence[str]]) -> None:
    if expand not in (None, WorkItemExpand.NONE, "None") and fields:
        raise ConfigurationError("expand cannot be combined with fields")


class WorkItemsClient(SubClient):
    def get_work_item(
        self,
        organization: str,
        work_item_id: int,
        *,
        project: Optional[str] = None,
        expand: Optional[Union[WorkItemExpand, str]] = None,
        fields: Optional[Sequence[str]] = None,
        as_of: Optional[datetime] = None,
    ) -> WorkItem:
        """Fetch one work item; ``expand="All"`` inlines relations and links."""

        _check_expand_fields(expand, fields)
        return (
            self._operation("GET", "wit/workitems/{id}", organization, project, id=work_item_id)
            .query("fields", list(fields) if fields else None)
            .query("asOf", as_of)
            .query("$expand", expand)
            .into(WorkItem)
        )

    def get_work_items(
        self,
        organization: str,
        ids: Sequence[int],
        *,
        project: Optional[str] = None,
        expand: Optional[Union[WorkItemExpand, str]] = None,
        fields: Optional[Sequence[str]] = None,
        as_of: Optional[datetime] = None,
        error_policy: Optional[str] = None,
    ) -> List[WorkItem]:
        """Fetch many work items, issuing one call per 200 ids.

        Results keep the order of ``ids``. With ``error_policy="omit"`` missing
        items come back as ``null`` and are dropped here.
        """

        _check_expand_fields(expand, fields)
        items: List[WorkItem] = []
        batches = list(chunked(list(ids)))
        if len(batches) > 1:
            logger.debug(
                "fetching work items in batches",
                extra={"count": len(ids), "batches": len(batches)},
            )
        for batch in batches:
            op = (
                self._operation("GET", "wit/workitems", organization, project)
                .query("ids", batch)
                .query("fields", list(fields) if fields else None)
                .query("asOf", as_of)
                .query("$expand", expand)
                .query("errorPolicy", error_policy)
            )
            payload = op.into_json()
            values = payload.get("value", []) if isinstance(payload, dict) else payload
            items.extend(parse_model(WorkItem, value) for value in values if value is not None)
        return items

    def query_by_wiql(
        self,
        organization: str,
        query: str,
        *,
        project: Optional[str] = None,
        top: Optional[int] = None,
        time_precision: Optional[bool] = None,
    ) -> WorkItemQueryResult:
        """Run a WIQL query and return the matching work item references."""

        return (
            self._operation("POST", "wit/wiql", organization, project)
            .query("$top", top)
            .query("timePrecision", time_precision)
            .json(Wiql(query=query))
            .into(WorkItemQueryResult)
        )

    def query_work_items(
        self,
        organization: str,
        query: str,
        *,
        project: Optional[str] = None,
        fields: Optional[Sequence[str]] = None,
        expand: Optional[Union[WorkItemExpand, str]] = None,
    ) -> List[WorkItem]:
        """Run a WIQL query, then fetch the matching work items in batches."""

        result = self.query_by_wiql(organization, query, project=project)
        if not result.work_items:
            return []
        return self.get_work_items(
            organization, result.ids, project=project, fields=fields, expand=expand
        )
