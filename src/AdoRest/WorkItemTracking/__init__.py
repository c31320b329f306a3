"""Work item tracking: work items, batches, WIQL queries and link helpers."""

from AdoRest.WorkItemTracking.client import API_VERSION, DEFAULT_ENDPOINT, WorkItemTrackingClient
from AdoRest.WorkItemTracking.models import (
    Wiql,
    WorkItem,
    WorkItemExpand,
    WorkItemQueryResult,
    WorkItemReference,
    WorkItemRelation,
)
from AdoRest.WorkItemTracking.relations import (
    CHILD_RELATION_TYPE,
    PARENT_RELATION_TYPE,
    RELATED_RELATION_TYPE,
    relation_name,
    work_item_id_from_url,
    work_item_relations,
)
from AdoRest.WorkItemTracking.work_items import MAX_BATCH_IDS, WorkItemsClient, chunked

__all__ = [
    "WorkItemTrackingClient",
    "WorkItemsClient",
    "DEFAULT_ENDPOINT",
    "API_VERSION",
    "MAX_BATCH_IDS",
    "chunked",
    "Wiql",
    "WorkItem",
    "WorkItemExpand",
    "WorkItemQueryResult",
    "WorkItemReference",
    "WorkItemRelation",
    "CHILD_RELATION_TYPE",
    "PARENT_RELATION_TYPE",
    "RELATED_RELATION_TYPE",
    "relation_name",
    "work_item_id_from_url",
    "work_item_relations",
]
