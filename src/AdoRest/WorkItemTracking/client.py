"""Work item tracking service client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from AdoRest.Core.client import ServiceClient

from .work_items import WorkItemsClient

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from AdoRest.Core.settings import AdoSettings

__all__ = ["WorkItemTrackingClient", "DEFAULT_ENDPOINT", "API_VERSION"]

DEFAULT_ENDPOINT = "https://dev.azure.com"
API_VERSION = "7.1"


class WorkItemTrackingClient(ServiceClient):
    """Entry point for work items and WIQL queries."""

    DEFAULT_ENDPOINT = DEFAULT_ENDPOINT
    DEFAULT_API_VERSION = API_VERSION

    @classmethod
    def _endpoint_from_settings(cls, settings: "AdoSettings") -> Optional[str]:
        return settings.work_item_tracking_endpoint

    def work_items_client(self) -> WorkItemsClient:
        return WorkItemsClient(self)
