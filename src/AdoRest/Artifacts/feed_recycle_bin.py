"""Deleted feeds: list, restore and purge."""

from __future__ import annotations

from typing import List, Optional, Sequence

from AdoRest.Core.client import SubClient
from AdoRest.Core.models import JsonPatchOperation

from .models import Feed, restore_feed_patch

__all__ = ["FeedRecycleBinClient"]


class FeedRecycleBinClient(SubClient):
    def list(self, organization: str, *, project: Optional[str] = None) -> List[Feed]:
        """Feeds currently in the recycle bin."""

        return self._operation("GET", "packaging/feedrecyclebin", organization, project).into_list(
            Feed
        )

    def restore_deleted_feed(
        self,
        organization: str,
        feed_id: str,
        patch: Optional[Sequence[JsonPatchOperation]] = None,
        *,
        project: Optional[str] = None,
    ) -> None:
        """Restore a deleted feed. The default patch flips ``/isDeleted`` to false."""

        self._operation(
            "PATCH", "packaging/feedrecyclebin/{feedId}", organization, project, feedId=feed_id
        ).json_patch(list(patch) if patch is not None else restore_feed_patch()).into_none()

    def permanent_delete_feed(
        self, organization: str, feed_id: str, *, project: Optional[str] = None
    ) -> None:
        self._operation(
            "DELETE",
            "packaging/feedrecyclebin/{feedId}",
            organization,
            project,
            expected=(200, 204),
            feedId=feed_id,
        ).into_none()
