"""Per-feed retention policy."""

from __future__ import annotations

from typing import Optional

from AdoRest.Core.client import SubClient

from .models import FeedRetentionPolicy

__all__ = ["RetentionPoliciesClient"]

_PATH = "packaging/Feeds/{feedId}/retentionpolicies"


class RetentionPoliciesClient(SubClient):
    def get_retention_policy(
        self, organization: str, feed_id: str, *, project: Optional[str] = None
    ) -> FeedRetentionPolicy:
        return self._operation("GET", _PATH, organization, project, feedId=feed_id).into(
            FeedRetentionPolicy
        )

    def set_retention_policy(
        self,
        organization: str,
        feed_id: str,
        policy: FeedRetentionPolicy,
        *,
        project: Optional[str] = None,
    ) -> FeedRetentionPolicy:
        return (
            self._operation("PUT", _PATH, organization, project, feedId=feed_id)
            .json(policy)
            .into(FeedRetentionPolicy)
        )

    def delete_retention_policy(
        self, organization: str, feed_id: str, *, project: Optional[str] = None
    ) -> None:
        self._operation(
            "DELETE", _PATH, organization, project, expected=(200, 204), feedId=feed_id
        ).into_none()
