"""Feed, feed permission and feed view management."""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from AdoRest.Core.client import SubClient

from .models import Feed, FeedPermission, FeedRole, FeedUpdate, FeedView

__all__ = ["FeedManagementClient"]


class FeedManagementClient(SubClient):
    """Create, read, update and delete feeds and their views.

    Organization-scoped feeds are addressed with ``project=None``; project-scoped
    feeds need the project name or id.
    """

    # -- feeds -------------------------------------------------------------

    def get_feeds(
        self,
        organization: str,
        *,
        project: Optional[str] = None,
        feed_role: Optional[Union[FeedRole, str]] = None,
        include_deleted_upstreams: Optional[bool] = None,
        include_urls: Optional[bool] = None,
    ) -> List[Feed]:
        return (
            self._operation("GET", "packaging/feeds", organization, project)
            .query("feedRole", feed_role)
            .query("includeDeletedUpstreams", include_deleted_upstreams)
            .query("includeUrls", include_urls)
            .into_list(Feed)
        )

    def create_feed(self, organization: str, feed: Feed, *, project: Optional[str] = None) -> Feed:
        return (
            self._operation("POST", "packaging/feeds", organization, project, expected=(200, 201))
            .json(feed)
            .into(Feed)
        )

    def get_feed(
        self,
        organization: str,
        feed_id: str,
        *,
        project: Optional[str] = None,
        include_deleted_upstreams: Optional[bool] = None,
    ) -> Feed:
        return (
            self._operation("GET", "packaging/feeds/{feedId}", organization, project, feedId=feed_id)
            .query("includeDeletedUpstreams", include_deleted_upstreams)
            .into(Feed)
        )

    def update_feed(
        self,
        organization: str,
        feed_id: str,
        update: FeedUpdate,
        *,
        project: Optional[str] = None,
    ) -> Feed:
        return (
            self._operation(
                "PATCH", "packaging/feeds/{feedId}", organization, project, feedId=feed_id
            )
            .json(update)
            .into(Feed)
        )

    def delete_feed(self, organization: str, feed_id: str, *, project: Optional[str] = None) -> None:
        """Move a feed to the feed recycle bin."""

        self._operation(
            "DELETE",
            "packaging/feeds/{feedId}",
            organization,
            project,
            expected=(200, 204),
            feedId=feed_id,
        ).into_none()

    # -- permissions -------------------------------------------------------

    def get_feed_permissions(
        self,
        organization: str,
        feed_id: str,
        *,
        project: Optional[str] = None,
        include_ids: Optional[bool] = None,
        exclude_inherited_permissions: Optional[bool] = None,
        identity_descriptor: Optional[str] = None,
        include_deleted_feeds: Optional[bool] = None,
    ) -> List[FeedPermission]:
        return (
            self._operation(
                "GET", "packaging/Feeds/{feedId}/permissions", organization, project, feedId=feed_id
            )
            .query("includeIds", include_ids)
            .query("excludeInheritedPermissions", exclude_inherited_permissions)
            .query("identityDescriptor", identity_descriptor)
            .query("includeDeletedFeeds", include_deleted_feeds)
            .into_list(FeedPermission)
        )

    def set_feed_permissions(
        self,
        organization: str,
        feed_id: str,
        permissions: Sequence[FeedPermission],
        *,
        project: Optional[str] = None,
    ) -> List[FeedPermission]:
        return (
            self._operation(
                "PATCH",
                "packaging/Feeds/{feedId}/permissions",
                organization,
                project,
                feedId=feed_id,
            )
            .json(list(permissions))
            .into_list(FeedPermission)
        )

    # -- views -------------------------------------------------------------

    def get_feed_views(
        self, organization: str, feed_id: str, *, project: Optional[str] = None
    ) -> List[FeedView]:
        return self._operation(
            "GET", "packaging/Feeds/{feedId}/views", organization, project, feedId=feed_id
        ).into_list(FeedView)

    def create_feed_view(
        self, organization: str, feed_id: str, view: FeedView, *, project: Optional[str] = None
    ) -> FeedView:
        return (
            self._operation(
                "POST",
                "packaging/Feeds/{feedId}/views",
                organization,
                project,
                expected=(200, 201),
                feedId=feed_id,
            )
            .json(view)
            .into(FeedView)
        )

    def get_feed_view(
        self, organization: str, feed_id: str, view_id: str, *, project: Optional[str] = None
    ) -> FeedView:
        return self._operation(
            "GET",
            "packaging/Feeds/{feedId}/views/{viewId}",
            organization,
            project,
            feedId=feed_id,
            viewId=view_id,
        ).into(FeedView)

    def update_feed_view(
        self,
        organization: str,
        feed_id: str,
        view_id: str,
        view: FeedView,
        *,
        project: Optional[str] = None,
    ) -> FeedView:
        return (
            self._operation(
                "PATCH",
                "packaging/Feeds/{feedId}/views/{viewId}",
                organization,
                project,
                feedId=feed_id,
                viewId=view_id,
            )
            .json(view)
            .into(FeedView)
        )

    def delete_feed_view(
        self, organization: str, feed_id: str, view_id: str, *, project: Optional[str] = None
    ) -> None:
        self._operation(
            "DELETE",
            "packaging/Feeds/{feedId}/views/{viewId}",
            organization,
            project,
            expected=(200, 204),
            feedId=feed_id,
            viewId=view_id,
        ).into_none()
