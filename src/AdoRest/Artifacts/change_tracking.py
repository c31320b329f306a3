"""Change feeds for packaging feeds and the packages inside them.

The change endpoints are paged by continuation token: each response carries the
token to resume from. :func:`iter_feed_changes` and :func:`iter_package_changes`
follow those tokens until a page comes back empty.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional
from urllib.parse import parse_qs, urlsplit

from AdoRest.Core.client import SubClient

from .models import FeedChange, FeedChangesResponse, PackageChange, PackageChangesResponse

__all__ = ["ChangeTrackingClient", "iter_feed_changes", "iter_package_changes"]

logger = logging.getLogger(__name__)


class ChangeTrackingClient(SubClient):
    def get_feed_changes(
        self,
        organization: str,
        *,
        project: Optional[str] = None,
        include_deleted: Optional[bool] = None,
        continuation_token: Optional[int] = None,
        batch_size: Optional[int] = None,
    ) -> FeedChangesResponse:
        """Query feed changes; ``continuation_token`` resumes after a previous batch."""

        return (
            self._operation("GET", "packaging/feedchanges", organization, project)
            .query("includeDeleted", include_deleted)
            .query("continuationToken", continuation_token)
            .query("batchSize", batch_size)
            .into(FeedChangesResponse)
        )

    def get_feed_change(
        self, organization: str, feed_id: str, *, project: Optional[str] = None
    ) -> FeedChange:
        return self._operation(
            "GET", "packaging/feedchanges/{feedId}", organization, project, feedId=feed_id
        ).into(FeedChange)

    def get_package_changes(
        self,
        organization: str,
        feed_id: str,
        *,
        project: Optional[str] = None,
        continuation_token: Optional[int] = None,
        batch_size: Optional[int] = None,
    ) -> PackageChangesResponse:
        return (
            self._operation(
                "GET",
                "packaging/Feeds/{feedId}/packagechanges",
                organization,
                project,
                feedId=feed_id,
            )
            .query("continuationToken", continuation_token)
            .query("batchSize", batch_size)
            .into(PackageChangesResponse)
        )


def iter_feed_changes(
    client: ChangeTrackingClient,
    organization: str,
    *,
    project: Optional[str] = None,
    include_deleted: Optional[bool] = None,
    continuation_token: Optional[int] = None,
    batch_size: Optional[int] = None,
) -> Iterator[FeedChange]:
    """Yield every feed change, fetching batches until the service returns none."""

    token = continuation_token
    while True:
        page = client.get_feed_changes(
            organization,
            project=project,
            include_deleted=include_deleted,
            continuation_token=token,
            batch_size=batch_size,
        )
        if not page.feed_changes:
            return
        yield from page.feed_changes
        next_token = max(
            (change.feed_continuation_token or 0 for change in page.feed_changes), default=0
        )
        if next_token <= (token or 0):
            logger.debug("feed change token did not advance; stopping", extra={"token": token})
            return
        token = next_token


def iter_package_changes(
    client: ChangeTrackingClient,
    organization: str,
    feed_id: str,
    *,
    project: Optional[str] = None,
    continuation_token: Optional[int] = None,
    batch_size: Optional[int] = None,
) -> Iterator[PackageChange]:
    """Yield package changes for ``feed_id``, following the token in ``nextLink``."""

    token = continuation_token
    while True:
        page = client.get_package_changes(
            organization,
            feed_id,
            project=project,
            continuation_token=token,
            batch_size=batch_size,
        )
        if not page.package_changes:
            return
        yield from page.package_changes
        next_token = _package_continuation(page)
        if next_token is None or (token is not None and next_token <= token):
            return
        token = next_token


def _package_continuation(page: PackageChangesResponse) -> Optional[int]:
    # The token is only exposed through the nextLink query string.
    if not page.next_link:
        return None
    values = parse_qs(urlsplit(page.next_link).query).get("continuationToken")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None
