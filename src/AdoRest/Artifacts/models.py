"""Payload models for the Artifacts (packaging feeds) service.

Only the fields callers commonly read are declared; every model keeps unknown
fields, so data added by newer API versions survives a round trip.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from AdoRest.Core.models import AdoModel, JsonPatchOperation

__all__ = [
    "FeedRole",
    "FeedVisibility",
    "ProtocolType",
    "GlobalPermission",
    "UpstreamSource",
    "FeedView",
    "Feed",
    "FeedUpdate",
    "FeedPermission",
    "FeedChange",
    "FeedChangesResponse",
    "MinimalPackageVersion",
    "Package",
    "PackageVersion",
    "PackageChange",
    "PackageChangesResponse",
    "PackageMetrics",
    "PackageMetricsQuery",
    "PackageVersionMetrics",
    "PackageVersionMetricsQuery",
    "Provenance",
    "PackageVersionProvenance",
    "RecycleBinPackageVersion",
    "OperationReference",
    "FeedRetentionPolicy",
    "SessionRequest",
    "SessionResponse",
    "JsonPatchOperation",
    "restore_feed_patch",
]


class FeedRole(str, enum.Enum):
    """Role filter accepted by ``get_feeds`` and carried by permissions."""

    CUSTOM = "custom"
    NONE = "none"
    READER = "reader"
    CONTRIBUTOR = "contributor"
    ADMINISTRATOR = "administrator"
    COLLABORATOR = "collaborator"


class FeedVisibility(str, enum.Enum):
    PRIVATE = "private"
    COLLECTION = "collection"
    ORGANIZATION = "organization"
    AAD_TENANT = "aadTenant"


class ProtocolType(str, enum.Enum):
    NPM = "npm"
    NUGET = "NuGet"
    MAVEN = "Maven"
    PYPI = "PyPi"
    UPACK = "UPack"
    CARGO = "Cargo"


class GlobalPermission(AdoModel):
    identity_descriptor: Optional[str] = None
    identity_id: Optional[str] = None
    role: Optional[str] = None


class UpstreamSource(AdoModel):
    id: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    protocol: Optional[str] = None
    upstream_source_type: Optional[str] = None
    deleted_date: Optional[datetime] = None
    status: Optional[str] = None


class FeedView(AdoModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    visibility: Optional[str] = None


class Feed(AdoModel):
    """A package feed, scoped to an organization or a project."""

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    fully_qualified_id: Optional[str] = None
    fully_qualified_name: Optional[str] = None
    url: Optional[str] = None
    is_read_only: Optional[bool] = None
    hide_deleted_package_versions: Optional[bool] = None
    upstream_enabled: Optional[bool] = None
    upstream_sources: List[UpstreamSource] = []
    view: Optional[FeedView] = None
    view_id: Optional[str] = None
    view_name: Optional[str] = None
    capabilities: Optional[str] = None
    deleted_date: Optional[datetime] = None
    permanent_deleted_date: Optional[datetime] = None
    project: Optional[Dict[str, Any]] = None


class FeedUpdate(AdoModel):
    """Fields accepted by ``update_feed``; unset fields are left unchanged."""

    name: Optional[str] = None
    description: Optional[str] = None
    hide_deleted_package_versions: Optional[bool] = None
    upstream_enabled: Optional[bool] = None
    upstream_sources: Optional[List[UpstreamSource]] = None
    default_view_id: Optional[str] = None
    badges_enabled: Optional[bool] = None


class FeedPermission(AdoModel):
    identity_descriptor: Optional[str] = None
    identity_id: Optional[str] = None
    display_name: Optional[str] = None
    is_inherited_role: Optional[bool] = None
    role: Optional[str] = None


class FeedChange(AdoModel):
    change_type: Optional[str] = None
    feed: Optional[Feed] = None
    feed_continuation_token: Optional[int] = None
    latest_package_continuation_token: Optional[int] = None


class FeedChangesResponse(AdoModel):
    count: int = 0
    feed_changes: List[FeedChange] = []
    next_link: Optional[str] = None


class MinimalPackageVersion(AdoModel):
    id: Optional[str] = None
    version: Optional[str] = None
    normalized_version: Optional[str] = None
    is_latest: Optional[bool] = None
    is_listed: Optional[bool] = None
    is_deleted: Optional[bool] = None
    publish_date: Optional[datetime] = None
    views: List[FeedView] = []


class Package(AdoModel):
    id: Optional[str] = None
    name: Optional[str] = None
    normalized_name: Optional[str] = None
    protocol_type: Optional[str] = None
    is_cached: Optional[bool] = None
    url: Optional[str] = None
    versions: List[MinimalPackageVersion] = []


class PackageVersion(MinimalPackageVersion):
    author: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    tags: List[str] = []
    url: Optional[str] = None
    deleted_date: Optional[datetime] = None


class PackageChange(AdoModel):
    package: Optional[Package] = None
    package_version_change: Optional[Dict[str, Any]] = None


class PackageChangesResponse(AdoModel):
    count: int = 0
    package_changes: List[PackageChange] = []
    next_link: Optional[str] = None


class PackageMetrics(AdoModel):
    package_id: Optional[str] = None
    download_count: Optional[float] = None
    download_unique_users: Optional[float] = None
    last_downloaded: Optional[datetime] = None


class PackageMetricsQuery(AdoModel):
    package_ids: List[str] = []


class PackageVersionMetrics(AdoModel):
    package_id: Optional[str] = None
    package_version_id: Optional[str] = None
    download_count: Optional[float] = None
    download_unique_users: Optional[float] = None
    last_downloaded: Optional[datetime] = None


class PackageVersionMetricsQuery(AdoModel):
    package_version_ids: List[str] = []


class Provenance(AdoModel):
    data: Dict[str, str] = {}
    provenance_source: Optional[str] = None
    publisher_user_identity: Optional[str] = None
    user_agent: Optional[str] = None


class PackageVersionProvenance(AdoModel):
    feed_id: Optional[str] = None
    package_id: Optional[str] = None
    package_version_id: Optional[str] = None
    provenance: Optional[Provenance] = None


class RecycleBinPackageVersion(PackageVersion):
    scheduled_permanent_delete_date: Optional[datetime] = None


class OperationReference(AdoModel):
    """Handle to a long-running server operation (e.g. emptying a recycle bin)."""

    id: Optional[str] = None
    plugin_id: Optional[str] = None
    status: Optional[str] = None
    url: Optional[str] = None


class FeedRetentionPolicy(AdoModel):
    age_limit_in_days: Optional[int] = None
    count_limit: Optional[int] = None
    days_to_keep_recently_downloaded_packages: Optional[int] = None


class SessionRequest(AdoModel):
    data: Dict[str, str] = {}
    feed: Optional[str] = None
    source: Optional[str] = None


class SessionResponse(AdoModel):
    session_id: Optional[str] = None
    session_name: Optional[str] = None


def restore_feed_patch() -> List[JsonPatchOperation]:
    """Patch document that restores a feed from the feed recycle bin."""

    return [JsonPatchOperation(op="replace", path="/isDeleted", value=False)]
