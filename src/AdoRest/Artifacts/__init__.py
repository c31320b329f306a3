"""Azure Artifacts: packaging feeds, packages, recycle bins and retention.

Modules:
- client: ArtifactsClient and its sub-client accessors
- feed_management: feeds, feed permissions and views
- artifact_details: packages, versions, metrics, provenance, badges
- change_tracking: feed and package change feeds with paging helpers
- feed_recycle_bin / recycle_bin: deleted feeds and deleted packages
- retention_policies, provenance, service_settings
"""

from AdoRest.Artifacts.artifact_details import ArtifactDetailsClient
from AdoRest.Artifacts.change_tracking import (
    ChangeTrackingClient,
    iter_feed_changes,
    iter_package_changes,
)
from AdoRest.Artifacts.client import API_VERSION, DEFAULT_ENDPOINT, ArtifactsClient
from AdoRest.Artifacts.feed_management import FeedManagementClient
from AdoRest.Artifacts.feed_recycle_bin import FeedRecycleBinClient
from AdoRest.Artifacts.provenance import ProvenanceClient
from AdoRest.Artifacts.recycle_bin import RecycleBinClient
from AdoRest.Artifacts.retention_policies import RetentionPoliciesClient
from AdoRest.Artifacts.service_settings import ServiceSettingsClient

__all__ = [
    "ArtifactsClient",
    "DEFAULT_ENDPOINT",
    "API_VERSION",
    "ArtifactDetailsClient",
    "ChangeTrackingClient",
    "FeedManagementClient",
    "FeedRecycleBinClient",
    "ProvenanceClient",
    "RecycleBinClient",
    "RetentionPoliciesClient",
    "ServiceSettingsClient",
    "iter_feed_changes",
    "iter_package_changes",
]
