"""Artifacts service client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from AdoRest.Core.client import ServiceClient

from .artifact_details import ArtifactDetailsClient
from .change_tracking import ChangeTrackingClient
from .feed_management import FeedManagementClient
from .feed_recycle_bin import FeedRecycleBinClient
from .provenance import ProvenanceClient
from .recycle_bin import RecycleBinClient
from .retention_policies import RetentionPoliciesClient
from .service_settings import ServiceSettingsClient

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from AdoRest.Core.settings import AdoSettings

__all__ = ["ArtifactsClient", "DEFAULT_ENDPOINT", "API_VERSION"]

DEFAULT_ENDPOINT = "https://feeds.dev.azure.com"
API_VERSION = "7.1-preview"


class ArtifactsClient(ServiceClient):
    """Entry point for packaging feeds; operations live on the sub-clients.

    Example:
        >>> client = ArtifactsClient(Credential.from_pat(pat))
        >>> feeds = client.feed_management_client().get_feeds("my-org")
    """

    DEFAULT_ENDPOINT = DEFAULT_ENDPOINT
    DEFAULT_API_VERSION = API_VERSION

    @classmethod
    def _endpoint_from_settings(cls, settings: "AdoSettings") -> Optional[str]:
        return settings.artifacts_endpoint

    def artifact_details_client(self) -> ArtifactDetailsClient:
        return ArtifactDetailsClient(self)

    def change_tracking_client(self) -> ChangeTrackingClient:
        return ChangeTrackingClient(self)

    def feed_management_client(self) -> FeedManagementClient:
        return FeedManagementClient(self)

    def feed_recycle_bin_client(self) -> FeedRecycleBinClient:
        return FeedRecycleBinClient(self)

    def provenance_client(self) -> ProvenanceClient:
        return ProvenanceClient(self)

    def recycle_bin_client(self) -> RecycleBinClient:
        return RecycleBinClient(self)

    def retention_policies_client(self) -> RetentionPoliciesClient:
        return RetentionPoliciesClient(self)

    def service_settings_client(self) -> ServiceSettingsClient:
        return ServiceSettingsClient(self)
