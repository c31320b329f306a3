"""Packages, package versions, metrics, provenance and badges within a feed."""

from __future__ import annotations

from typing import List, Optional, Union

from AdoRest.Core.client import SubClient

from .models import (
    Package,
    PackageMetrics,
    PackageMetricsQuery,
    PackageVersion,
    PackageVersionMetrics,
    PackageVersionMetricsQuery,
    PackageVersionProvenance,
    ProtocolType,
)

__all__ = ["ArtifactDetailsClient"]


class ArtifactDetailsClient(SubClient):
    def query_package_metrics(
        self,
        organization: str,
        feed_id: str,
        query: PackageMetricsQuery,
        *,
        project: Optional[str] = None,
    ) -> List[PackageMetrics]:
        return (
            self._operation(
                "POST",
                "packaging/Feeds/{feedId}/packagemetricsbatch",
                organization,
                project,
                feedId=feed_id,
            )
            .json(query)
            .into_list(PackageMetrics)
        )

    def get_packages(
        self,
        organization: str,
        feed_id: str,
        *,
        project: Optional[str] = None,
        protocol_type: Optional[Union[ProtocolType, str]] = None,
        package_name_query: Optional[str] = None,
        normalized_package_name: Optional[str] = None,
        include_urls: Optional[bool] = None,
        include_all_versions: Optional[bool] = None,
        is_listed: Optional[bool] = None,
        get_top_package_versions: Optional[bool] = None,
        is_release: Optional[bool] = None,
        include_description: Optional[bool] = None,
        top: Optional[int] = None,
        skip: Optional[int] = None,
        include_deleted: Optional[bool] = None,
        is_cached: Optional[bool] = None,
        direct_upstream_id: Optional[str] = None,
    ) -> List[Package]:
        """List packages in a feed, optionally filtered and paged with ``top``/``skip``."""

        return (
            self._operation(
                "GET", "packaging/Feeds/{feedId}/packages", organization, project, feedId=feed_id
            )
            .query("protocolType", protocol_type)
            .query("packageNameQuery", package_name_query)
            .query("normalizedPackageName", normalized_package_name)
            .query("includeUrls", include_urls)
            .query("includeAllVersions", include_all_versions)
            .query("isListed", is_listed)
            .query("getTopPackageVersions", get_top_package_versions)
            .query("isRelease", is_release)
            .query("includeDescription", include_description)
            .query("$top", top)
            .query("$skip", skip)
            .query("includeDeleted", include_deleted)
            .query("isCached", is_cached)
            .query("directUpstreamId", direct_upstream_id)
            .into_list(Package)
        )

    def get_package(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        *,
        project: Optional[str] = None,
        include_all_versions: Optional[bool] = None,
        include_urls: Optional[bool] = None,
        is_listed: Optional[bool] = None,
        is_release: Optional[bool] = None,
        include_deleted: Optional[bool] = None,
        include_description: Optional[bool] = None,
    ) -> Package:
        return (
            self._operation(
                "GET",
                "packaging/Feeds/{feedId}/packages/{packageId}",
                organization,
                project,
                feedId=feed_id,
                packageId=package_id,
            )
            .query("includeAllVersions", include_all_versions)
            .query("includeUrls", include_urls)
            .query("isListed", is_listed)
            .query("isRelease", is_release)
            .query("includeDeleted", include_deleted)
            .query("includeDescription", include_description)
            .into(Package)
        )

    def query_package_version_metrics(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        query: PackageVersionMetricsQuery,
        *,
        project: Optional[str] = None,
    ) -> List[PackageVersionMetrics]:
        return (
            self._operation(
                "POST",
                "packaging/Feeds/{feedId}/Packages/{packageId}/versionmetricsbatch",
                organization,
                project,
                feedId=feed_id,
                packageId=package_id,
            )
            .json(query)
            .into_list(PackageVersionMetrics)
        )

    def get_package_versions(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        *,
        project: Optional[str] = None,
        include_urls: Optional[bool] = None,
        is_listed: Optional[bool] = None,
        is_deleted: Optional[bool] = None,
    ) -> List[PackageVersion]:
        return (
            self._operation(
                "GET",
                "packaging/Feeds/{feedId}/Packages/{packageId}/versions",
                organization,
                project,
                feedId=feed_id,
                packageId=package_id,
            )
            .query("includeUrls", include_urls)
            .query("isListed", is_listed)
            .query("isDeleted", is_deleted)
            .into_list(PackageVersion)
        )

    def get_package_version(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        package_version_id: str,
        *,
        project: Optional[str] = None,
        include_urls: Optional[bool] = None,
        is_listed: Optional[bool] = None,
        is_deleted: Optional[bool] = None,
    ) -> PackageVersion:
        return (
            self._operation(
                "GET",
                "packaging/Feeds/{feedId}/Packages/{packageId}/versions/{packageVersionId}",
                organization,
                project,
                feedId=feed_id,
                packageId=package_id,
                packageVersionId=package_version_id,
            )
            .query("includeUrls", include_urls)
            .query("isListed", is_listed)
            .query("isDeleted", is_deleted)
            .into(PackageVersion)
        )

    def get_package_version_provenance(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        package_version_id: str,
        *,
        project: Optional[str] = None,
    ) -> PackageVersionProvenance:
        return self._operation(
            "GET",
            "packaging/Feeds/{feedId}/Packages/{packageId}/Versions/{packageVersionId}/provenance",
            organization,
            project,
            feedId=feed_id,
            packageId=package_id,
            packageVersionId=package_version_id,
        ).into(PackageVersionProvenance)

    def get_badge(
        self, organization: str, feed_id: str, package_id: str, *, project: Optional[str] = None
    ) -> str:
        """SVG badge showing the latest version of a package."""

        return self._operation(
            "GET",
            "public/packaging/Feeds/{feedId}/Packages/{packageId}/badge",
            organization,
            project,
            feedId=feed_id,
            packageId=package_id,
        ).into_text()
