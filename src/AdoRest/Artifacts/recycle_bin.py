"""Deleted packages held in a feed's recycle bin."""

from __future__ import annotations

from typing import List, Optional, Union

from AdoRest.Core.client import SubClient

from .models import OperationReference, Package, ProtocolType, RecycleBinPackageVersion

__all__ = ["RecycleBinClient"]

_PACKAGES = "packaging/Feeds/{feedId}/RecycleBin/Packages"


class RecycleBinClient(SubClient):
    def get_recycle_bin_packages(
        self,
        organization: str,
        feed_id: str,
        *,
        project: Optional[str] = None,
        protocol_type: Optional[Union[ProtocolType, str]] = None,
        package_name_query: Optional[str] = None,
        include_urls: Optional[bool] = None,
        top: Optional[int] = None,
        skip: Optional[int] = None,
        include_all_versions: Optional[bool] = None,
    ) -> List[Package]:
        return (
            self._operation("GET", _PACKAGES, organization, project, feedId=feed_id)
            .query("protocolType", protocol_type)
            .query("packageNameQuery", package_name_query)
            .query("includeUrls", include_urls)
            .query("$top", top)
            .query("$skip", skip)
            .query("includeAllVersions", include_all_versions)
            .into_list(Package)
        )

    def empty_recycle_bin(
        self, organization: str, feed_id: str, *, project: Optional[str] = None
    ) -> OperationReference:
        """Queue permanent deletion of everything in the recycle bin."""

        return self._operation(
            "DELETE", _PACKAGES, organization, project, expected=(200, 202), feedId=feed_id
        ).into(OperationReference)

    def get_recycle_bin_package(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        *,
        project: Optional[str] = None,
        include_urls: Optional[bool] = None,
    ) -> Package:
        return (
            self._operation(
                "GET",
                _PACKAGES + "/{packageId}",
                organization,
                project,
                feedId=feed_id,
                packageId=package_id,
            )
            .query("includeUrls", include_urls)
            .into(Package)
        )

    def get_recycle_bin_package_versions(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        *,
        project: Optional[str] = None,
        include_urls: Optional[bool] = None,
    ) -> List[RecycleBinPackageVersion]:
        return (
            self._operation(
                "GET",
                _PACKAGES + "/{packageId}/Versions",
                organization,
                project,
                feedId=feed_id,
                packageId=package_id,
            )
            .query("includeUrls", include_urls)
            .into_list(RecycleBinPackageVersion)
        )

    def get_recycle_bin_package_version(
        self,
        organization: str,
        feed_id: str,
        package_id: str,
        package_version_id: str,
        *,
        project: Optional[str] = None,
        include_urls: Optional[bool] = None,
    ) -> RecycleBinPackageVersion:
        return (
            self._operation(
                "GET",
                _PACKAGES + "/{packageId}/Versions/{packageVersionId}",
                organization,
                project,
                feedId=feed_id,
                packageId=package_id,
                packageVersionId=package_version_id,
            )
            .query("includeUrls", include_urls)
            .into(RecycleBinPackageVersion)
        )
