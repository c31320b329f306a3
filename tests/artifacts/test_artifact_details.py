"""Tests for package, version, metrics, provenance and badge operations."""

from __future__ import annotations

import json

import httpx
import pytest

from AdoRest.Artifacts import ArtifactsClient
from AdoRest.Artifacts.models import (
    PackageMetricsQuery,
    PackageVersionMetricsQuery,
    ProtocolType,
)
from AdoRest.Core.credentials import Credential

from tests.fixtures.http_mocking import json_response

PACKAGE = {
    "id": "p1",
    "name": "left-pad",
    "normalizedName": "left-pad",
    "protocolType": "npm",
    "versions": [{"id": "v1", "version": "1.3.0", "isLatest": True, "isListed": True}],
}


@pytest.fixture
def details(make_client):
    return make_client(ArtifactsClient).artifact_details_client()


def test_get_packages_query_parameters(details, recording_transport) -> None:
    recording_transport.queue(json_response({"count": 1, "value": [PACKAGE]}))

    packages = details.get_packages(
        "org",
        "feed",
        project="proj",
        protocol_type=ProtocolType.NPM,
        package_name_query="pad",
        include_all_versions=True,
        top=50,
        skip=100,
    )

    params = recording_transport.last.url.params
    assert recording_transport.last.url.path == "/org/proj/_apis/packaging/Feeds/feed/packages"
    assert params["protocolType"] == "npm"
    assert params["packageNameQuery"] == "pad"
    assert params["includeAllVersions"] == "true"
    assert params["$top"] == "50"
    assert params["$skip"] == "100"
    assert "isListed" not in params
    assert packages[0].versions[0].is_latest is True


def test_get_package_and_versions(details, recording_transport) -> None:
    version = {"id": "v1", "version": "1.3.0", "author": "azer", "tags": ["util"]}
    recording_transport.queue(
        json_response(PACKAGE), json_response({"value": [version]}), json_response(version)
    )

    package = details.get_package("org", "feed", "p1", include_description=True)
    versions = details.get_package_versions("org", "feed", "p1", is_deleted=False)
    single = details.get_package_version("org", "feed", "p1", "v1")

    paths = [request.url.path for request in recording_transport.requests]
    assert paths == [
        "/org/_apis/packaging/Feeds/feed/packages/p1",
        "/org/_apis/packaging/Feeds/feed/Packages/p1/versions",
        "/org/_apis/packaging/Feeds/feed/Packages/p1/versions/v1",
    ]
    assert package.name == "left-pad"
    assert versions[0].tags == ["util"]
    assert single.author == "azer"


def test_metrics_batches_post_queries(details, recording_transport) -> None:
    recording_transport.queue(
        json_response({"value": [{"packageId": "p1", "downloadCount": 12.0}]}),
        json_response([{"packageVersionId": "v1", "downloadUniqueUsers": 3.0}]),
    )

    metrics = details.query_package_metrics("org", "feed", PackageMetricsQuery(package_ids=["p1"]))
    version_metrics = details.query_package_version_metrics(
        "org", "feed", "p1", PackageVersionMetricsQuery(package_version_ids=["v1"])
    )

    first, second = recording_transport.requests
    assert first.method == second.method == "POST"
    assert json.loads(first.content) == {"packageIds": ["p1"]}
    assert json.loads(second.content) == {"packageVersionIds": ["v1"]}
    assert second.url.path.endswith("/Packages/p1/versionmetricsbatch")
    assert metrics[0].download_count == 12.0
    assert version_metrics[0].download_unique_users == 3.0


def test_version_provenance(details, recording_transport) -> None:
    recording_transport.queue(
        json_response(
            {
                "packageVersionId": "v1",
                "provenance": {"provenanceSource": "InternalBuild", "data": {"Build.BuildId": "42"}},
            }
        )
    )

    result = details.get_package_version_provenance("org", "feed", "p1", "v1")

    assert recording_transport.last.url.path.endswith("/Versions/v1/provenance")
    assert result.provenance.provenance_source == "InternalBuild"
    assert result.provenance.data["Build.BuildId"] == "42"


def test_badge_returns_svg_without_auth(make_client, recording_transport) -> None:
    recording_transport.queue(httpx.Response(200, text="<svg>1.3.0</svg>"))
    client = make_client(ArtifactsClient, credential=Credential.unauthenticated())

    badge = client.artifact_details_client().get_badge("org", "feed", "p1")

    assert badge == "<svg>1.3.0</svg>"
    assert "Authorization" not in recording_transport.last.headers
    assert recording_transport.last.url.path == "/org/_apis/public/packaging/Feeds/feed/Packages/p1/badge"
