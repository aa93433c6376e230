"""
Unit tests for the release manifest.
"""

import pytest
import responses

from altakit.core.exceptions import (
    ManifestError,
    NoVersionsAvailableError,
    TransportError,
    VersionNotFoundError,
)
from altakit.core.version import PrefixSpec, SemanticVersion, parse_version_spec
from altakit.toolchain.manifest import ReleaseManifest, fetch_manifest

MANIFEST_URL = "https://example.com/versions.json"


class TestReleaseManifest:
    """Test ReleaseManifest lookups."""

    def test_latest(self):
        manifest = ReleaseManifest(["1.0.0", "1.2.0", "0.9.9"])
        assert manifest.latest() == SemanticVersion(1, 2, 0)

    def test_latest_empty(self):
        with pytest.raises(NoVersionsAvailableError):
            ReleaseManifest([]).latest()

    def test_malformed_entries_skipped(self):
        manifest = ReleaseManifest(["nightly", "1.0", "v0.3.1", "2.0.0-rc1"])

        assert manifest.versions() == [SemanticVersion(0, 3, 1)]
        assert manifest.latest() == SemanticVersion(0, 3, 1)

    def test_only_malformed_entries(self):
        with pytest.raises(NoVersionsAvailableError):
            ReleaseManifest(["nightly", "beta"]).latest()

    def test_latest_matching_major(self):
        manifest = ReleaseManifest(["1.0.0", "1.4.2", "2.0.0", "1.10.0"])
        assert manifest.latest_matching(PrefixSpec((1,))) == SemanticVersion(1, 10, 0)

    def test_latest_matching_minor(self):
        manifest = ReleaseManifest(["1.2.0", "1.2.7", "1.3.0"])
        assert manifest.latest_matching(PrefixSpec((1, 2))) == SemanticVersion(1, 2, 7)

    def test_latest_matching_is_textual(self):
        manifest = ReleaseManifest(["1.2.0", "1.2.7", "1.20.0"])
        assert manifest.latest_matching(parse_version_spec("1.2")) == SemanticVersion(
            1, 20, 0
        )

    def test_major_prefix_matches_longer_major(self):
        manifest = ReleaseManifest(["1.9.0", "10.0.0", "2.0.0"])
        assert manifest.latest_matching(PrefixSpec((1,))) == SemanticVersion(10, 0, 0)

    def test_latest_matching_skips_malformed(self):
        manifest = ReleaseManifest(["1.2.0", "1.2-nightly", "v1.2.3"])
        assert manifest.latest_matching(PrefixSpec((1, 2))) == SemanticVersion(1, 2, 3)

    def test_latest_matching_none(self):
        manifest = ReleaseManifest(["1.0.0", "2.0.0"])

        with pytest.raises(VersionNotFoundError, match="'3'"):
            manifest.latest_matching(PrefixSpec((3,)))

    def test_len(self):
        assert len(ReleaseManifest(["1.0.0", "bad"])) == 2


class TestFetchManifest:
    """Test fetching the manifest over HTTP."""

    @responses.activate
    def test_fetch(self):
        responses.add(responses.GET, MANIFEST_URL, json=["0.1.0", "0.2.0"])

        manifest = fetch_manifest(MANIFEST_URL)

        assert manifest.entries == ["0.1.0", "0.2.0"]

    @responses.activate
    def test_not_a_list(self):
        responses.add(responses.GET, MANIFEST_URL, json={"versions": ["0.1.0"]})

        with pytest.raises(ManifestError):
            fetch_manifest(MANIFEST_URL)

    @responses.activate
    def test_non_string_entries(self):
        responses.add(responses.GET, MANIFEST_URL, json=["0.1.0", 2])

        with pytest.raises(ManifestError):
            fetch_manifest(MANIFEST_URL)

    @responses.activate
    def test_http_error(self):
        responses.add(responses.GET, MANIFEST_URL, status=404)

        with pytest.raises(TransportError) as exc_info:
            fetch_manifest(MANIFEST_URL)

        assert exc_info.value.status_code == 404
