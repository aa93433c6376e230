"""
Release manifest lookup.

The manifest is a JSON array of published version strings. It is fetched
fresh for every resolution; nothing is cached between invocations.
"""

import logging
from typing import List, Sequence

from altakit.core.download import DEFAULT_TIMEOUT, get_json
from altakit.core.exceptions import (
    ManifestError,
    NoVersionsAvailableError,
    VersionNotFoundError,
)
from altakit.core.version import (
    PrefixSpec,
    SemanticVersion,
    select_latest,
    try_parse_version,
)

logger = logging.getLogger(__name__)


class ReleaseManifest:
    """
    Ordered list of released compiler versions.

    Example:
        >>> manifest = ReleaseManifest(["1.0.0", "1.2.0", "0.9.9"])
        >>> str(manifest.latest())
        '1.2.0'
    """

    def __init__(self, entries: Sequence[str]):
        self.entries = list(entries)

    def versions(self) -> List[SemanticVersion]:
        """Parsed versions; malformed entries are skipped."""
        versions = []
        for entry in self.entries:
            version = try_parse_version(entry)
            if version is None:
                logger.debug(f"Skipping malformed manifest entry: {entry!r}")
                continue
            versions.append(version)
        return versions

    def latest(self) -> SemanticVersion:
        """
        Greatest released version.

        Raises:
            NoVersionsAvailableError: If no entry parses
        """
        versions = self.versions()
        if not versions:
            raise NoVersionsAvailableError("Release manifest lists no versions")
        return select_latest(versions)

    def latest_matching(self, prefix: PrefixSpec) -> SemanticVersion:
        """
        Greatest released version whose entry starts with prefix.

        Raises:
            VersionNotFoundError: If no entry matches
        """
        candidates = (try_parse_version(e) for e in self.entries if prefix.matches(e))
        matches = [v for v in candidates if v is not None]
        if not matches:
            raise VersionNotFoundError(str(prefix))
        return select_latest(matches)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"ReleaseManifest({self.entries!r})"


def fetch_manifest(url: str, timeout: int = DEFAULT_TIMEOUT) -> ReleaseManifest:
    """
    Download the release manifest.

    Raises:
        TransportError: If the request fails
        ManifestError: If the document is not a JSON array of strings
    """
    data = get_json(url, timeout=timeout)

    if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
        raise ManifestError(f"Release manifest at {url} is not a list of versions")

    logger.debug(f"Release manifest lists {len(data)} entries")
    return ReleaseManifest(data)
