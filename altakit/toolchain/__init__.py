"""
Compiler installation and verification.

- manifest: release manifest lookup
- fetcher: resolve, download and install a compiler release
- checker: verify the installed compiler against a constraint
"""

from .manifest import ReleaseManifest, fetch_manifest
from .fetcher import (
    CompilerFetcher,
    FetchResult,
    MARKER_FILE,
    build_download_url,
    marker_content,
    read_marker,
)
from .checker import CheckResult, CompilerProbe, VersionChecker, parse_probe_output

__all__ = [
    "ReleaseManifest",
    "fetch_manifest",
    "CompilerFetcher",
    "FetchResult",
    "MARKER_FILE",
    "build_download_url",
    "marker_content",
    "read_marker",
    "CheckResult",
    "CompilerProbe",
    "VersionChecker",
    "parse_probe_output",
]
