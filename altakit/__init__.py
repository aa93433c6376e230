"""
altakit - Alta compiler installer and version checker.

Fetches compiler releases for build and CI environments and verifies that
an installed compiler satisfies a version or commit constraint.
"""

__version__ = "0.1.0"

from altakit.core.version import parse_version_spec, satisfies  # noqa: E402
from altakit.toolchain.checker import VersionChecker  # noqa: E402
from altakit.toolchain.fetcher import CompilerFetcher  # noqa: E402

__all__ = [
    "__version__",
    "parse_version_spec",
    "satisfies",
    "VersionChecker",
    "CompilerFetcher",
]
