"""
Core functionality for altakit.

This package contains the foundational modules that the fetcher and checker
depend on.
"""

from .exceptions import (
    AltaKitError,
    ConfigError,
    InternalError,
    VersionParseError,
    InvalidInputError,
    PlatformError,
    FetchError,
    InvalidDestinationError,
    NoVersionsAvailableError,
    VersionNotFoundError,
    ManifestError,
    ArchiveNotFoundError,
    TransportError,
    ExtractionError,
)

from .version import (
    SemanticVersion,
    LatestSpec,
    ExactSpec,
    PrefixSpec,
    CommitSpec,
    VersionSpec,
    Compatibility,
    parse_version_spec,
    parse_semantic_version,
    parse_commit,
    compare_versions,
    satisfies,
    select_latest,
)

from .platform import (
    System,
    Architecture,
    parse_system,
    parse_architecture,
    detect_system,
    detect_architecture,
    binary_path,
)

__all__ = [
    "AltaKitError",
    "ConfigError",
    "InternalError",
    "VersionParseError",
    "InvalidInputError",
    "PlatformError",
    "FetchError",
    "InvalidDestinationError",
    "NoVersionsAvailableError",
    "VersionNotFoundError",
    "ManifestError",
    "ArchiveNotFoundError",
    "TransportError",
    "ExtractionError",
    "SemanticVersion",
    "LatestSpec",
    "ExactSpec",
    "PrefixSpec",
    "CommitSpec",
    "VersionSpec",
    "Compatibility",
    "parse_version_spec",
    "parse_semantic_version",
    "parse_commit",
    "compare_versions",
    "satisfies",
    "select_latest",
    "System",
    "Architecture",
    "parse_system",
    "parse_architecture",
    "detect_system",
    "detect_architecture",
    "binary_path",
]
