"""
Version specifier parsing and compatibility matching.

A version specifier is one of:
- ``latest``
- an exact semantic version (``1.2.3``, ``v1.2.3``)
- a version prefix (``1``, ``1.2``)
- a 7-character commit hash (``abc123d``)

Example:
    >>> spec = parse_version_spec("v1.2")
    >>> spec
    PrefixSpec(components=(1, 2))
    >>> satisfies(SemanticVersion(1, 3, 0), SemanticVersion(1, 2, 3))
    True
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

from altakit.core.exceptions import NoVersionsAvailableError, VersionParseError

_SEMVER_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")
_PREFIX_RE = re.compile(r"^[0-9]+(?:\.[0-9]+)?$")
_COMMIT_RE = re.compile(r"^[0-9A-Za-z]{7}$")

LATEST = "latest"


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """Immutable major.minor.patch triple, ordered lexicographically."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, raw: str) -> "SemanticVersion":
        """
        Parse ``[v]N.N.N``.

        Raises:
            VersionParseError: If the string is not a full semantic version
        """
        match = _SEMVER_RE.match(_strip_prefix(raw))
        if not match:
            raise VersionParseError(
                f"Invalid version format: {raw!r}. Expected: major.minor.patch"
            )
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class LatestSpec:
    """Newest version in the release manifest."""

    def __str__(self) -> str:
        return LATEST


@dataclass(frozen=True)
class ExactSpec:
    """A fully specified release version."""

    version: SemanticVersion

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class PrefixSpec:
    """Major or major.minor; resolves to the newest matching release."""

    components: Tuple[int, ...]

    def matches(self, entry: str) -> bool:
        """
        Check whether a manifest entry starts with this prefix as text.

        Matching is textual, so ``1.2`` also matches ``1.20.0``.
        """
        return _strip_prefix(entry).startswith(str(self))

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.components)


@dataclass(frozen=True)
class CommitSpec:
    """An automated build identified by a short commit hash."""

    commit: str

    def __str__(self) -> str:
        return self.commit


VersionSpec = Union[LatestSpec, ExactSpec, PrefixSpec, CommitSpec]


class Compatibility(Enum):
    """Outcome of comparing an installed version with a requested one."""

    EXACT = "exact"
    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"

    @property
    def satisfied(self) -> bool:
        return self is not Compatibility.INCOMPATIBLE


def _strip_prefix(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("v"):
        return raw[1:]
    return raw


def parse_version_spec(raw: str) -> VersionSpec:
    """
    Parse a user-supplied version specifier.

    Args:
        raw: ``latest``, ``[v]N.N.N``, ``[v]N``, ``[v]N.N`` or a 7-character
            commit hash

    Returns:
        The matching VersionSpec variant

    Raises:
        VersionParseError: If the string matches none of the forms
    """
    if raw is None:
        raise VersionParseError("Version specifier cannot be empty")

    text = raw.strip()
    if text == LATEST:
        return LatestSpec()

    stripped = _strip_prefix(text)
    if _SEMVER_RE.match(stripped):
        return ExactSpec(SemanticVersion.parse(stripped))
    # Seven characters are a commit even when all digits ("1234567").
    if _COMMIT_RE.match(stripped):
        return CommitSpec(stripped)
    if _PREFIX_RE.match(stripped):
        return PrefixSpec(tuple(int(part) for part in stripped.split(".")))

    raise VersionParseError(
        f"Invalid version specifier: {raw!r}. "
        "Expected 'latest', a version (1.2.3), a prefix (1 or 1.2) "
        "or a 7-character commit hash"
    )


def parse_semantic_version(raw: str) -> SemanticVersion:
    """Parse a strict ``[v]N.N.N`` version string."""
    return SemanticVersion.parse(raw)


def parse_commit(raw: str) -> str:
    """
    Validate a 7-character alphanumeric commit hash.

    Raises:
        VersionParseError: If the hash has the wrong length or characters
    """
    if raw is None or not _COMMIT_RE.match(raw):
        raise VersionParseError(
            f"Invalid commit hash: {raw!r}. Expected 7 alphanumeric characters"
        )
    return raw


def try_parse_version(raw: str) -> Optional[SemanticVersion]:
    """Parse a semantic version, returning None when malformed."""
    try:
        return SemanticVersion.parse(raw)
    except VersionParseError:
        return None


def compare_versions(
    installed: SemanticVersion,
    requested: Union[SemanticVersion, ExactSpec],
    exact: bool = False,
) -> Compatibility:
    """
    Compare an installed version against a requested one.

    Major versions must match. Below 1.0 the minor version must match too,
    since pre-1.0 releases carry no minor-version compatibility guarantee.
    Otherwise the installed minor/patch must not be older than requested.

    Args:
        installed: Version reported by the installed compiler
        requested: Version the caller asked for
        exact: Require all three components to be identical

    Returns:
        EXACT, COMPATIBLE or INCOMPATIBLE
    """
    if isinstance(requested, ExactSpec):
        requested = requested.version

    if installed == requested:
        return Compatibility.EXACT
    if exact:
        return Compatibility.INCOMPATIBLE
    if installed.major != requested.major:
        return Compatibility.INCOMPATIBLE
    if installed.major == 0 and installed.minor != requested.minor:
        return Compatibility.INCOMPATIBLE
    if installed.minor < requested.minor:
        return Compatibility.INCOMPATIBLE
    if installed.minor == requested.minor and installed.patch < requested.patch:
        return Compatibility.INCOMPATIBLE
    return Compatibility.COMPATIBLE


def satisfies(
    installed: SemanticVersion,
    requested: Union[SemanticVersion, ExactSpec],
    exact: bool = False,
) -> bool:
    """Check whether the installed version fulfils the request."""
    return compare_versions(installed, requested, exact).satisfied


def select_latest(versions: Iterable[SemanticVersion]) -> SemanticVersion:
    """
    Select the greatest version.

    Raises:
        NoVersionsAvailableError: If there is nothing to choose from
    """
    versions = list(versions)
    if not versions:
        raise NoVersionsAvailableError("No versions available to choose from")
    return max(versions)
