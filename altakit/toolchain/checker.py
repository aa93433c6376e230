"""
Installed compiler version checking.

Answers whether the ``altac`` found on the system satisfies a requested
release version or commit build. A missing compiler is a normal negative
result, not an error.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from altakit.core.exceptions import InternalError, InvalidInputError, VersionParseError
from altakit.core.version import (
    Compatibility,
    SemanticVersion,
    compare_versions,
    parse_commit,
    parse_semantic_version,
)

logger = logging.getLogger(__name__)

# "1.2.3", "1.2.3-abc123d", "1.2.3 (abc123d)", "(1.2.3-abc123d)"
_PROBE_VERSION_RE = re.compile(
    r"([0-9]+)\.([0-9]+)\.([0-9]+)(?:-([0-9A-Za-z]{7})\b|\s*\(([0-9A-Za-z]{7})\))?"
)


@dataclass
class CheckResult:
    """Outcome of checking the installed compiler."""

    satisfied: bool
    installed: Optional[SemanticVersion] = None
    installed_commit: Optional[str] = None
    compatibility: Optional[Compatibility] = None
    """None when the compiler is missing or nothing was requested"""


class CompilerProbe:
    """Query the installed compiler for its version report."""

    def __init__(self, executable: str = "altac", timeout: int = 10):
        self.executable = executable
        self.timeout = timeout

    def __call__(self) -> Optional[str]:
        """
        Run ``<executable> --version``.

        Returns:
            Combined stdout/stderr, or None if the compiler is unavailable
        """
        try:
            result = subprocess.run(
                [self.executable, "--version"],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (FileNotFoundError, PermissionError):
            logger.debug(f"Compiler not found: {self.executable}")
            return None
        except subprocess.TimeoutExpired:
            logger.debug(f"Timeout querying version from {self.executable}")
            return None

        if result.returncode != 0:
            logger.debug(
                f"{self.executable} --version returned {result.returncode}"
            )
            return None

        return (result.stdout + result.stderr).strip()


def parse_probe_output(output: str) -> Tuple[SemanticVersion, Optional[str]]:
    """
    Extract the version and optional commit from a version report.

    Raises:
        InternalError: If the report contains no semantic version
    """
    match = _PROBE_VERSION_RE.search(output or "")
    if not match:
        raise InternalError(f"Unrecognized compiler version output: {output!r}")

    major, minor, patch, dash_commit, paren_commit = match.groups()
    version = SemanticVersion(int(major), int(minor), int(patch))
    return version, dash_commit or paren_commit


class VersionChecker:
    """
    Check the installed compiler against a version or commit constraint.

    Example:
        >>> checker = VersionChecker()
        >>> checker.check(version="1.2.0")
        True
    """

    def __init__(
        self,
        probe: Optional[Callable[[], Optional[str]]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            probe: Callable returning the compiler's version report or None
                when it is absent. Defaults to running ``altac --version``.
            logger: Logger for advisory messages
        """
        self.probe = probe or CompilerProbe()
        self.logger = logger or logging.getLogger(__name__)

    def check(
        self,
        version: Optional[str] = None,
        commit: Optional[str] = None,
        exact: bool = False,
    ) -> bool:
        """
        Check whether the installed compiler satisfies the constraint.

        Args:
            version: Requested release, ``[v]N.N.N``
            commit: Requested commit build, 7 alphanumeric characters.
                Takes precedence over version.
            exact: Require an identical version instead of a compatible one

        Raises:
            InvalidInputError: If version or commit is malformed
            InternalError: If the compiler's version report is unrecognized
        """
        return self.inspect(version=version, commit=commit, exact=exact).satisfied

    def inspect(
        self,
        version: Optional[str] = None,
        commit: Optional[str] = None,
        exact: bool = False,
    ) -> CheckResult:
        """Like check(), but returns the details of the comparison."""
        requested_version, requested_commit = self._validate(version, commit)

        if requested_commit is not None and requested_version is not None:
            self.logger.warning(
                f"Both version and commit given; ignoring version {version}"
            )
            requested_version = None

        output = self.probe()
        if output is None:
            self.logger.debug("No installed compiler found")
            return CheckResult(satisfied=False)

        if requested_commit is None and requested_version is None:
            return CheckResult(satisfied=True)

        installed, installed_commit = parse_probe_output(output)
        self.logger.debug(
            f"Installed compiler: {installed}"
            + (f" ({installed_commit})" if installed_commit else "")
        )

        if requested_commit is not None:
            matched = installed_commit == requested_commit
            return CheckResult(
                satisfied=matched,
                installed=installed,
                installed_commit=installed_commit,
                compatibility=(
                    Compatibility.EXACT if matched else Compatibility.INCOMPATIBLE
                ),
            )

        if installed_commit is not None:
            # Commit builds never satisfy a release request
            compatibility = Compatibility.INCOMPATIBLE
        else:
            compatibility = compare_versions(installed, requested_version, exact)

        if compatibility is Compatibility.COMPATIBLE:
            self.logger.warning(
                f"Installed compiler {installed} is compatible with, "
                f"but not identical to, requested {requested_version}"
            )

        return CheckResult(
            satisfied=compatibility.satisfied,
            installed=installed,
            installed_commit=installed_commit,
            compatibility=compatibility,
        )

    @staticmethod
    def _validate(
        version: Optional[str], commit: Optional[str]
    ) -> Tuple[Optional[SemanticVersion], Optional[str]]:
        try:
            parsed_version = (
                parse_semantic_version(version) if version is not None else None
            )
            parsed_commit = parse_commit(commit) if commit is not None else None
        except VersionParseError as e:
            raise InvalidInputError(str(e)) from e
        return parsed_version, parsed_commit
