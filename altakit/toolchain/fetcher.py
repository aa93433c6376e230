"""
Compiler download and installation.

This module resolves a version specifier to a concrete release, downloads
the matching archive for a system/architecture pair and installs it into a
destination directory:

1. Resolve ``latest`` or a prefix against the release manifest
2. Skip everything if ``version.txt`` already records this install
3. Download the archive into the temporary directory
4. Extract it into the destination and flatten a wrapper directory
5. Record ``<version>-<system>-<architecture>`` in ``version.txt``
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from altakit.config.settings import AltaKitConfig
from altakit.core.download import DownloadProgress, download_file
from altakit.core.exceptions import InvalidDestinationError
from altakit.core.filesystem import (
    atomic_write,
    extract_archive,
    flatten_single_root,
    is_empty_directory,
    move_path,
)
from altakit.core.platform import (
    Architecture,
    System,
    binary_path,
    parse_architecture,
    parse_system,
)
from altakit.core.version import (
    CommitSpec,
    ExactSpec,
    LatestSpec,
    PrefixSpec,
    VersionSpec,
    parse_version_spec,
)
from altakit.toolchain.manifest import ReleaseManifest, fetch_manifest

MARKER_FILE = "version.txt"


@dataclass
class FetchResult:
    """Result of a compiler fetch."""

    binary_path: Path
    """Path to the installed compiler binary"""

    version: str
    """Resolved release version or commit hash"""

    system: System

    architecture: Architecture

    was_cached: bool
    """Whether the install was skipped because version.txt already matched"""


def marker_content(version: str, system: System, architecture: Architecture) -> str:
    """Line recorded in version.txt for an install."""
    return f"{version}-{system.value}-{architecture.value}"


def read_marker(destination: Path) -> Optional[str]:
    """Read version.txt from destination, or None if absent."""
    marker = Path(destination) / MARKER_FILE
    if not marker.is_file():
        return None
    return marker.read_text(encoding="utf-8").strip()


def write_marker(destination: Path, content: str) -> None:
    """Overwrite version.txt in destination."""
    atomic_write(Path(destination) / MARKER_FILE, content + "\n")


def build_download_url(
    base_url: str,
    version: str,
    system: System,
    architecture: Architecture,
    automated: bool = False,
) -> str:
    """
    Build the archive URL for a build.

    Example:
        >>> build_download_url("https://host/files", "1.2.0", System.LINUX, Architecture.ARCH64)
        'https://host/files/release/1.2.0/altac-1.2.0-linux-arch64.zip/download'
    """
    kind = "automated" if automated else "release"
    name = f"altac-{version}-{system.value}-{architecture.value}.zip"
    return f"{base_url.rstrip('/')}/{kind}/{version}/{name}/download"


class CompilerFetcher:
    """
    Downloads and installs compiler releases.

    Every I/O collaborator can be replaced, which keeps resolution and
    install logic testable without a network.

    Example:
        >>> fetcher = CompilerFetcher()
        >>> result = fetcher.fetch("latest", "linux", "x86_64", Path("alta"), Path("tmp"))
        >>> print(f"Installed at: {result.binary_path}")
    """

    def __init__(
        self,
        config: Optional[AltaKitConfig] = None,
        manifest_loader: Optional[Callable[[], ReleaseManifest]] = None,
        downloader: Optional[Callable[..., Path]] = None,
        extractor: Optional[Callable[..., List[Path]]] = None,
        mover: Optional[Callable[..., None]] = None,
        silent: bool = False,
        logger: Optional[logging.Logger] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize compiler fetcher.

        Args:
            config: Settings (URLs, timeout). Defaults to built-in values.
            manifest_loader: Returns the release manifest
            downloader: ``(url, destination, progress_callback, timeout) -> Path``
            extractor: ``(archive, destination, overwrite) -> list of entries``
            mover: ``(source, target, overwrite) -> None``
            silent: Suppress progress reporting and informational messages
            logger: Logger for progress and warnings
            progress_callback: Receives download progress unless silent
        """
        self.config = config or AltaKitConfig()
        self.manifest_loader = manifest_loader or self._load_manifest
        self.downloader = downloader or download_file
        self.extractor = extractor or extract_archive
        self.mover = mover or move_path
        self.silent = silent
        self.logger = logger or logging.getLogger(__name__)
        self.progress_callback = None if silent else progress_callback

    def _load_manifest(self) -> ReleaseManifest:
        return fetch_manifest(self.config.manifest_url, timeout=self.config.timeout)

    def _info(self, message: str) -> None:
        if self.silent:
            self.logger.debug(message)
        else:
            self.logger.info(message)

    def resolve(self, spec: Union[str, VersionSpec]) -> Tuple[str, bool]:
        """
        Resolve a specifier to a concrete version.

        Args:
            spec: VersionSpec or raw specifier string

        Returns:
            Tuple of (version string, whether it is an automated commit build)

        Raises:
            VersionParseError: If a raw specifier is malformed
            NoVersionsAvailableError: If ``latest`` finds an empty manifest
            VersionNotFoundError: If no release matches a prefix
        """
        if isinstance(spec, str):
            spec = parse_version_spec(spec)

        if isinstance(spec, CommitSpec):
            return spec.commit, True
        if isinstance(spec, ExactSpec):
            return str(spec.version), False
        if isinstance(spec, LatestSpec):
            self._info("Looking up latest release")
            return str(self.manifest_loader().latest()), False
        if isinstance(spec, PrefixSpec):
            self._info(f"Looking up latest release matching {spec}")
            return str(self.manifest_loader().latest_matching(spec)), False

        raise TypeError(f"Unsupported version specifier: {spec!r}")

    def fetch(
        self,
        spec: Union[str, VersionSpec],
        system: Union[str, System],
        architecture: Union[str, Architecture],
        destination: Union[str, Path],
        temp_dir: Union[str, Path],
        force: bool = False,
        always: bool = False,
    ) -> FetchResult:
        """
        Install the compiler matching spec into destination.

        Args:
            spec: Version specifier (version, prefix, commit or 'latest')
            system: System tag or alias
            architecture: Architecture tag or alias
            destination: Installation directory
            temp_dir: Directory for the downloaded archive
            force: Overwrite existing files in destination
            always: Download even if version.txt records this install

        Returns:
            FetchResult with the installed binary path

        Raises:
            InvalidDestinationError: If destination exists and is not a directory
            FetchError: If resolution, download or extraction fails
        """
        system = parse_system(system)
        architecture = parse_architecture(architecture)
        destination = Path(destination)
        temp_dir = Path(temp_dir)

        if destination.exists() and not destination.is_dir():
            raise InvalidDestinationError(destination)

        version, automated = self.resolve(spec)
        expected_marker = marker_content(version, system, architecture)
        target_binary = binary_path(destination, system)

        if not always and read_marker(destination) == expected_marker:
            self._info(f"altac {version} is already installed in {destination}")
            return FetchResult(
                binary_path=target_binary,
                version=version,
                system=system,
                architecture=architecture,
                was_cached=True,
            )

        self._prepare_directories(destination, temp_dir)

        url = build_download_url(
            self.config.download_base_url, version, system, architecture, automated
        )
        archive = temp_dir / f"altac-{version}-{system.value}-{architecture.value}.zip"

        self._info(f"Downloading altac {version} for {system}-{architecture}")
        try:
            self.downloader(
                url,
                archive,
                progress_callback=self.progress_callback,
                timeout=self.config.timeout,
            )

            self._info(f"Extracting into {destination}")
            entries = self.extractor(archive, destination, overwrite=force)
            self._flatten(destination, entries, target_binary, force)
        finally:
            archive.unlink(missing_ok=True)

        write_marker(destination, expected_marker)
        self._info(f"Installed altac {version} at {target_binary}")

        return FetchResult(
            binary_path=target_binary,
            version=version,
            system=system,
            architecture=architecture,
            was_cached=False,
        )

    def _prepare_directories(self, destination: Path, temp_dir: Path) -> None:
        if destination.is_dir() and not is_empty_directory(destination):
            self.logger.warning(
                f"Destination {destination} is not empty; existing files are kept "
                "unless forced"
            )
        destination.mkdir(parents=True, exist_ok=True)
        temp_dir.mkdir(parents=True, exist_ok=True)

    def _flatten(
        self, destination: Path, entries: List[Path], target_binary: Path, force: bool
    ) -> None:
        # An archive already laid out like an install has no extra level
        if target_binary in {Path(entry) for entry in entries}:
            return
        if flatten_single_root(destination, entries, overwrite=force, mover=self.mover):
            self.logger.debug("Lifted archive contents out of wrapper directory")
