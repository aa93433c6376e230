"""
Platform tags for altakit.

Release archives are published per system and architecture using a closed
set of tags. User input and host detection are normalized to those tags
through an explicit alias table; anything outside it is rejected.

Usage:
    from altakit.core.platform import parse_system, detect_architecture

    system = parse_system("darwin")      # System.MACOS
    arch = detect_architecture()         # Architecture.ARCH64 on x86_64
"""

import platform
from enum import Enum
from pathlib import Path
from typing import Dict, Union

from altakit.core.exceptions import PlatformError


class System(Enum):
    """Operating systems release archives are built for."""

    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class Architecture(Enum):
    """Address widths release archives are built for."""

    ARCH64 = "arch64"
    ARCH32 = "arch32"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


SYSTEM_ALIASES: Dict[str, System] = {
    "macos": System.MACOS,
    "mac": System.MACOS,
    "osx": System.MACOS,
    "darwin": System.MACOS,
    "linux": System.LINUX,
    "windows": System.WINDOWS,
    "win": System.WINDOWS,
    "win32": System.WINDOWS,
    "win64": System.WINDOWS,
    "cygwin": System.WINDOWS,
    "unknown": System.UNKNOWN,
}

ARCHITECTURE_ALIASES: Dict[str, Architecture] = {
    "arch64": Architecture.ARCH64,
    "64": Architecture.ARCH64,
    "x64": Architecture.ARCH64,
    "x86_64": Architecture.ARCH64,
    "amd64": Architecture.ARCH64,
    "arm64": Architecture.ARCH64,
    "aarch64": Architecture.ARCH64,
    "arch32": Architecture.ARCH32,
    "32": Architecture.ARCH32,
    "x86": Architecture.ARCH32,
    "ia32": Architecture.ARCH32,
    "i386": Architecture.ARCH32,
    "i686": Architecture.ARCH32,
    "arm": Architecture.ARCH32,
    "unknown": Architecture.UNKNOWN,
}


def parse_system(name: Union[str, System]) -> System:
    """
    Normalize a system name to its tag.

    Args:
        name: Tag or alias (case-insensitive), e.g. 'darwin', 'Win32'

    Raises:
        PlatformError: If the name is not a recognized alias
    """
    if isinstance(name, System):
        return name
    try:
        return SYSTEM_ALIASES[name.strip().lower()]
    except KeyError:
        raise PlatformError(
            f"Unsupported system: {name!r}. "
            f"Supported: {', '.join(s.value for s in System)}"
        ) from None


def parse_architecture(name: Union[str, Architecture]) -> Architecture:
    """
    Normalize an architecture name to its tag.

    Args:
        name: Tag or alias (case-insensitive), e.g. 'x86_64', 'i686'

    Raises:
        PlatformError: If the name is not a recognized alias
    """
    if isinstance(name, Architecture):
        return name
    try:
        return ARCHITECTURE_ALIASES[name.strip().lower()]
    except KeyError:
        raise PlatformError(
            f"Unsupported architecture: {name!r}. "
            f"Supported: {', '.join(a.value for a in Architecture)}"
        ) from None


def detect_system() -> System:
    """Detect the host system; hosts outside the alias table are UNKNOWN."""
    return SYSTEM_ALIASES.get(platform.system().lower(), System.UNKNOWN)


def detect_architecture() -> Architecture:
    """Detect the host architecture; unrecognized machines are UNKNOWN."""
    return ARCHITECTURE_ALIASES.get(platform.machine().lower(), Architecture.UNKNOWN)


def binary_path(destination: Union[str, Path], system: System) -> Path:
    """
    Path of the compiler binary inside an installation.

    Windows archives place ``altac.exe`` at the root, others ship ``bin/altac``.
    """
    destination = Path(destination)
    if system is System.WINDOWS:
        return destination / "altac.exe"
    return destination / "bin" / "altac"
