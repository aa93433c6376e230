"""
File system utilities for installing compiler archives.

This module provides:
- Zip extraction with directory traversal protection
- Moving files and directories with optional overwrite
- Flattening archives that wrap their content in a single directory
- Atomic writes and safe directory removal
"""

import logging
import os
import shutil
import stat
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, List, Optional, Union

from altakit.core.exceptions import AltaKitError, ExtractionError

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


class FilesystemError(AltaKitError):
    """Base exception for filesystem operations."""

    pass


class InsecureArchiveError(ExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> Path:
    """
    Validate that an archive member path is safe to extract.

    Returns:
        Resolved path of the member under destination

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )
    return member_path


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    overwrite: bool = False,
) -> List[Path]:
    """
    Extract a zip archive into a directory.

    Existing files are replaced only when ``overwrite`` is set; otherwise they
    are left untouched.

    Args:
        archive_path: Path to the .zip file
        destination: Directory to extract to (created if missing)
        overwrite: Replace files that already exist

    Returns:
        Paths of all archive entries under destination, in archive order

    Raises:
        ExtractionError: If the archive is missing, corrupt or unsafe
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.is_file():
        raise ExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.infolist()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member.filename, destination)

            entries = []
            for member in members:
                target = destination / member.filename
                entries.append(target)

                if member.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                if target.exists() and not overwrite:
                    logger.debug(f"Keeping existing file: {target}")
                    continue

                zf.extract(member, destination)
                _restore_mode(member, target)
    except ExtractionError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {len(entries)} entries into {destination}")
    return entries


def _restore_mode(member: zipfile.ZipInfo, target: Path) -> None:
    """Apply Unix permission bits stored in the archive (zipfile drops them)."""
    mode = member.external_attr >> 16
    if mode and not IS_WINDOWS:
        os.chmod(target, stat.S_IMODE(mode))


# ============================================================================
# Moving and Flattening
# ============================================================================


def move_path(
    source: Union[str, Path], target: Union[str, Path], overwrite: bool = False
) -> None:
    """
    Move a file or directory.

    When the target exists and ``overwrite`` is set it is replaced. Otherwise
    directories are merged entry by entry and existing files are kept.

    Raises:
        FilesystemError: If the source does not exist
    """
    source = Path(source)
    target = Path(target)

    if not source.exists():
        raise FilesystemError(f"Source does not exist: {source}")

    if target.exists():
        if overwrite:
            if target.is_dir() and not target.is_symlink():
                safe_rmtree(target)
            else:
                target.unlink()
        elif source.is_dir() and target.is_dir():
            for child in source.iterdir():
                move_path(child, target / child.name, overwrite=False)
            return
        else:
            logger.debug(f"Keeping existing path: {target}")
            return

    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(target))


def flatten_single_root(
    destination: Union[str, Path],
    entries: List[Path],
    overwrite: bool = False,
    mover: Optional[Callable[..., None]] = None,
) -> bool:
    """
    Lift the contents of a single wrapper directory into destination.

    Archives sometimes nest everything under one top-level directory
    (``altac-1.2.0/bin/altac``). Its children are moved up and the wrapper
    is removed.

    Args:
        destination: Directory the archive was extracted into
        entries: Extracted entry paths as returned by extract_archive
        overwrite: Replace existing paths while moving
        mover: ``(source, target, overwrite)`` callable, defaults to move_path

    Returns:
        True if a wrapper directory was flattened

    Raises:
        ExtractionError: If an entry lies outside destination or the wrapper
            cannot be moved aside
    """
    destination = Path(destination)
    mover = mover or move_path

    roots = set()
    for entry in entries:
        try:
            relative = Path(entry).relative_to(destination)
        except ValueError:
            raise ExtractionError(
                f"Extracted entry {entry} is not under {destination}"
            ) from None
        if relative.parts:
            roots.add(relative.parts[0])

    if len(roots) != 1:
        return False

    wrapper = destination / roots.pop()
    if not wrapper.is_dir():
        return False

    logger.debug(f"Flattening wrapper directory {wrapper.name}")

    # Rename first so a child sharing the wrapper's name can take its place
    staging = destination / f".{wrapper.name}.flatten"
    # Left behind by an interrupted run
    safe_rmtree(staging)
    try:
        wrapper.rename(staging)
    except OSError as e:
        raise ExtractionError(f"Failed to flatten {wrapper}: {e}") from e
    for child in list(staging.iterdir()):
        mover(child, destination / child.name, overwrite=overwrite)

    safe_rmtree(staging)
    return True


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: str, encoding: str = "utf-8"
) -> None:
    """
    Write text atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Create temp file in same directory (ensures same filesystem)
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "w", encoding=encoding) as f:
            f.write(content)
        temp_path.replace(file_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree, clearing read-only flags on Windows.

    Raises:
        FilesystemError: If path is not a directory or deletion fails
    """
    path = Path(path)

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, target, exc_info):
                """Error handler for Windows read-only files."""
                if not os.access(target, os.W_OK):
                    os.chmod(target, stat.S_IWRITE)
                    func(target)
                else:
                    raise exc_info[1]

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def is_empty_directory(path: Union[str, Path]) -> bool:
    """Check if path is an existing directory with no entries."""
    path = Path(path)
    if not path.is_dir():
        return False
    return not any(path.iterdir())
