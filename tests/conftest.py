"""
Pytest configuration and shared fixtures for altakit tests.
"""

import tempfile
import zipfile
from pathlib import Path
from typing import Dict, Generator

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_zip(temp_dir: Path):
    """Factory building a zip archive from a {member: content} mapping."""

    def _make_zip(members: Dict[str, str], name: str = "archive.zip") -> Path:
        archive_path = temp_dir / name
        with zipfile.ZipFile(archive_path, "w") as zf:
            for member, content in members.items():
                zf.writestr(member, content)
        return archive_path

    return _make_zip


@pytest.fixture
def release_archive_bytes() -> bytes:
    """Zip archive of a Linux release wrapped in a top-level directory."""
    import io

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        info = zipfile.ZipInfo("altac-1.2.0/bin/altac")
        info.external_attr = 0o755 << 16
        zf.writestr(info, "#!/bin/sh\necho altac 1.2.0\n")
        zf.writestr("altac-1.2.0/lib/core.alta", "module core\n")
    return buffer.getvalue()
