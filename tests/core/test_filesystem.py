"""
Tests for file system utilities.

Covers zip extraction, moving with and without overwrite, wrapper
flattening and atomic writes.
"""

import os
import zipfile
from pathlib import Path

import pytest

from altakit.core.exceptions import ExtractionError
from altakit.core.filesystem import (
    FilesystemError,
    InsecureArchiveError,
    atomic_write,
    extract_archive,
    flatten_single_root,
    is_empty_directory,
    move_path,
    safe_rmtree,
)


# ============================================================================
# Archive Extraction Tests
# ============================================================================


class TestExtractArchive:
    """Tests for extract_archive."""

    def test_extracts_and_lists_entries(self, temp_dir, make_zip):
        archive = make_zip({"file1.txt": "Content 1", "subdir/file2.txt": "Content 2"})
        dest = temp_dir / "out"

        entries = extract_archive(archive, dest)

        assert (dest / "file1.txt").read_text() == "Content 1"
        assert (dest / "subdir" / "file2.txt").read_text() == "Content 2"
        assert entries == [dest / "file1.txt", dest / "subdir" / "file2.txt"]

    def test_keeps_existing_files_without_overwrite(self, temp_dir, make_zip):
        archive = make_zip({"file.txt": "new"})
        dest = temp_dir / "out"
        dest.mkdir()
        (dest / "file.txt").write_text("old")

        extract_archive(archive, dest, overwrite=False)

        assert (dest / "file.txt").read_text() == "old"

    def test_replaces_existing_files_with_overwrite(self, temp_dir, make_zip):
        archive = make_zip({"file.txt": "new"})
        dest = temp_dir / "out"
        dest.mkdir()
        (dest / "file.txt").write_text("old")

        extract_archive(archive, dest, overwrite=True)

        assert (dest / "file.txt").read_text() == "new"

    @pytest.mark.skipif(os.name == "nt", reason="Unix permission bits")
    def test_restores_executable_bit(self, temp_dir):
        archive = temp_dir / "exec.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            info = zipfile.ZipInfo("bin/altac")
            info.external_attr = 0o755 << 16
            zf.writestr(info, "binary")

        extract_archive(archive, temp_dir / "out")

        assert os.access(temp_dir / "out" / "bin" / "altac", os.X_OK)

    def test_rejects_directory_traversal(self, temp_dir, make_zip):
        archive = make_zip({"../../../etc/passwd": "malicious content"})

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, temp_dir / "out")

    def test_corrupt_archive(self, temp_dir):
        archive = temp_dir / "broken.zip"
        archive.write_bytes(b"not a zip file")

        with pytest.raises(ExtractionError, match="Failed to extract"):
            extract_archive(archive, temp_dir / "out")

    def test_missing_archive(self, temp_dir):
        with pytest.raises(ExtractionError, match="Archive not found"):
            extract_archive(temp_dir / "missing.zip", temp_dir / "out")


# ============================================================================
# Move and Flatten Tests
# ============================================================================


class TestMovePath:
    """Tests for move_path."""

    def test_moves_file(self, temp_dir):
        (temp_dir / "a.txt").write_text("a")

        move_path(temp_dir / "a.txt", temp_dir / "nested" / "b.txt")

        assert (temp_dir / "nested" / "b.txt").read_text() == "a"
        assert not (temp_dir / "a.txt").exists()

    def test_keeps_existing_file_without_overwrite(self, temp_dir):
        (temp_dir / "src.txt").write_text("new")
        (temp_dir / "dst.txt").write_text("old")

        move_path(temp_dir / "src.txt", temp_dir / "dst.txt")

        assert (temp_dir / "dst.txt").read_text() == "old"

    def test_replaces_existing_directory_with_overwrite(self, temp_dir):
        (temp_dir / "src").mkdir()
        (temp_dir / "src" / "new.txt").write_text("new")
        (temp_dir / "dst").mkdir()
        (temp_dir / "dst" / "stale.txt").write_text("stale")

        move_path(temp_dir / "src", temp_dir / "dst", overwrite=True)

        assert (temp_dir / "dst" / "new.txt").exists()
        assert not (temp_dir / "dst" / "stale.txt").exists()

    def test_merges_directories_without_overwrite(self, temp_dir):
        (temp_dir / "src").mkdir()
        (temp_dir / "src" / "new.txt").write_text("new")
        (temp_dir / "dst").mkdir()
        (temp_dir / "dst" / "kept.txt").write_text("kept")

        move_path(temp_dir / "src", temp_dir / "dst")

        assert (temp_dir / "dst" / "new.txt").read_text() == "new"
        assert (temp_dir / "dst" / "kept.txt").read_text() == "kept"

    def test_missing_source(self, temp_dir):
        with pytest.raises(FilesystemError, match="Source does not exist"):
            move_path(temp_dir / "nope", temp_dir / "dst")


class TestFlattenSingleRoot:
    """Tests for flatten_single_root."""

    def test_lifts_wrapper_contents(self, temp_dir, make_zip):
        archive = make_zip({"altac-1.2.0/bin/altac": "x", "altac-1.2.0/README": "r"})
        dest = temp_dir / "out"
        entries = extract_archive(archive, dest)

        assert flatten_single_root(dest, entries) is True

        assert (dest / "bin" / "altac").exists()
        assert (dest / "README").exists()
        assert not (dest / "altac-1.2.0").exists()
        assert sorted(p.name for p in dest.iterdir()) == ["README", "bin"]

    def test_child_named_like_wrapper(self, temp_dir, make_zip):
        archive = make_zip({"altac/altac/file": "x"})
        dest = temp_dir / "out"
        entries = extract_archive(archive, dest)

        assert flatten_single_root(dest, entries) is True
        assert (dest / "altac" / "file").exists()

    def test_multiple_roots_untouched(self, temp_dir, make_zip):
        archive = make_zip({"bin/altac": "x", "lib/core": "y"})
        dest = temp_dir / "out"
        entries = extract_archive(archive, dest)

        assert flatten_single_root(dest, entries) is False
        assert (dest / "bin" / "altac").exists()

    def test_single_file_untouched(self, temp_dir, make_zip):
        archive = make_zip({"altac.exe": "x"})
        dest = temp_dir / "out"
        entries = extract_archive(archive, dest)

        assert flatten_single_root(dest, entries) is False
        assert (dest / "altac.exe").exists()

    def test_clears_stale_staging_directory(self, temp_dir, make_zip):
        archive = make_zip({"altac-1.2.0/bin/altac": "x"})
        dest = temp_dir / "out"
        entries = extract_archive(archive, dest)
        stale = dest / ".altac-1.2.0.flatten"
        stale.mkdir()
        (stale / "leftover").write_text("old")

        assert flatten_single_root(dest, entries) is True

        assert (dest / "bin" / "altac").exists()
        assert not stale.exists()
        assert not (dest / "leftover").exists()

    def test_entry_outside_destination(self, temp_dir):
        dest = temp_dir / "out"
        dest.mkdir()

        with pytest.raises(ExtractionError, match="not under"):
            flatten_single_root(dest, [Path("bin/altac")])

    def test_uses_custom_mover(self, temp_dir, make_zip):
        archive = make_zip({"wrap/a": "1", "wrap/b": "2"})
        dest = temp_dir / "out"
        entries = extract_archive(archive, dest)
        moves = []

        def mover(source, target, overwrite=False):
            moves.append((source.name, target, overwrite))
            move_path(source, target, overwrite)

        flatten_single_root(dest, entries, overwrite=True, mover=mover)

        assert sorted(m[0] for m in moves) == ["a", "b"]
        assert all(m[2] is True for m in moves)


# ============================================================================
# Safe File Operation Tests
# ============================================================================


class TestSafeOperations:
    """Tests for atomic_write, safe_rmtree and is_empty_directory."""

    def test_atomic_write_replaces_content(self, temp_dir):
        target = temp_dir / "dir" / "version.txt"
        atomic_write(target, "first")
        atomic_write(target, "second")

        assert target.read_text() == "second"
        assert [p.name for p in target.parent.iterdir()] == ["version.txt"]

    def test_safe_rmtree(self, temp_dir):
        (temp_dir / "tree" / "sub").mkdir(parents=True)
        (temp_dir / "tree" / "sub" / "f").write_text("x")

        safe_rmtree(temp_dir / "tree")

        assert not (temp_dir / "tree").exists()

    def test_safe_rmtree_missing_is_noop(self, temp_dir):
        safe_rmtree(temp_dir / "missing")

    def test_safe_rmtree_rejects_file(self, temp_dir):
        (temp_dir / "file").write_text("x")

        with pytest.raises(FilesystemError, match="not a directory"):
            safe_rmtree(temp_dir / "file")

    def test_is_empty_directory(self, temp_dir):
        assert is_empty_directory(temp_dir)
        (temp_dir / "f").write_text("x")
        assert not is_empty_directory(temp_dir)
        assert not is_empty_directory(temp_dir / "missing")
