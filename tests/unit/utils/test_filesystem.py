"""Tests for splice.utils.filesystem module."""

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from splice.utils.filesystem import (
    ensure_directory,
    read_existing_text,
    read_text_file,
    remove_file,
    resolve_project_path,
    write_file_atomic,
)

running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_nested_directories(self, temp_dir: Path):
        """Creates missing parents."""
        target = temp_dir / "a" / "b" / "c"

        result = ensure_directory(target)

        assert result == target
        assert target.is_dir()

    def test_existing_directory_is_fine(self, temp_dir: Path):
        """Does nothing for an existing directory."""
        assert ensure_directory(temp_dir) == temp_dir


class TestWriteFileAtomic:
    """Tests for write_file_atomic function."""

    def test_writes_new_file(self, temp_dir: Path):
        """Creates the file with the given content."""
        target = temp_dir / "new.ts"

        write_file_atomic(target, "export const a = 1;\n")

        assert target.read_text() == "export const a = 1;\n"

    def test_creates_parent_directories(self, temp_dir: Path):
        """Missing parent directories are created."""
        target = temp_dir / "src" / "deep" / "file.ts"

        write_file_atomic(target, "x")

        assert target.read_text() == "x"

    def test_replaces_existing_file(self, temp_dir: Path):
        """Existing content is fully replaced."""
        target = temp_dir / "file.ts"
        target.write_text("original content")

        write_file_atomic(target, "new")

        assert target.read_text() == "new"

    def test_writes_bytes(self, temp_dir: Path):
        """Accepts bytes content."""
        target = temp_dir / "file.bin"

        write_file_atomic(target, b"\x00\x01")

        assert target.read_bytes() == b"\x00\x01"

    def test_leaves_no_temp_files(self, temp_dir: Path):
        """Only the target remains after a successful write."""
        write_file_atomic(temp_dir / "file.ts", "content")

        assert [p.name for p in temp_dir.iterdir()] == ["file.ts"]

    def test_keeps_file_mode(self, temp_dir: Path):
        """The replaced file keeps its permission bits."""
        target = temp_dir / "script.sh"
        target.write_text("old")
        target.chmod(0o755)

        write_file_atomic(target, "new")

        assert stat.S_IMODE(target.stat().st_mode) == 0o755

    def test_new_file_follows_umask(self, temp_dir: Path):
        """A new file gets the same mode as one created with open()."""
        previous = os.umask(0o022)
        try:
            write_file_atomic(temp_dir / "new.ts", "x")
            (temp_dir / "plain.ts").write_text("x")
        finally:
            os.umask(previous)

        mode = stat.S_IMODE((temp_dir / "new.ts").stat().st_mode)
        assert mode == 0o644
        assert mode == stat.S_IMODE((temp_dir / "plain.ts").stat().st_mode)

    def test_writes_through_symlink(self, temp_dir: Path):
        """A symlinked target stays a link and its target gets the content."""
        real = temp_dir / "real.ts"
        real.write_text("original content")
        link = temp_dir / "link.ts"
        link.symlink_to(real)

        write_file_atomic(link, "new")

        assert link.is_symlink()
        assert real.read_text() == "new"
        assert sorted(p.name for p in temp_dir.iterdir()) == ["link.ts", "real.ts"]

    def test_failed_rename_keeps_original(self, temp_dir: Path):
        """A failing rename leaves the target untouched and removes the temp file."""
        target = temp_dir / "file.ts"
        target.write_text("original content")

        with patch("splice.utils.filesystem.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                write_file_atomic(target, "new")

        assert target.read_text() == "original content"
        assert [p.name for p in temp_dir.iterdir()] == ["file.ts"]

    def test_parent_is_a_file(self, temp_dir: Path):
        """Writing below a regular file fails without side effects."""
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(OSError):
            write_file_atomic(blocker / "file.ts", "x")

        assert blocker.read_text() == "not a directory"

    @pytest.mark.skipif(running_as_root, reason="root ignores directory permissions")
    def test_read_only_directory(self, temp_dir: Path):
        """Writing into a read-only directory raises PermissionError."""
        locked = temp_dir / "locked"
        locked.mkdir()
        (locked / "file.ts").write_text("original content")
        locked.chmod(0o555)

        try:
            with pytest.raises(PermissionError):
                write_file_atomic(locked / "file.ts", "new")
            assert (locked / "file.ts").read_text() == "original content"
        finally:
            locked.chmod(0o755)


class TestReadFiles:
    """Tests for read_text_file and read_existing_text."""

    def test_read_text_file(self, temp_dir: Path):
        """Reads UTF-8 text."""
        target = temp_dir / "file.ts"
        target.write_text("héllo", encoding="utf-8")

        assert read_text_file(target) == "héllo"

    def test_read_existing_missing_file(self, temp_dir: Path):
        """Missing files read as None."""
        assert read_existing_text(temp_dir / "missing.ts") is None

    def test_read_existing_binary_file(self, temp_dir: Path):
        """Undecodable files read as None."""
        target = temp_dir / "image.bin"
        target.write_bytes(b"\xff\xfe\x00\x81")

        assert read_existing_text(target) is None

    def test_read_existing_directory(self, temp_dir: Path):
        """A directory reads as None."""
        assert read_existing_text(temp_dir) is None


class TestRemoveFile:
    """Tests for remove_file function."""

    def test_removes_existing(self, temp_dir: Path):
        """Removes a file and reports it."""
        target = temp_dir / "file.ts"
        target.write_text("x")

        assert remove_file(target) is True
        assert not target.exists()

    def test_missing_file(self, temp_dir: Path):
        """Reports False for a missing file."""
        assert remove_file(temp_dir / "missing.ts") is False


class TestResolveProjectPath:
    """Tests for resolve_project_path function."""

    def test_relative_path(self):
        """Relative paths are joined to the root."""
        assert resolve_project_path(Path("/app"), "src/x.ts") == Path("/app/src/x.ts")

    def test_absolute_path_kept(self):
        """Absolute paths are returned as they are."""
        assert resolve_project_path(Path("/app"), "/other/x.ts") == Path("/other/x.ts")

    def test_collapses_parent_segments(self):
        """.. segments are normalized."""
        assert resolve_project_path(Path("/app"), "src/../lib/x.ts") == Path("/app/lib/x.ts")

    def test_equivalent_spellings_match(self):
        """Different spellings of one file resolve to the same path."""
        root = Path("/app")

        assert resolve_project_path(root, "./src/x.ts") == resolve_project_path(root, "src/x.ts")
