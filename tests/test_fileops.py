"""Tests for atomic_write."""

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from relbump.core.fileops import atomic_write


def _leftovers(directory: Path) -> list[str]:
    return [p.name for p in directory.iterdir() if p.name.endswith(".tmp")]


class TestAtomicWrite:
    """Tests for atomic_write."""

    def test_replaces_content(self, tmp_path: Path) -> None:
        target = tmp_path / "changelog"
        target.write_text("old\n")

        atomic_write(target, "new\n")

        assert target.read_text() == "new\n"
        assert _leftovers(tmp_path) == []

    def test_creates_missing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.spec"
        atomic_write(target, "content")
        assert target.read_text() == "content"

    def test_preserves_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "script"
        target.write_text("old")
        os.chmod(target, 0o755)

        atomic_write(target, "new")

        assert stat.S_IMODE(target.stat().st_mode) == 0o755

    def test_failed_rename_keeps_original_and_cleans_up(self, tmp_path: Path) -> None:
        target = tmp_path / "changelog"
        target.write_text("old\n")

        with patch("relbump.core.fileops.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                atomic_write(target, "new\n")

        assert target.read_text() == "old\n"
        assert _leftovers(tmp_path) == []

    def test_keyboard_interrupt_cleans_up(self, tmp_path: Path) -> None:
        target = tmp_path / "changelog"
        target.write_text("old\n")

        with patch("relbump.core.fileops.os.replace", side_effect=KeyboardInterrupt):
            with pytest.raises(KeyboardInterrupt):
                atomic_write(target, "new\n")

        assert target.read_text() == "old\n"
        assert _leftovers(tmp_path) == []
