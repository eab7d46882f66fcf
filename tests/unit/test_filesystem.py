"""Unit tests for filesystem storage adapter."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from tocedit.adapters.storage.filesystem import FilesystemAdapter


class TestBackup:
    """Tests for backup and restore."""

    def test_backup_copies_file(self, tmp_path: Path) -> None:
        path = tmp_path / "book.pdf"
        path.write_bytes(b"original")

        backup = FilesystemAdapter().backup(path)

        assert backup == tmp_path / "book.pdf.bak"
        assert backup.read_bytes() == b"original"
        assert path.read_bytes() == b"original"

    def test_backup_replaces_older_backup(self, tmp_path: Path) -> None:
        path = tmp_path / "book.pdf"
        (tmp_path / "book.pdf.bak").write_bytes(b"stale")
        path.write_bytes(b"fresh")

        FilesystemAdapter().backup(path)

        assert (tmp_path / "book.pdf.bak").read_bytes() == b"fresh"

    def test_custom_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "book.pdf"
        path.write_bytes(b"x")
        assert FilesystemAdapter(backup_suffix="~").backup(path) == tmp_path / "book.pdf~"

    def test_restore(self, tmp_path: Path) -> None:
        path = tmp_path / "book.pdf"
        path.write_bytes(b"original")
        adapter = FilesystemAdapter()
        backup = adapter.backup(path)
        path.write_bytes(b"broken")

        adapter.restore(backup, path)

        assert path.read_bytes() == b"original"


class TestWriteLines:
    """Tests for write_lines."""

    def test_writes_terminated_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "book.toc"
        FilesystemAdapter().write_lines(path, ["1 1 Preface", "3 1 Für Elise"])
        assert path.read_text(encoding="utf-8") == "1 1 Preface\n3 1 Für Elise\n"

    def test_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.toc"
        FilesystemAdapter().write_lines(path, [])
        assert path.read_text() == ""

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "book.info"
        FilesystemAdapter().write_lines(path, ["NumberOfPages: 1"])
        assert path.exists()

    def test_failed_write_keeps_original(self, tmp_path: Path) -> None:
        path = tmp_path / "book.toc"
        path.write_text("1 1 Keep me\n")

        def lines() -> Iterator[str]:
            yield "2 1 Half"
            raise RuntimeError("interrupted")

        with pytest.raises(RuntimeError):
            FilesystemAdapter().write_lines(path, lines())

        assert path.read_text() == "1 1 Keep me\n"
        assert list(tmp_path.iterdir()) == [path]
