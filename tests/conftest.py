"""Shared test fixtures."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tocedit.adapters.storage import FilesystemAdapter
from tocedit.domain.services import BookmarkService, split_lines
from tocedit.ports.metadata import MetadataPort

# Bookmarks on pages 2, 5, 5 and 9; stanzas start at line 7
SAMPLE_METADATA = """\
InfoBegin
InfoKey: Title
InfoValue: Sample Book
PdfID0: 8b2e1f0c
PdfID1: 8b2e1f0c
NumberOfPages: 20
BookmarkBegin
BookmarkTitle: Preface
BookmarkLevel: 1
BookmarkPageNumber: 2
BookmarkBegin
BookmarkTitle: Chapter One
BookmarkLevel: 1
BookmarkPageNumber: 5
BookmarkBegin
BookmarkTitle: Section 1.1: Getting started
BookmarkLevel: 2
BookmarkPageNumber: 5
BookmarkBegin
BookmarkTitle: Chapter Two
BookmarkLevel: 1
BookmarkPageNumber: 9
PageMediaBegin
PageMediaNumber: 1
PageMediaRotation: 0
PageMediaRect: 0 0 612 792
"""


@pytest.fixture
def metadata_lines() -> list[str]:
    """Sample metadata dump as lines."""
    return SAMPLE_METADATA.splitlines()


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    """Minimal file that passes the PDF header check."""
    path = tmp_path / "book.pdf"
    path.write_bytes(b"%PDF-1.4\n%original\n")
    return path


@pytest.fixture
def installed() -> list[list[str]]:
    """Metadata lines handed to the mock tool's update, one list per call."""
    return []


@pytest.fixture
def mock_metadata(metadata_lines: list[str], installed: list[list[str]]) -> MagicMock:
    """Mock metadata port that dumps the sample metadata."""
    mock = MagicMock(spec=MetadataPort)

    def dump(pdf: Path, dest: Path) -> None:
        dest.write_text("\n".join(metadata_lines) + "\n", encoding="utf-8")

    def update(pdf: Path, metadata: Path, output: Path) -> None:
        with open(metadata, encoding="utf-8", newline="") as f:
            installed.append(split_lines(f.read()))
        output.write_bytes(b"%PDF-1.4\n%updated\n")

    mock.dump.side_effect = dump
    mock.update.side_effect = update
    return mock


@pytest.fixture
def storage() -> FilesystemAdapter:
    return FilesystemAdapter(backup_suffix=".bak")


@pytest.fixture
def service(mock_metadata: MagicMock, storage: FilesystemAdapter) -> BookmarkService:
    return BookmarkService(metadata=mock_metadata, storage=storage)
