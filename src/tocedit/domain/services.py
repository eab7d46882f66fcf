"""Domain services - orchestrate the bookmark editing workflows."""

import logging
import tempfile
from collections.abc import Iterable
from pathlib import Path

from ..config import FilesConfig
from ..ports.metadata import MetadataPort
from ..ports.storage import StoragePort
from .errors import FileAccessError, UsageError
from .metadata import (
    BOOKMARK_BEGIN,
    count_pages,
    extract_bookmarks,
    insert_bookmark,
    merge_bookmarks,
)
from .models import Bookmark, OperationResult, ValidationResult
from .toc import format_toc, parse_toc, validate_toc

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
# PDF readers accept junk before the header within the first kilobyte
HEADER_WINDOW = 1024


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` (and ``\\r\\n``) only.

    Titles and info values may hold U+2028, form feeds and other characters
    that ``str.splitlines`` treats as line breaks.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _count_stanzas(lines: Iterable[str]) -> int:
    return sum(1 for line in lines if line.strip() == BOOKMARK_BEGIN)


class BookmarkService:
    """Runs the dump, update, add and batch workflows against one PDF."""

    def __init__(
        self,
        metadata: MetadataPort,
        storage: StoragePort,
        files: FilesConfig | None = None,
    ) -> None:
        self.metadata = metadata
        self.storage = storage
        self.files = files or FilesConfig()

    def dump(self, pdf: Path, metadata_file: Path | None = None) -> OperationResult:
        """Write the full metadata dump of ``pdf`` to a text file."""
        self._require_pdf(pdf)
        metadata_file = metadata_file or self.files.metadata_file(pdf)

        lines = self._dump_lines(pdf)
        self.storage.write_lines(metadata_file, lines)
        logger.info(f"Metadata written: {metadata_file}")

        return OperationResult(path=metadata_file, count=_count_stanzas(lines))

    def update(self, pdf: Path, metadata_file: Path | None = None) -> OperationResult:
        """Install a metadata text file into ``pdf``.

        The PDF is backed up first and the tool writes from the backup onto
        the original path. If the tool fails the backup is put back.
        """
        self._require_pdf(pdf)
        metadata_file = metadata_file or self.files.metadata_file(pdf)
        lines = self._read_lines(metadata_file)

        backup = self.storage.backup(pdf)
        try:
            self.metadata.update(backup, metadata_file, pdf)
        except Exception:
            self.storage.restore(backup, pdf)
            raise

        logger.info(f"PDF updated: {pdf} (backup: {backup.name})")
        return OperationResult(path=pdf, count=_count_stanzas(lines))

    def add(
        self,
        pdf: Path,
        bookmark: Bookmark,
        dump: bool = False,
        update: bool = False,
        metadata_file: Path | None = None,
    ) -> OperationResult:
        """Insert one bookmark into the cached (or freshly dumped) metadata file.

        Pipeline:
            1. Dump metadata (if ``dump``), else read the cached file
            2. Insert the bookmark at its page-ordered position
            3. Back up and rewrite the metadata file
            4. Write it into the PDF (if ``update``)
        """
        self._check_bookmark(bookmark)
        metadata_file = metadata_file or self.files.metadata_file(pdf)

        if dump:
            self._require_pdf(pdf)
            lines = self._dump_lines(pdf)
        else:
            lines = self._read_lines(metadata_file)

        self._warn_out_of_range([bookmark], count_pages(lines))
        updated = insert_bookmark(lines, bookmark)

        if metadata_file.exists():
            self.storage.backup(metadata_file)
        self.storage.write_lines(metadata_file, updated)
        logger.info(
            f"Added bookmark '{bookmark.title}' (page {bookmark.page}, "
            f"level {bookmark.level}) to {metadata_file.name}"
        )

        if update:
            self.update(pdf, metadata_file)

        return OperationResult(path=metadata_file, count=_count_stanzas(updated))

    def batch_dump(self, pdf: Path, toc_file: Path | None = None) -> OperationResult:
        """Dump every bookmark of ``pdf`` into an editable TOC file.

        The TOC file is only written once extraction fully succeeded.
        """
        self._require_pdf(pdf)
        toc_file = toc_file or self.files.toc_file(pdf)

        bookmarks = extract_bookmarks(self._dump_lines(pdf))

        if toc_file.exists():
            self.storage.backup(toc_file)
        self.storage.write_lines(toc_file, format_toc(bookmarks))
        logger.info(f"TOC written: {toc_file} ({len(bookmarks)} bookmarks)")

        return OperationResult(path=toc_file, count=len(bookmarks))

    def batch_update(self, pdf: Path, toc_file: Path | None = None) -> OperationResult:
        """Replace every bookmark of ``pdf`` with the entries of a TOC file.

        Pipeline:
            1. Validate the TOC file (nothing is touched if it is invalid)
            2. Dump current metadata
            3. Merge the TOC entries in file order
            4. Update the PDF from the merged metadata
        """
        toc_file = toc_file or self.files.toc_file(pdf)
        bookmarks = parse_toc(self._read_lines(toc_file))
        self._require_pdf(pdf)

        lines = self._dump_lines(pdf)
        self._warn_out_of_range(bookmarks, count_pages(lines))
        merged = merge_bookmarks(lines, bookmarks)

        with tempfile.TemporaryDirectory(prefix="tocedit-") as tmp:
            metadata_file = Path(tmp) / self.files.metadata_file(pdf).name
            self.storage.write_lines(metadata_file, merged)
            self.update(pdf, metadata_file)

        logger.info(f"Merged {len(bookmarks)} bookmarks from {toc_file.name}")
        return OperationResult(path=pdf, count=len(bookmarks))

    def validate(self, toc_file: Path) -> ValidationResult:
        """Check a TOC file without touching any PDF."""
        result = validate_toc(self._read_lines(toc_file))
        if result.valid:
            logger.info(f"TOC file is valid: {toc_file.name}")
        else:
            for error in result.errors:
                logger.debug(f"{toc_file.name}: {error}")
        return result

    def _dump_lines(self, pdf: Path) -> list[str]:
        with tempfile.TemporaryDirectory(prefix="tocedit-") as tmp:
            dest = Path(tmp) / "metadata.txt"
            self.metadata.dump(pdf, dest)
            return self._read_lines(dest)

    def _read_lines(self, path: Path) -> list[str]:
        if not path.is_file():
            raise FileAccessError(f"File not found: {path}")
        try:
            with open(path, encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(f"Cannot read {path}: {e}") from e
        return split_lines(text)

    def _require_pdf(self, path: Path) -> None:
        """Abort unless ``path`` is a readable PDF file."""
        if not path.is_file():
            raise FileAccessError(f"File not found: {path}")
        try:
            with open(path, "rb") as f:
                head = f.read(HEADER_WINDOW)
        except OSError as e:
            raise FileAccessError(f"Cannot read {path}: {e}") from e
        if PDF_MAGIC not in head:
            raise FileAccessError(f"Not a PDF file: {path}")

    def _check_bookmark(self, bookmark: Bookmark) -> None:
        if bookmark.page < 1:
            raise UsageError(f"Page number must be positive: {bookmark.page}")
        if bookmark.level < 1:
            raise UsageError(f"Level must be positive: {bookmark.level}")
        if not bookmark.title.strip():
            raise UsageError("Bookmark description is empty")
        if "\n" in bookmark.title or "\r" in bookmark.title:
            raise UsageError("Bookmark description must be a single line")

    def _warn_out_of_range(self, bookmarks: Iterable[Bookmark], pages: int | None) -> None:
        if pages is None:
            return
        for bookmark in bookmarks:
            if bookmark.page > pages:
                logger.warning(
                    f"Bookmark '{bookmark.title}' points to page {bookmark.page}, "
                    f"document has {pages} pages"
                )
