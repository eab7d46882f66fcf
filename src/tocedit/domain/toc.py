"""TOC file format: one ``PAGE LEVEL DESCRIPTION`` line per bookmark."""

import logging
import re
from collections.abc import Iterable

from .errors import TocValidationError
from .models import Bookmark, ValidationResult

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"^[0-9]+$")
# Fields are separated by ASCII blanks only; other whitespace belongs to the title
FIELD_SEPARATOR = re.compile(r"[ \t]+")


def split_fields(line: str) -> list[str]:
    stripped = line.strip(" \t")
    return FIELD_SEPARATOR.split(stripped) if stripped else []


def validate_toc(lines: Iterable[str]) -> ValidationResult:
    """Check every non-blank line of a TOC file.

    All violations are collected; line numbers are 1-based and count blank
    lines too.
    """
    result = ValidationResult()

    for number, line in enumerate(lines, start=1):
        fields = split_fields(line)
        if not fields:
            continue
        if len(fields) < 3:
            result.errors.append(f"line {number}: too few fields")
            continue
        if not NUMBER_PATTERN.match(fields[0]):
            result.errors.append(f"line {number}: non-integer page number")
        if not NUMBER_PATTERN.match(fields[1]):
            result.errors.append(f"line {number}: non-integer level number")

    return result


def parse_toc(lines: Iterable[str]) -> list[Bookmark]:
    """Read TOC lines into bookmarks, keeping file order.

    Raises:
        TocValidationError: listing every malformed line.
    """
    lines = list(lines)
    result = validate_toc(lines)
    if not result.valid:
        raise TocValidationError(result.errors)

    bookmarks = []
    for number, line in enumerate(lines, start=1):
        fields = split_fields(line)
        if not fields:
            continue
        bookmark = Bookmark(page=int(fields[0]), level=int(fields[1]), title=" ".join(fields[2:]))
        if bookmark.page < 1:
            logger.warning(
                f"line {number}: page 0 does not exist, '{bookmark.title}' has no target"
            )
        if bookmark.level < 1:
            logger.warning(f"line {number}: level 0 for '{bookmark.title}', levels start at 1")
        bookmarks.append(bookmark)

    logger.debug(f"Read {len(bookmarks)} TOC entries")
    return bookmarks


def format_toc(bookmarks: Iterable[Bookmark]) -> list[str]:
    return [bookmark.toc_line() for bookmark in bookmarks]
