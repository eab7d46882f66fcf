"""Bookmark stanzas in the metadata dump of the external PDF tool.

A dump is handled as a list of lines without line terminators. Each bookmark
is encoded as a stanza of four consecutive lines::

    BookmarkBegin
    BookmarkTitle: <text>
    BookmarkLevel: <integer>
    BookmarkPageNumber: <integer>

Every other line (document info, page media, the ``NumberOfPages`` marker)
is opaque and passes through the transforms below unchanged.
"""

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from .errors import MetadataFormatError
from .models import Bookmark

logger = logging.getLogger(__name__)

BOOKMARK_BEGIN = "BookmarkBegin"
TITLE_LABEL = "BookmarkTitle:"
LEVEL_LABEL = "BookmarkLevel:"
PAGE_LABEL = "BookmarkPageNumber:"
PAGE_COUNT_LABEL = "NumberOfPages:"

INTEGER_PATTERN = re.compile(r"^[0-9]+$")


class _State(Enum):
    OUTSIDE = "outside"
    EXPECT_TITLE = "expect-title"
    EXPECT_LEVEL = "expect-level"
    EXPECT_PAGE = "expect-page"


# Label each state expects, and the state that follows it
_TRANSITIONS = {
    _State.EXPECT_TITLE: (TITLE_LABEL, _State.EXPECT_LEVEL),
    _State.EXPECT_LEVEL: (LEVEL_LABEL, _State.EXPECT_PAGE),
    _State.EXPECT_PAGE: (PAGE_LABEL, _State.OUTSIDE),
}


@dataclass
class Stanza:
    """A complete bookmark stanza and the raw lines it was read from."""

    bookmark: Bookmark
    lines: list[str]
    line_number: int  # 1-based line of BookmarkBegin


def _field_name(label: str) -> str:
    return label.rstrip(":")


def _field_value(line: str, label: str) -> str:
    value = line[len(label):]
    return value[1:] if value.startswith(" ") else value


def is_page_count(line: str) -> bool:
    return line.startswith(PAGE_COUNT_LABEL)


def parse_metadata(lines: Iterable[str]) -> list[str | Stanza]:
    """Split a metadata dump into pass-through lines and bookmark stanzas.

    Scanning never stops at the first defect. A line that lacks the label
    expected at its position is reported and then re-read as an ordinary
    line, so the stanza after a broken one is still recognised.

    Raises:
        MetadataFormatError: with one message per defect, after the full scan.
    """
    segments: list[str | Stanza] = []
    issues: list[str] = []

    state = _State.OUTSIDE
    pending: list[str] = []
    values: dict[str, str] = {}
    start = 0
    number = 0

    for number, line in enumerate(lines, start=1):
        if state is not _State.OUTSIDE:
            label, next_state = _TRANSITIONS[state]
            if line.startswith(label):
                value = _field_value(line, label)
                pending.append(line)
                values[label] = value
                if label != TITLE_LABEL and not INTEGER_PATTERN.match(value.strip()):
                    issues.append(
                        f"line {number}: non-integer {_field_name(label)} value {value.strip()!r}"
                    )
                state = next_state
                if state is _State.OUTSIDE:
                    if INTEGER_PATTERN.match(values[LEVEL_LABEL].strip()) and INTEGER_PATTERN.match(
                        values[PAGE_LABEL].strip()
                    ):
                        bookmark = Bookmark(
                            page=int(values[PAGE_LABEL]),
                            level=int(values[LEVEL_LABEL]),
                            title=values[TITLE_LABEL],
                        )
                        segments.append(Stanza(bookmark, pending, start))
                    else:
                        segments.extend(pending)
                    pending = []
                continue

            issues.append(f"line {number}: missing {_field_name(label)}")
            segments.extend(pending)
            pending = []
            state = _State.OUTSIDE

        if line.strip() == BOOKMARK_BEGIN:
            state = _State.EXPECT_TITLE
            pending = [line]
            values = {}
            start = number
        else:
            segments.append(line)

    if state is not _State.OUTSIDE:
        label, _ = _TRANSITIONS[state]
        issues.append(
            f"line {number + 1}: unexpected end of input, missing {_field_name(label)}"
        )
        segments.extend(pending)

    if issues:
        for issue in issues:
            logger.debug(f"Metadata defect: {issue}")
        raise MetadataFormatError(issues)

    return segments


def render_stanza(bookmark: Bookmark) -> list[str]:
    return [
        BOOKMARK_BEGIN,
        f"{TITLE_LABEL} {bookmark.title}",
        f"{LEVEL_LABEL} {bookmark.level}",
        f"{PAGE_LABEL} {bookmark.page}",
    ]


def count_pages(lines: Iterable[str]) -> int | None:
    """Return the value of the page-count marker, if there is a usable one."""
    for line in lines:
        if is_page_count(line):
            value = line[len(PAGE_COUNT_LABEL):].strip()
            return int(value) if INTEGER_PATTERN.match(value) else None
    return None


def extract_bookmarks(lines: Iterable[str]) -> list[Bookmark]:
    """Return every bookmark in the dump, in document order.

    A blank title has no TOC line representation, so it is reported as a
    defect (with the line of the title) instead of being written out.
    """
    stanzas = [s for s in parse_metadata(lines) if isinstance(s, Stanza)]
    untitled = [
        f"line {s.line_number + 1}: empty {_field_name(TITLE_LABEL)}"
        for s in stanzas
        if not s.bookmark.title.strip(" \t")
    ]
    if untitled:
        raise MetadataFormatError(untitled)

    bookmarks = [s.bookmark for s in stanzas]
    logger.debug(f"Extracted {len(bookmarks)} bookmarks")
    return bookmarks


def extract_toc(lines: Iterable[str]) -> list[str]:
    """Project a metadata dump onto TOC file lines (``page level title``)."""
    return [bookmark.toc_line() for bookmark in extract_bookmarks(lines)]


def insert_bookmark(lines: Iterable[str], bookmark: Bookmark) -> list[str]:
    """Insert one bookmark stanza at its page-ordered position.

    The new stanza goes directly before the first stanza whose page is
    strictly greater than ``bookmark.page``, i.e. after every entry on the
    same or an earlier page. With no such stanza it follows the last stanza,
    and with no stanzas at all it follows the page-count marker.
    """
    new_stanza = render_stanza(bookmark)
    output: list[str] = []
    inserted = False
    after_last_stanza: int | None = None
    after_marker: int | None = None

    for segment in parse_metadata(lines):
        if isinstance(segment, Stanza):
            if not inserted and segment.bookmark.page > bookmark.page:
                logger.debug(
                    f"Inserting before '{segment.bookmark.title}' "
                    f"(page {segment.bookmark.page}, line {segment.line_number})"
                )
                output.extend(new_stanza)
                inserted = True
            output.extend(segment.lines)
            after_last_stanza = len(output)
        else:
            output.append(segment)
            if after_marker is None and is_page_count(segment):
                after_marker = len(output)

    if not inserted:
        position = after_last_stanza if after_last_stanza is not None else after_marker
        if position is None:
            raise MetadataFormatError(
                [f"no bookmarks and no {PAGE_COUNT_LABEL} line to place the new bookmark after"]
            )
        output[position:position] = new_stanza

    return output


def merge_bookmarks(lines: Iterable[str], bookmarks: Sequence[Bookmark]) -> list[str]:
    """Replace every bookmark in the dump with ``bookmarks``.

    Existing stanzas are dropped. The new stanzas follow the page-count
    marker in the order given; they are not sorted by page.
    """
    segments = parse_metadata(lines)
    markers = sum(1 for s in segments if isinstance(s, str) and is_page_count(s))
    if markers == 0:
        raise MetadataFormatError([f"no {PAGE_COUNT_LABEL} line to place bookmarks after"])
    if markers > 1:
        raise MetadataFormatError([f"found {markers} {PAGE_COUNT_LABEL} lines, expected one"])

    output: list[str] = []
    dropped = 0
    for segment in segments:
        if isinstance(segment, Stanza):
            dropped += 1
            continue
        output.append(segment)
        if is_page_count(segment):
            for bookmark in bookmarks:
                output.extend(render_stanza(bookmark))

    logger.debug(f"Replaced {dropped} bookmarks with {len(bookmarks)}")
    return output
