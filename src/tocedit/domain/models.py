"""Domain models."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Bookmark:
    """A table of contents entry stored in the PDF metadata."""

    page: int  # 1-based target page
    level: int  # Nesting depth, 1 = top level
    title: str

    def toc_line(self) -> str:
        return f"{self.page} {self.level} {self.title}"


@dataclass
class ValidationResult:
    """Result of checking a TOC file."""

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0


@dataclass
class OperationResult:
    """What a workflow wrote and how many bookmarks it handled."""

    path: Path
    count: int = 0
