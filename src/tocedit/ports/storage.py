"""Storage port - interface for local file mutation."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path


class StoragePort(ABC):
    """Interface for backup-then-overwrite file handling."""

    @abstractmethod
    def backup(self, path: Path) -> Path:
        """Copy a file aside before it is overwritten.

        Returns path to the backup.
        """
        pass

    @abstractmethod
    def restore(self, backup: Path, path: Path) -> None:
        """Put a backup back in place of ``path``."""
        pass

    @abstractmethod
    def write_lines(self, path: Path, lines: Iterable[str]) -> Path:
        """Write lines to ``path`` so that a failed write leaves no partial file.

        Returns path written.
        """
        pass
