"""Storage adapter using local filesystem."""

import logging
import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

from ...ports.storage import StoragePort

logger = logging.getLogger(__name__)


class FilesystemAdapter(StoragePort):
    """Storage implementation using local filesystem."""

    def __init__(self, backup_suffix: str = ".bak") -> None:
        self.backup_suffix = backup_suffix

    def backup_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.backup_suffix)

    def backup(self, path: Path) -> Path:
        """Copy file to ``<name><backup_suffix>``, replacing an older backup."""
        dest = self.backup_path(path)
        shutil.copy2(path, dest)
        logger.info(f"Backed up: {path.name} -> {dest.name}")
        return dest

    def restore(self, backup: Path, path: Path) -> None:
        shutil.copy2(backup, path)
        logger.warning(f"Restored {path.name} from {backup.name}")

    def write_lines(self, path: Path, lines: Iterable[str]) -> Path:
        """Write via a temporary file in the same directory, then rename."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                for line in lines:
                    f.write(line + "\n")
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

        logger.debug(f"Wrote: {path}")
        return path
