"""Metadata adapter using the pdftk command line tool."""

import logging
import subprocess
from pathlib import Path

from ...domain.errors import ExternalToolError
from ...ports.metadata import MetadataPort

logger = logging.getLogger(__name__)


class PdftkAdapter(MetadataPort):
    """Metadata implementation shelling out to pdftk."""

    def __init__(self, binary: str = "pdftk", utf8: bool = True) -> None:
        self.binary = binary
        self.utf8 = utf8

    @property
    def dump_operation(self) -> str:
        return "dump_data_utf8" if self.utf8 else "dump_data"

    @property
    def update_operation(self) -> str:
        return "update_info_utf8" if self.utf8 else "update_info"

    def dump(self, pdf: Path, dest: Path) -> None:
        logger.info(f"Dumping metadata: {pdf.name}")
        self._run([str(pdf), self.dump_operation, "output", str(dest)])

    def update(self, pdf: Path, metadata: Path, output: Path) -> None:
        logger.info(f"Updating metadata: {output.name}")
        self._run(
            [str(pdf), self.update_operation, str(metadata), "output", str(output)]
        )

    def _run(self, args: list[str]) -> None:
        command = [self.binary, *args]
        logger.debug(f"Running: {' '.join(command)}")

        try:
            subprocess.run(command, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise ExternalToolError(f"{self.binary} not found: {e}") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ExternalToolError(
                f"{self.binary} {args[1]} failed with exit status {e.returncode}"
                + (f": {stderr}" if stderr else "")
            ) from e
