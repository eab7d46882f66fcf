"""Metadata port - interface for the external PDF metadata tool."""

from abc import ABC, abstractmethod
from pathlib import Path


class MetadataPort(ABC):
    """Interface for reading and writing the metadata block of a PDF."""

    @abstractmethod
    def dump(self, pdf: Path, dest: Path) -> None:
        """Write the full metadata text dump of ``pdf`` to ``dest``."""
        pass

    @abstractmethod
    def update(self, pdf: Path, metadata: Path, output: Path) -> None:
        """Write a copy of ``pdf`` with ``metadata`` installed to ``output``."""
        pass
