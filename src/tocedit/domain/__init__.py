"""Domain layer - bookmark model and metadata transforms."""

from .errors import (
    ExternalToolError,
    FileAccessError,
    MetadataFormatError,
    TocEditError,
    TocValidationError,
    UsageError,
)
from .models import Bookmark, OperationResult, ValidationResult

__all__ = [
    "Bookmark",
    "OperationResult",
    "ValidationResult",
    "TocEditError",
    "UsageError",
    "FileAccessError",
    "ExternalToolError",
    "MetadataFormatError",
    "TocValidationError",
]
