"""Error hierarchy for tocedit."""


class TocEditError(Exception):
    """Base class for all tocedit failures."""


class UsageError(TocEditError):
    """Bad or missing arguments."""


class FileAccessError(TocEditError):
    """Input file is missing, unreadable or of the wrong type."""


class ExternalToolError(TocEditError):
    """The external metadata tool failed."""


class _CollectedError(TocEditError):
    """Error carrying every defect found in one pass."""

    heading = "Invalid input"

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__(
            "\n".join([f"{self.heading} ({len(self.messages)} problem(s)):", *self.messages])
        )


class MetadataFormatError(_CollectedError):
    """Malformed bookmark stanza(s) in a metadata dump."""

    heading = "Malformed bookmark metadata"


class TocValidationError(_CollectedError):
    """Malformed line(s) in a TOC file."""

    heading = "Invalid TOC file"
