"""
Exception hierarchy for ImageLink.

Every error carries the path of the file it is about, so a single
message is enough to report a failed link.
"""

from pathlib import Path


class LinkError(Exception):
    """Base exception for all errors raised while linking a file."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class SourceFileError(LinkError):
    """Raised when the input file cannot be opened."""

    def __init__(self, path: Path, source: OSError):
        self.source = source
        super().__init__(path, f"Could not open input file '{path}': {source.strerror or source}")


class ParseError(LinkError):
    """Raised when metadata cannot be read from the input file."""

    def __init__(self, path: Path, source: object):
        self.source = source
        super().__init__(path, f"Could not parse input file '{path}': {source}")


class MissingFieldError(LinkError):
    """Raised when none of the date fields are present."""

    def __init__(self, path: Path, field: str):
        self.field = field
        super().__init__(path, f"Missing field in input file '{path}': {field}")


class TooSmallError(LinkError):
    """Raised when the file is below the minimum size (thumbnail?)."""

    def __init__(self, path: Path, size: int):
        self.size = size
        super().__init__(path, f"File is too small (thumbnail?) '{path}': {size}")


class InvalidDateError(LinkError):
    """Raised when a date field does not hold a date."""

    def __init__(self, path: Path, value: str):
        self.value = value
        super().__init__(path, f"Invalid date in input file '{path}': '{value}'")
