"""Exceptions raised by archive accessors and the date parser."""


class ArchiveError(Exception):
    """Base class for failures reading a category out of an archive."""

    def __init__(self, category: str, message: str = None):
        self.category = category
        super().__init__(message or category)


class NotFound(ArchiveError):
    """The archive has no file for the requested category."""


class ParseError(ArchiveError):
    """The category file exists but its content could not be decoded."""


class InvalidDateFormat(ValueError):
    """A date string matched none of the known archive formats."""
