"""Domain errors — custom exceptions for the page grader.

A ``GraderError`` raised while a check group is being set up fails every
check in that group; the CLI reports it and exits non-zero.
"""


class GraderError(Exception):
    """Base exception for all page grader errors."""


class DocumentLoadError(GraderError):
    """Raised when the submitted document or its stylesheet cannot be read."""


class InliningError(GraderError):
    """Raised when the stylesheet cannot be inlined into the document."""


class ConfigurationError(GraderError):
    """Raised when configuration is invalid or missing."""
