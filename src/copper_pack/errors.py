"""User-facing error taxonomy. Every error is terminal; nothing is retried."""

from typing import Optional


class CopperPackError(Exception):
    """Base class for errors surfaced to the end user."""


class ConfigurationError(CopperPackError):
    """Settings could not be built (missing secrets, unreadable config)."""


class InvalidIdentifierError(CopperPackError):
    """Input is neither a bare Copper ID nor a recognized record URL."""

    def __init__(self, value: str):
        self.value = value
        super().__init__("Invalid Copper ID or URL")


class TypeMismatchError(CopperPackError):
    """A record URL points at a different record type than the action expects."""

    def __init__(self, message: str, *, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class InvalidValueError(CopperPackError):
    """An enumerated input is not one of the legal values."""


class NotFoundError(CopperPackError):
    """A referenced entity could not be located in reference data."""


class UpstreamApiError(CopperPackError):
    """Copper returned a non-success status or the request failed in transit."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
