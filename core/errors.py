"""
Error taxonomy for fsbridge.

Every OS failure is classified at the point of origin into one of a small
set of error classes. The command boundary flattens them to their message.
"""

from typing import Optional


class FileOperationError(Exception):
    """Base class for all classified file operation failures."""

    kind = "FileOperationError"

    def __init__(self, operation: str, path: str, cause: Optional[str] = None):
        self.operation = operation
        self.path = path
        self.cause = cause or "unknown error"
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return f"{self.operation} failed for {self.path}: {self.cause}"

    def __str__(self) -> str:
        return self.message


class ReadError(FileOperationError):
    """Target missing, wrong kind, permission denied or bad encoding on read."""

    kind = "ReadError"


class WriteError(FileOperationError):
    """Permission denied, missing parent, wrong kind or cross-volume move."""

    kind = "WriteError"


class ParseError(FileOperationError):
    """The file was read but is not a well-formed JSON document."""

    kind = "ParseError"


class SerializeError(FileOperationError):
    """The value cannot be rendered as JSON text."""

    kind = "SerializeError"


def describe_cause(exc: BaseException) -> str:
    """Short human-readable description of an underlying exception."""
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    text = str(exc)
    return text or exc.__class__.__name__
