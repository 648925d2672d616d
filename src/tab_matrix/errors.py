"""
Error taxonomy and the explicit result channel.

Every failure carries an ``ErrorKind`` that doubles as a stable error code,
so calling layers never have to inspect message text.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Stable error codes."""

    # Core pipeline
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_URL = "INVALID_URL"
    MISSING_DOMAIN = "MISSING_DOMAIN"
    EMPTY_RESULT = "EMPTY_RESULT"

    # Collaborators
    TAB_COLLECTION_FAILED = "TAB_COLLECTION_FAILED"
    INVALID_FORMAT = "INVALID_FORMAT"
    NO_MATRICES_AVAILABLE = "NO_MATRICES_AVAILABLE"
    MATRIX_NOT_FOUND = "MATRIX_NOT_FOUND"
    EXPORT_FAILED = "EXPORT_FAILED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"


class TabMatrixError(Exception):
    """Base exception for tab-matrix errors."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, kind: Optional[ErrorKind] = None, detail: str = ""):
        self.message = message
        if kind is not None:
            self.kind = kind
        self.detail = detail
        super().__init__(message)


class InvalidInputError(TabMatrixError):
    """Top-level argument is not a sequence."""

    kind = ErrorKind.INVALID_INPUT


class InvalidUrlError(TabMatrixError, ValueError):
    """A URL failed to parse or uses a disallowed scheme."""

    kind = ErrorKind.INVALID_URL

    def __init__(self, url: object, reason: str = ""):
        self.url = url
        message = f"Invalid URL: {url!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, detail=reason)


class TabCollectionError(TabMatrixError):
    """The tab source could not supply tabs."""

    kind = ErrorKind.TAB_COLLECTION_FAILED


class InvalidFormatError(TabMatrixError):
    """Unknown export format."""

    kind = ErrorKind.INVALID_FORMAT

    def __init__(self, fmt: object):
        super().__init__(f"Invalid format: {fmt}")


class ExportWriteError(TabMatrixError):
    """Writing an export failed."""

    kind = ErrorKind.EXPORT_FAILED


def require_sequence(value: Any, name: str) -> Sequence:
    """Raise ``InvalidInputError`` unless ``value`` is a list-like sequence."""
    if (
        not isinstance(value, Sequence)
        or isinstance(value, (str, bytes, bytearray))
        or isinstance(value, Mapping)
    ):
        raise InvalidInputError(f"{name} must be a sequence, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Failure:
    """Tagged error value."""

    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: TabMatrixError) -> "Failure":
        return cls(kind=exc.kind, message=exc.message)


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Either a success payload or a ``Failure``.

    Usage:
        result = analyze(tabs)
        if result.ok:
            render(result.value)
        else:
            show_error(result.error.kind, result.error.message)
    """

    value: Optional[T] = None
    error: Optional[Failure] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(error=Failure(kind=kind, message=message))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the payload, raising ``TabMatrixError`` for a failure."""
        if self.error is not None:
            raise TabMatrixError(self.error.message, kind=self.error.kind)
        return self.value
