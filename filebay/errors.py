"""Filebay error types.

Two shapes live here:

- ``FileBayError`` and its subclasses are raised inside the core for
  construction-time failures (bad path, bad order key) and for read-stream
  failures that must reach the stream consumer.
- ``FsError`` is the value every public operation returns instead of
  raising. Callers translate it into transport status codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Classification of a filesystem access failure."""

    PATH_NOT_FOUND = "path_not_found"
    WRONG_KIND = "wrong_kind"
    ALREADY_EXISTS = "already_exists"
    OPEN_FAILURE = "open_failure"
    STREAM_FAILURE = "stream_failure"
    INVALID_ORDER_KEY = "invalid_order_key"
    INVALID_PATH = "invalid_path"


# User-visible messages. System error detail is logged, never surfaced.
MSG_READ_NOT_FOUND = "file or directory path doesn't exists"
MSG_FILE_NOT_FOUND = "file doesn't exists"
MSG_ALREADY_EXISTS = "file already exists"
MSG_IS_DIRECTORY = "is a directory"
MSG_INVALID_FILE = "not a valid file path"
MSG_INVALID_DIRECTORY = "not a valid directory path"
MSG_READ_FAILED = "Error caused while reading file"
MSG_WRITE_FAILED = "Error caused while writing file"
MSG_DELETE_FAILED = "delete fail"
MSG_INVALID_ORDER = (
    "invalid order condition. should be "
    "orderBy=lastModified; orderBy=size; orderBy=fileName; "
)
MSG_PATH_ESCAPE = "path escapes storage root"


@dataclass(frozen=True)
class FsError:
    """Error value returned across the access-layer boundary."""

    code: ErrorCode
    message: str

    def to_payload(self) -> dict[str, str]:
        return {"err": self.message}


class FileBayError(Exception):
    """Base exception for filebay core failures."""

    code: ErrorCode = ErrorCode.OPEN_FAILURE
    message: str = "filebay error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)

    def to_error(self) -> FsError:
        """Convert into the returned error value."""
        return FsError(code=self.code, message=self.message)


class InvalidPathError(FileBayError):
    """Request path cannot be contained in the storage root."""

    code = ErrorCode.INVALID_PATH
    message = MSG_PATH_ESCAPE


class InvalidOrderKeyError(FileBayError):
    """Unsupported ``orderBy`` value."""

    code = ErrorCode.INVALID_ORDER_KEY
    message = MSG_INVALID_ORDER


class StreamFailure(FileBayError):
    """A compressed read stream failed after it was handed out."""

    code = ErrorCode.STREAM_FAILURE
    message = MSG_READ_FAILED
