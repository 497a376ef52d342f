"""Data types shared by the filesystem access layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Kind(str, Enum):
    """File or directory, as decided by the path-shape heuristic."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Metadata:
    """Stat result for one directory entry."""

    name: str
    last_modified: float
    size: int | None  # None for directories


@dataclass
class DirectoryEntry:
    """One immediate child of a listed directory.

    ``name`` is the projected name: directories carry a trailing separator.
    """

    name: str
    kind: Kind
    path: str
    metadata: Metadata | None = None

    @property
    def size(self) -> int | None:
        return self.metadata.size if self.metadata else None

    @property
    def last_modified(self) -> float | None:
        return self.metadata.last_modified if self.metadata else None


@dataclass
class ListingResult:
    """Directory read payload."""

    files: list[str] = field(default_factory=list)
    is_directory: bool = True

    def to_payload(self) -> dict[str, Any]:
        return {"isDirectory": self.is_directory, "files": list(self.files)}
