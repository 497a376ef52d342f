"""Filesystem access layer."""

from filebay.fs.listing import (
    DirectoryEnumerator,
    Direction,
    OrderKey,
    OrderSpec,
    filtered_by_name,
)
from filebay.fs.models import DirectoryEntry, Kind, ListingResult, Metadata
from filebay.fs.paths import PathResolver, ResourcePath, classify_kind, exists, is_file
from filebay.fs.streams import CompressedStream, StreamEngine

__all__ = [
    "CompressedStream",
    "DirectoryEntry",
    "DirectoryEnumerator",
    "Direction",
    "Kind",
    "ListingResult",
    "Metadata",
    "OrderKey",
    "OrderSpec",
    "PathResolver",
    "ResourcePath",
    "StreamEngine",
    "classify_kind",
    "exists",
    "filtered_by_name",
    "is_file",
]
