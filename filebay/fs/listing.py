"""Directory enumeration, name filtering and metadata ordering.

Each listing is one pipeline: enumerate -> filter -> (stat) -> sort -> names.
Filtering runs before any stat so filtered-out entries cost nothing.
"""

from __future__ import annotations

import asyncio
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from filebay.errors import (
    MSG_INVALID_DIRECTORY,
    ErrorCode,
    FsError,
    InvalidOrderKeyError,
)
from filebay.fs.models import DirectoryEntry, Kind, ListingResult, Metadata
from filebay.fs.paths import SEPARATOR, ResourcePath, classify_kind

logger = structlog.get_logger()


class Direction(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def parse(cls, value: str | None) -> Direction:
        # Anything other than an exact "descending" sorts ascending
        if value == cls.DESCENDING.value:
            return cls.DESCENDING
        return cls.ASCENDING


class OrderKey(str, Enum):
    """Sort field of an ordered listing."""

    LAST_MODIFIED = "lastModified"
    SIZE = "size"
    FILE_NAME = "fileName"

    @classmethod
    def parse(cls, value: str) -> OrderKey:
        """Look up an order key by its query value.

        Raises:
            InvalidOrderKeyError: If ``value`` is not one of the three keys.
        """
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidOrderKeyError() from e

    @property
    def needs_metadata(self) -> bool:
        return self is not OrderKey.FILE_NAME

    def sort_key(self, entry: DirectoryEntry) -> tuple[Any, ...]:
        """Total-order key; a missing field sorts below every present value."""
        if self is OrderKey.FILE_NAME:
            return (1, entry.name)
        value = entry.size if self is OrderKey.SIZE else entry.last_modified
        if value is None:
            return (0,)
        return (1, value)


@dataclass(frozen=True)
class OrderSpec:
    key: OrderKey
    direction: Direction = Direction.ASCENDING

    @classmethod
    def parse(cls, order_by: str, direction: str | None = None) -> OrderSpec:
        return cls(key=OrderKey.parse(order_by), direction=Direction.parse(direction))

    def apply(self, entries: list[DirectoryEntry]) -> list[DirectoryEntry]:
        # sorted() is stable in both directions, so ties keep enumeration order
        return sorted(
            entries,
            key=self.key.sort_key,
            reverse=self.direction is Direction.DESCENDING,
        )


def filtered_by_name(names: list[str], filter_by_name: str | None) -> list[str]:
    """Case-insensitive substring filter. ``None`` keeps every name."""
    if filter_by_name is None:
        return names
    needle = filter_by_name.lower()
    return [name for name in names if needle in name.lower()]


def project_name(name: str) -> str:
    """Append the separator to names the heuristic calls directories."""
    if classify_kind(name) is Kind.DIRECTORY:
        return name + SEPARATOR
    return name


class DirectoryEnumerator:
    """Lists immediate children of a directory."""

    def __init__(self) -> None:
        self._log = logger.bind(component="directory_enumerator")

    async def _enumerate(self, path: ResourcePath) -> list[str] | FsError:
        try:
            names = await asyncio.to_thread(os.listdir, path.fs_path)
        except OSError as e:
            self._log.error("fs.list.failed", path=path.value, error=str(e))
            return FsError(ErrorCode.WRONG_KIND, MSG_INVALID_DIRECTORY)
        return [project_name(name) for name in names]

    async def list_directory(
        self,
        path: ResourcePath,
        filter_by_name: str | None = None,
    ) -> ListingResult | FsError:
        names = await self._enumerate(path)
        if isinstance(names, FsError):
            return names
        files = filtered_by_name(names, filter_by_name)
        self._log.debug("fs.list.ok", path=path.value, entries=len(files))
        return ListingResult(files=files)

    async def list_directory_ordered(
        self,
        path: ResourcePath,
        order: OrderSpec,
        filter_by_name: str | None = None,
    ) -> ListingResult | FsError:
        names = await self._enumerate(path)
        if isinstance(names, FsError):
            return names

        entries = [
            DirectoryEntry(
                name=name,
                kind=classify_kind(name),
                path=os.path.join(path.fs_path, name),
            )
            for name in filtered_by_name(names, filter_by_name)
        ]
        if order.key.needs_metadata:
            await self._resolve_metadata(entries)

        ordered = order.apply(entries)
        self._log.debug(
            "fs.list.ordered",
            path=path.value,
            order_by=order.key.value,
            direction=order.direction.value,
            entries=len(ordered),
        )
        return ListingResult(files=[e.name for e in ordered])

    async def _resolve_metadata(self, entries: list[DirectoryEntry]) -> None:
        """Stat every entry concurrently; failures leave ``metadata`` unset."""
        results = await asyncio.gather(
            *(asyncio.to_thread(os.stat, entry.path) for entry in entries),
            return_exceptions=True,
        )
        for entry, result in zip(entries, results):
            if isinstance(result, OSError):
                self._log.warning("fs.list.stat_failed", path=entry.path, error=str(result))
                continue
            if isinstance(result, BaseException):
                raise result
            entry.metadata = Metadata(
                name=entry.name,
                last_modified=result.st_mtime,
                size=None if stat.S_ISDIR(result.st_mode) else result.st_size,
            )
