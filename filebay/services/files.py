"""FileService - the read/create/patch/delete entry points.

Every method returns a success value or an ``FsError``; nothing raised by
the filesystem layer crosses this boundary. The transport decides what
status code an error maps to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import structlog

from filebay.config import StorageConfig
from filebay.errors import (
    MSG_ALREADY_EXISTS,
    MSG_FILE_NOT_FOUND,
    MSG_IS_DIRECTORY,
    MSG_READ_NOT_FOUND,
    ErrorCode,
    FileBayError,
    FsError,
)
from filebay.fs.listing import DirectoryEnumerator, OrderSpec
from filebay.fs.models import Kind, ListingResult
from filebay.fs.paths import PathResolver, ResourcePath, exists
from filebay.fs.streams import CompressedStream, StreamEngine

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReadQuery:
    """Listing refinements carried by a read request."""

    order_by: str | None = None
    order_by_direction: str | None = None
    filter_by_name: str | None = None


@dataclass(frozen=True)
class FileDescriptor:
    """An uploaded file: its name and in-memory content."""

    name: str
    buffer: bytes


ReadResult = CompressedStream | ListingResult | FsError
WriteResult = Literal[True] | FsError


class FileService:
    """Routes requests by path kind to the stream engine or the enumerator."""

    def __init__(
        self,
        config: StorageConfig,
        *,
        resolver: PathResolver | None = None,
        engine: StreamEngine | None = None,
        enumerator: DirectoryEnumerator | None = None,
    ) -> None:
        self._resolver = resolver or PathResolver(config)
        self._engine = engine or StreamEngine(config)
        self._enumerator = enumerator or DirectoryEnumerator()
        self._log = logger.bind(component="file_service")

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    def _resolve(self, raw: str) -> ResourcePath | FsError:
        try:
            return self._resolver.resolve(raw)
        except FileBayError as e:
            self._log.warning("files.path_rejected", path=raw, error=e.message)
            return e.to_error()

    async def read(self, raw_path: str, query: ReadQuery | None = None) -> ReadResult:
        """Stream a file, or list a directory.

        Directory listings are ordered only when ``query.order_by`` is set.
        """
        query = query or ReadQuery()
        path = self._resolve(raw_path)
        if isinstance(path, FsError):
            return path

        if not await exists(path):
            return FsError(ErrorCode.PATH_NOT_FOUND, MSG_READ_NOT_FOUND)

        if path.kind is Kind.FILE:
            self._log.info("files.read", path=path.value)
            return await self._engine.open_for_read(path)

        if query.order_by is None:
            return await self._enumerator.list_directory(path, query.filter_by_name)

        try:
            order = OrderSpec.parse(query.order_by, query.order_by_direction)
        except FileBayError as e:
            self._log.warning("files.read.bad_order", order_by=query.order_by)
            return e.to_error()

        return await self._enumerator.list_directory_ordered(
            path, order, query.filter_by_name
        )

    async def create(self, raw_path: str, file: FileDescriptor) -> WriteResult:
        """Write a new file; fails if ``raw_path`` already exists."""
        path = self._resolve(raw_path)
        if isinstance(path, FsError):
            return path

        if await exists(path):
            return FsError(ErrorCode.ALREADY_EXISTS, MSG_ALREADY_EXISTS)

        self._log.info("files.create", path=path.value, name=file.name, size=len(file.buffer))
        return await self._engine.write(path, file.buffer)

    async def patch(self, raw_path: str, file: FileDescriptor) -> WriteResult:
        """Overwrite an existing file; fails if ``raw_path`` is missing."""
        path = self._resolve(raw_path)
        if isinstance(path, FsError):
            return path

        if not await exists(path):
            return FsError(ErrorCode.PATH_NOT_FOUND, MSG_FILE_NOT_FOUND)

        self._log.info("files.patch", path=path.value, name=file.name, size=len(file.buffer))
        return await self._engine.write(path, file.buffer)

    async def delete(self, raw_path: str) -> FsError | None:
        path = self._resolve(raw_path)
        if isinstance(path, FsError):
            return path

        if path.kind is not Kind.FILE:
            return FsError(ErrorCode.WRONG_KIND, MSG_IS_DIRECTORY)
        if not await exists(path):
            return FsError(ErrorCode.PATH_NOT_FOUND, MSG_FILE_NOT_FOUND)

        return await self._engine.delete(path)
