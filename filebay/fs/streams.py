"""Compressed streaming reads, chunked writes and deletion.

All blocking file calls run in worker threads so the event loop keeps
serving other requests. No locking is applied: concurrent writers to one
path race, and a reader may observe a partially written file.
"""

from __future__ import annotations

import asyncio
import os
import zlib
from collections.abc import AsyncIterator
from typing import BinaryIO, Literal

import structlog

from filebay.config import StorageConfig
from filebay.errors import (
    MSG_DELETE_FAILED,
    MSG_INVALID_FILE,
    MSG_WRITE_FAILED,
    ErrorCode,
    FsError,
    StreamFailure,
)
from filebay.fs.paths import ResourcePath

logger = structlog.get_logger()

# zlib wbits for a gzip container
GZIP_WBITS = 16 + zlib.MAX_WBITS


class CompressedStream:
    """Async iterator of gzip-compressed chunks of an open file.

    The file handle is released when iteration finishes, fails, or when
    ``aclose()`` is called. A read error mid-stream is raised to the
    consumer as ``StreamFailure``.
    """

    def __init__(
        self,
        handle: BinaryIO,
        *,
        path: str,
        chunk_bytes: int,
        compress_level: int,
    ) -> None:
        self._handle = handle
        self._chunk_bytes = chunk_bytes
        self._compressor = zlib.compressobj(compress_level, zlib.DEFLATED, GZIP_WBITS)
        self._closed = False
        self._log = logger.bind(component="compressed_stream", path=path)

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._chunks()

    async def _chunks(self) -> AsyncIterator[bytes]:
        if self._closed:
            raise StreamFailure()
        try:
            while True:
                try:
                    block = await asyncio.to_thread(self._handle.read, self._chunk_bytes)
                except (OSError, ValueError) as e:
                    self._log.error("fs.read.stream_failed", error=str(e))
                    raise StreamFailure() from e
                if not block:
                    break
                compressed = self._compressor.compress(block)
                if compressed:
                    yield compressed
            yield self._compressor.flush()
        finally:
            await self.aclose()

    async def read_all(self) -> bytes:
        """Drain the stream into one compressed buffer."""
        return b"".join([chunk async for chunk in self])

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._handle.close()


class StreamEngine:
    """Reads, writes and deletes file content under one storage config."""

    def __init__(self, config: StorageConfig) -> None:
        self._chunk_bytes = config.chunk_bytes
        self._compress_level = config.compress_level
        self._log = logger.bind(component="stream_engine")

    @property
    def chunk_bytes(self) -> int:
        return self._chunk_bytes

    async def open_for_read(self, path: ResourcePath) -> CompressedStream | FsError:
        """Open ``path`` as a gzip-compressed chunk stream."""
        try:
            handle = await asyncio.to_thread(open, path.fs_path, "rb")
        except OSError as e:
            self._log.error("fs.read.open_failed", path=path.value, error=str(e))
            return FsError(ErrorCode.OPEN_FAILURE, MSG_INVALID_FILE)

        self._log.debug("fs.read.opened", path=path.value)
        return CompressedStream(
            handle,
            path=path.value,
            chunk_bytes=self._chunk_bytes,
            compress_level=self._compress_level,
        )

    async def write(self, path: ResourcePath, content: bytes) -> Literal[True] | FsError:
        """Overwrite ``path`` with ``content`` one chunk at a time.

        A failed write leaves whatever was already written on disk.
        """
        try:
            handle = await asyncio.to_thread(open, path.fs_path, "wb")
        except OSError as e:
            self._log.error("fs.write.open_failed", path=path.value, error=str(e))
            return FsError(ErrorCode.OPEN_FAILURE, MSG_WRITE_FAILED)

        view = memoryview(content)
        chunks = 0
        try:
            for offset in range(0, len(view), self._chunk_bytes):
                await asyncio.to_thread(handle.write, view[offset : offset + self._chunk_bytes])
                chunks += 1
            await asyncio.to_thread(handle.flush)
        except OSError as e:
            self._log.error("fs.write.failed", path=path.value, chunks=chunks, error=str(e))
            await asyncio.to_thread(_close_quietly, handle)
            return FsError(ErrorCode.STREAM_FAILURE, MSG_WRITE_FAILED)

        try:
            await asyncio.to_thread(handle.close)
        except OSError as e:
            self._log.error("fs.write.close_failed", path=path.value, error=str(e))
            return FsError(ErrorCode.STREAM_FAILURE, MSG_WRITE_FAILED)

        self._log.info("fs.write.ok", path=path.value, size=len(content), chunks=chunks)
        return True

    async def delete(self, path: ResourcePath) -> FsError | None:
        """Remove the file at ``path``."""
        try:
            await asyncio.to_thread(os.unlink, path.fs_path)
        except OSError as e:
            self._log.error("fs.delete.failed", path=path.value, error=str(e))
            return FsError(ErrorCode.OPEN_FAILURE, MSG_DELETE_FAILED)

        self._log.info("fs.delete.ok", path=path.value)
        return None


def _close_quietly(handle: BinaryIO) -> None:
    # The original write error is the one reported
    try:
        handle.close()
    except OSError:
        pass
