"""Unit tests for FileService entry points."""

from __future__ import annotations

import gzip
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from filebay.config import StorageConfig
from filebay.errors import (
    MSG_ALREADY_EXISTS,
    MSG_FILE_NOT_FOUND,
    MSG_INVALID_ORDER,
    MSG_IS_DIRECTORY,
    MSG_PATH_ESCAPE,
    MSG_READ_NOT_FOUND,
    ErrorCode,
    FsError,
)
from filebay.fs.listing import DirectoryEnumerator
from filebay.fs.models import ListingResult
from filebay.fs.streams import CompressedStream, StreamEngine
from filebay.services.files import FileDescriptor, FileService, ReadQuery


@pytest.fixture
def populated(storage_root: Path) -> Path:
    d = storage_root / "d"
    d.mkdir()
    (d / "a.txt").write_bytes(b"a")
    (d / "b.txt").write_bytes(b"bbb")
    (d / "sub").mkdir()
    return storage_root


class TestRead:
    async def test_missing_path_does_not_touch_engine_or_enumerator(self, storage_config: StorageConfig):
        engine = AsyncMock(spec=StreamEngine)
        enumerator = AsyncMock(spec=DirectoryEnumerator)
        service = FileService(storage_config, engine=engine, enumerator=enumerator)

        result = await service.read("/nothing/here.txt")

        assert result == FsError(ErrorCode.PATH_NOT_FOUND, MSG_READ_NOT_FOUND)
        assert result.to_payload() == {"err": "file or directory path doesn't exists"}
        engine.open_for_read.assert_not_called()
        enumerator.list_directory.assert_not_called()
        enumerator.list_directory_ordered.assert_not_called()

    async def test_file_returns_compressed_stream(self, file_service: FileService, populated: Path):
        result = await file_service.read("/d/b.txt")

        assert isinstance(result, CompressedStream)
        assert gzip.decompress(await result.read_all()) == b"bbb"

    async def test_directory_listing(self, file_service: FileService, populated: Path):
        result = await file_service.read("/d", ReadQuery())

        assert isinstance(result, ListingResult)
        assert sorted(result.files) == ["a.txt", "b.txt", "sub/"]

    async def test_root_listing(self, file_service: FileService, populated: Path):
        result = await file_service.read("")

        assert result.files == ["d/"]

    async def test_ordered_listing(self, file_service: FileService, populated: Path):
        result = await file_service.read(
            "/d", ReadQuery(order_by="size", order_by_direction="descending")
        )

        assert result.files == ["b.txt", "a.txt", "sub/"]

    async def test_ordered_and_filtered(self, file_service: FileService, populated: Path):
        result = await file_service.read(
            "/d", ReadQuery(order_by="fileName", order_by_direction="descending", filter_by_name="TXT")
        )

        assert result.files == ["b.txt", "a.txt"]

    async def test_invalid_order_key(self, file_service: FileService, populated: Path):
        result = await file_service.read("/d", ReadQuery(order_by="colour"))

        assert result == FsError(ErrorCode.INVALID_ORDER_KEY, MSG_INVALID_ORDER)

    async def test_path_escape(self, file_service: FileService):
        result = await file_service.read("/../etc")

        assert result == FsError(ErrorCode.INVALID_PATH, MSG_PATH_ESCAPE)

    async def test_extensionless_file_is_listed_as_directory(
        self, file_service: FileService, storage_root: Path
    ):
        (storage_root / "Makefile").write_bytes(b"all:")

        result = await file_service.read("/Makefile")

        assert isinstance(result, FsError)
        assert result.to_payload() == {"err": "not a valid directory path"}


class TestCreate:
    async def test_create_new_file(self, file_service: FileService, populated: Path):
        result = await file_service.create("/d/new.txt", FileDescriptor("new.txt", b"hello"))

        assert result is True
        assert (populated / "d" / "new.txt").read_bytes() == b"hello"

    async def test_create_existing_leaves_content(self, file_service: FileService, populated: Path):
        result = await file_service.create("/d/b.txt", FileDescriptor("b.txt", b"replaced"))

        assert result == FsError(ErrorCode.ALREADY_EXISTS, MSG_ALREADY_EXISTS)
        assert result.to_payload() == {"err": "file already exists"}
        assert (populated / "d" / "b.txt").read_bytes() == b"bbb"

    async def test_create_outside_root(self, file_service: FileService):
        result = await file_service.create("/../x.txt", FileDescriptor("x.txt", b"x"))

        assert isinstance(result, FsError)
        assert result.code is ErrorCode.INVALID_PATH


class TestPatch:
    async def test_patch_overwrites(self, file_service: FileService, populated: Path):
        result = await file_service.patch("/d/b.txt", FileDescriptor("b.txt", b"x"))

        assert result is True
        assert (populated / "d" / "b.txt").read_bytes() == b"x"

    async def test_patch_missing(self, file_service: FileService, populated: Path):
        result = await file_service.patch("/d/nope.txt", FileDescriptor("nope.txt", b"x"))

        assert result == FsError(ErrorCode.PATH_NOT_FOUND, MSG_FILE_NOT_FOUND)
        assert not (populated / "d" / "nope.txt").exists()


class TestDelete:
    async def test_delete_file(self, file_service: FileService, populated: Path):
        assert await file_service.delete("/d/a.txt") is None
        assert not (populated / "d" / "a.txt").exists()

    async def test_second_delete_fails(self, file_service: FileService, populated: Path):
        assert await file_service.delete("/d/a.txt") is None

        result = await file_service.delete("/d/a.txt")

        assert result == FsError(ErrorCode.PATH_NOT_FOUND, MSG_FILE_NOT_FOUND)

    async def test_delete_directory_shaped_path(self, file_service: FileService, populated: Path):
        result = await file_service.delete("/d/sub")

        assert result == FsError(ErrorCode.WRONG_KIND, MSG_IS_DIRECTORY)
        assert (populated / "d" / "sub").is_dir()
