"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from filebay.config import Settings, StorageConfig
from filebay.fs.paths import PathResolver
from filebay.services.files import FileService


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture
def storage_config(storage_root: Path) -> StorageConfig:
    """Small chunk size so multi-chunk paths get exercised."""
    return StorageConfig(root_path=str(storage_root), chunk_bytes=8, compress_level=6)


@pytest.fixture
def test_settings(storage_config: StorageConfig) -> Settings:
    return Settings(storage=storage_config)


@pytest.fixture
def resolver(storage_config: StorageConfig) -> PathResolver:
    return PathResolver(storage_config)


@pytest.fixture
def file_service(storage_config: StorageConfig) -> FileService:
    return FileService(storage_config)
