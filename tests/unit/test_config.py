"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from filebay import config as config_mod
from filebay.config import Settings, StorageConfig


def test_storage_defaults():
    storage = Settings().storage
    assert storage.chunk_bytes == 64 * 1024
    assert storage.compress_level == 6


def test_storage_env_override(monkeypatch):
    monkeypatch.setenv("FILEBAY_STORAGE__ROOT_PATH", "/srv/files")
    monkeypatch.setenv("FILEBAY_STORAGE__CHUNK_BYTES", "1024")

    storage = Settings().storage
    assert storage.root_path == "/srv/files"
    assert storage.chunk_bytes == 1024


def test_chunk_bytes_must_be_positive():
    with pytest.raises(ValidationError):
        StorageConfig(chunk_bytes=0)


def test_yaml_file_with_env_override(monkeypatch, tmp_path: Path):
    cfg = tmp_path / "filebay.yaml"
    cfg.write_text("storage:\n  root_path: /from/yaml\n  chunk_bytes: 512\nserver:\n  port: 9000\n")
    monkeypatch.setenv("FILEBAY_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("FILEBAY_STORAGE__CHUNK_BYTES", "2048")
    config_mod.get_settings.cache_clear()

    try:
        settings = config_mod.get_settings()
    finally:
        config_mod.get_settings.cache_clear()

    assert settings.storage.root_path == "/from/yaml"
    assert settings.storage.chunk_bytes == 2048
    assert settings.server.port == 9000
