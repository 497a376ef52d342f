"""Path classification, containment and existence checks.

``classify_kind`` decides file vs directory from the string shape alone:
a path is a file only when its final segment has an extension. Names with
no extension (``Makefile``) and leading-dot names (``.env``) classify as
directories. Callers depend on this; do not replace it with a stat call.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path

import structlog

from filebay.config import StorageConfig
from filebay.errors import InvalidPathError
from filebay.fs.models import Kind

logger = structlog.get_logger()

SEPARATOR = "/"


def is_file(path: str) -> bool:
    """Return True when the final segment of ``path`` has a real extension."""
    if path.endswith(SEPARATOR):
        return False
    last_dot = path.rfind(".")
    last_sep = path.rfind(SEPARATOR)
    # A dot in first position of the segment marks a hidden name, not an extension
    return last_dot > last_sep + 1


def classify_kind(path: str) -> Kind:
    return Kind.FILE if is_file(path) else Kind.DIRECTORY


@dataclass(frozen=True)
class ResourcePath:
    """Normalized request path and its location under the storage root.

    ``value`` always starts with the separator and keeps the trailing
    separator of the request, since that is what ``kind`` looks at.
    """

    value: str
    fs_path: Path

    @property
    def kind(self) -> Kind:
        return classify_kind(self.value)

    @property
    def name(self) -> str:
        return self.value.rstrip(SEPARATOR).rsplit(SEPARATOR, 1)[-1]

    def __str__(self) -> str:
        return self.value


class PathResolver:
    """Builds ResourcePaths that never leave the configured root."""

    def __init__(self, config: StorageConfig) -> None:
        self._root = Path(config.root_path).expanduser().resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, raw: str) -> ResourcePath:
        """Normalize a request path.

        Raises:
            InvalidPathError: If the path climbs above the root, contains a
                null byte, or resolves (through symlinks) outside the root.
        """
        raw = raw.split("?", 1)[0]
        if "\x00" in raw:
            raise InvalidPathError()

        parts: list[str] = []
        for part in raw.split(SEPARATOR):
            if part in ("", "."):
                continue
            if part == "..":
                if not parts:
                    raise InvalidPathError()
                parts.pop()
                continue
            parts.append(part)

        value = SEPARATOR + SEPARATOR.join(parts)
        if parts and raw.endswith(SEPARATOR):
            value += SEPARATOR

        fs_path = self._root.joinpath(*parts)
        resolved = fs_path.resolve()
        if resolved != self._root and self._root not in resolved.parents:
            logger.warning("fs.path.escape", path=raw, resolved=str(resolved))
            raise InvalidPathError()

        return ResourcePath(value=value, fs_path=fs_path)

    def join(self, base: str, name: str) -> ResourcePath:
        """Resolve ``name`` inside the directory named by ``base``."""
        return self.resolve(base.rstrip(SEPARATOR) + SEPARATOR + name)


async def exists(path: ResourcePath) -> bool:
    """Check presence on disk. Never raises."""
    try:
        return await asyncio.to_thread(os.path.exists, path.fs_path)
    except (OSError, ValueError) as e:
        logger.warning("fs.exists.failed", path=path.value, error=str(e))
        return False
