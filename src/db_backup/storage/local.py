"""Local-directory storage sink.

Writes each artifact as a file plus a ``<key>.meta.json`` sidecar holding
its metadata.  Meant for development and for hosts that ship a backup
directory elsewhere.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from db_backup.errors import StorageError
from db_backup.storage.base import ObjectMetadata

METADATA_SUFFIX = ".meta.json"


class LocalStorageSink:
    """``StorageSink`` that stores objects in a directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    async def put(self, key: str, body: bytes, metadata: ObjectMetadata) -> None:
        await asyncio.to_thread(self._write, key, body, metadata)

    async def list(self, prefix: str, limit: int) -> list[str]:
        return await asyncio.to_thread(self._list, prefix, limit)

    def _write(self, key: str, body: bytes, metadata: ObjectMetadata) -> None:
        if "/" in key or "\\" in key or key in ("", ".", ".."):
            raise StorageError(f"Invalid object key: {key!r}")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            (self._directory / key).write_bytes(body)
            (self._directory / f"{key}{METADATA_SUFFIX}").write_text(
                json.dumps(metadata.model_dump(), indent=2)
            )
        except OSError as e:
            raise StorageError(f"Failed to write '{key}' to {self._directory}: {e}") from e

    def _list(self, prefix: str, limit: int) -> list[str]:
        if not self._directory.exists():
            return []
        try:
            keys = sorted(
                p.name
                for p in self._directory.iterdir()
                if p.is_file()
                and p.name.startswith(prefix)
                and not p.name.endswith(METADATA_SUFFIX)
            )
        except OSError as e:
            raise StorageError(f"Failed to list {self._directory}: {e}") from e
        return keys[:limit]
