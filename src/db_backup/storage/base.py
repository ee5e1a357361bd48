"""Storage sink protocol and object metadata.

A sink persists named blobs and lists them by prefix.  Deletion,
versioning and read-back are not part of the contract.

Usage:
    from db_backup.storage.base import ObjectMetadata, StorageSink

    async def upload(sink: StorageSink, key: str, body: bytes) -> None:
        await sink.put(key, body, ObjectMetadata(custom={"database": "shop"}))
"""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, Field


class ObjectMetadata(BaseModel):
    """Metadata stored alongside an uploaded object."""

    content_type: str = "application/sql"
    custom: dict[str, str] = Field(default_factory=dict)


class StorageSink(Protocol):
    """Object-storage destination for dump artifacts."""

    async def put(self, key: str, body: bytes, metadata: ObjectMetadata) -> None:
        """Store ``body`` under ``key``.

        Raises:
            StorageError: If the backend rejects the write.
        """
        ...

    async def list(self, prefix: str, limit: int) -> list[str]:
        """Return up to ``limit`` keys starting with ``prefix``, sorted.

        An empty list (not an error) when nothing matches.

        Raises:
            StorageError: If the backend rejects the listing.
        """
        ...
