"""Connection and storage sink factory.

Turns a ``BackupConfig`` into the collaborators the orchestrator needs.
Nothing is cached: each call returns a fresh, unconnected object so every
invocation owns its own connection.

Usage:
    from db_backup.factory import create_connection, create_sink

    conn = create_connection(config)
    sink = create_sink(config.storage)
"""

import logging

from db_backup.adapters.base import DatabaseConnection
from db_backup.adapters.postgres import AsyncPostgresConnection
from db_backup.config.models import BackupConfig, StorageConfig
from db_backup.storage.base import StorageSink
from db_backup.storage.local import LocalStorageSink
from db_backup.storage.s3 import S3StorageSink

logger = logging.getLogger(__name__)


def create_connection(config: BackupConfig) -> DatabaseConnection:
    """Create an unconnected database connection for one invocation."""
    return AsyncPostgresConnection(
        config.database_url,
        connect_timeout=config.connect_timeout,
    )


def create_sink(storage: StorageConfig) -> StorageSink:
    """Create the storage sink selected by ``storage.backend``.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if storage.backend == "s3":
        logger.debug("Using S3 sink (bucket=%s, endpoint=%s)", storage.bucket, storage.endpoint_url)
        return S3StorageSink.from_config(storage)
    if storage.backend == "local":
        logger.debug("Using local sink (%s)", storage.local_dir)
        return LocalStorageSink(storage.local_dir)
    raise ValueError(f"Unknown storage backend: {storage.backend}")
