"""Storage sinks for dump artifacts.

Usage:
    from db_backup.storage import StorageSink, S3StorageSink, LocalStorageSink
"""

from db_backup.storage.base import ObjectMetadata, StorageSink
from db_backup.storage.local import LocalStorageSink
from db_backup.storage.s3 import S3StorageSink

__all__ = ["ObjectMetadata", "StorageSink", "S3StorageSink", "LocalStorageSink"]
