"""db-backup: logical PostgreSQL backups to object storage.

Dumps the tables of one schema into a replayable SQL script and uploads
it to an S3-compatible bucket (or a local directory) under a sortable,
timestamped name.  A small FastAPI app and a CLI wrap the pipeline.

Usage:
    from db_backup import BackupOrchestrator, load_backup_config

    config = load_backup_config()
    result = await BackupOrchestrator(config).run()
"""

__version__ = "0.1.0"

# Adapters
from db_backup.adapters.base import DatabaseConnection
from db_backup.adapters.postgres import AsyncPostgresConnection

# Config
from db_backup.config.loader import load_backup_config
from db_backup.config.models import ApiConfig, BackupConfig, StorageConfig

# Errors
from db_backup.errors import (
    AuthError,
    BackupError,
    ConfigError,
    ConnectivityError,
    DumpError,
    QueryError,
    StorageError,
)

# Factory
from db_backup.factory import create_connection, create_sink

# Schema
from db_backup.schema.inspector import SchemaInspector
from db_backup.schema.models import ColumnDescriptor, TableDescriptor

# Storage
from db_backup.storage import LocalStorageSink, ObjectMetadata, S3StorageSink, StorageSink

# Backup pipeline
from db_backup.backup.dump import DumpBuilder
from db_backup.backup.models import BackupResult, BackupState, DumpArtifact
from db_backup.backup.naming import next_filename
from db_backup.backup.orchestrator import BackupOrchestrator, list_backups, scheduled_backup
from db_backup.backup.serializer import format_column_list, format_value

__all__ = [
    # Adapters
    "DatabaseConnection",
    "AsyncPostgresConnection",
    # Config
    "load_backup_config",
    "BackupConfig",
    "StorageConfig",
    "ApiConfig",
    # Errors
    "BackupError",
    "ConfigError",
    "ConnectivityError",
    "QueryError",
    "DumpError",
    "StorageError",
    "AuthError",
    # Factory
    "create_connection",
    "create_sink",
    # Schema
    "SchemaInspector",
    "TableDescriptor",
    "ColumnDescriptor",
    # Storage
    "StorageSink",
    "ObjectMetadata",
    "S3StorageSink",
    "LocalStorageSink",
    # Backup pipeline
    "DumpBuilder",
    "DumpArtifact",
    "BackupOrchestrator",
    "BackupResult",
    "BackupState",
    "list_backups",
    "scheduled_backup",
    "next_filename",
    "format_value",
    "format_column_list",
]
