"""Dump-and-upload pipeline.

Usage:
    from db_backup.backup import BackupOrchestrator, DumpBuilder, format_value
    from db_backup.backup import next_filename, list_backups, scheduled_backup
"""

from db_backup.backup.dump import DumpBuilder
from db_backup.backup.models import BackupResult, BackupState, DumpArtifact
from db_backup.backup.naming import BACKUP_PREFIX, isoformat_utc, next_filename, parse_filename
from db_backup.backup.orchestrator import BackupOrchestrator, list_backups, scheduled_backup
from db_backup.backup.serializer import (
    ValueKind,
    classify_value,
    format_column_list,
    format_value,
)

__all__ = [
    "BackupOrchestrator",
    "list_backups",
    "scheduled_backup",
    "DumpBuilder",
    "BackupResult",
    "BackupState",
    "DumpArtifact",
    "BACKUP_PREFIX",
    "isoformat_utc",
    "next_filename",
    "parse_filename",
    "ValueKind",
    "classify_value",
    "format_column_list",
    "format_value",
]
