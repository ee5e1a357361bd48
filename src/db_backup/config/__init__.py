"""Configuration management: TOML loading, env overrides and config models.

Usage:
    >>> from db_backup.config import load_backup_config, BackupConfig, StorageConfig
"""

from db_backup.config.loader import load_backup_config
from db_backup.config.models import ApiConfig, BackupConfig, StorageConfig

__all__ = ["load_backup_config", "BackupConfig", "StorageConfig", "ApiConfig"]
