"""HTTP API for listing backups and triggering manual backups."""

from db_backup.api.app import create_app, create_app_from_env

__all__ = ["create_app", "create_app_from_env"]
