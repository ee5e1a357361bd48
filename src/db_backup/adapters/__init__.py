"""Database connection package.

Provides the ``DatabaseConnection`` Protocol and the psycopg-based
``AsyncPostgresConnection`` implementation.

Usage:
    from db_backup.adapters import DatabaseConnection, AsyncPostgresConnection
"""

from db_backup.adapters.base import DatabaseConnection
from db_backup.adapters.postgres import AsyncPostgresConnection, database_name_from_url

__all__ = [
    "DatabaseConnection",
    "AsyncPostgresConnection",
    "database_name_from_url",
]
