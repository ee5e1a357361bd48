"""Exception taxonomy for the backup pipeline.

Every failure raised by the core derives from ``BackupError`` so callers
(the HTTP layer, the scheduler entry point, the CLI) can catch one type
and report ``str(exc)``.

Usage:
    from db_backup.errors import BackupError, DumpError

    try:
        artifact = await builder.build()
    except DumpError as e:
        print(f"table {e.table} failed: {e}")
"""


class BackupError(Exception):
    """Base class for all backup pipeline errors."""

    pass


class ConfigError(BackupError):
    """Raised when configuration is missing or invalid."""

    pass


class ConnectivityError(BackupError):
    """Raised when the database cannot be reached or authenticated to."""

    pass


class QueryError(BackupError):
    """Raised when a metadata or data query is rejected by the database."""

    pass


class DumpError(BackupError):
    """Raised when building a dump fails.

    Wraps the underlying ``QueryError`` and records the table that was
    being dumped.  ``table`` is ``None`` when the table listing itself
    failed.
    """

    def __init__(self, table: str | None, cause: Exception) -> None:
        self.table = table
        self.cause = cause
        where = f"table '{table}'" if table else "table listing"
        super().__init__(f"Dump failed at {where}: {cause}")


class StorageError(BackupError):
    """Raised when the storage sink rejects an upload or listing."""

    pass


class AuthError(BackupError):
    """Raised when a request carries a missing or invalid bearer token."""

    pass
