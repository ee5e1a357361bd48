"""Database connection protocol definition.

Defines the ``DatabaseConnection`` Protocol consumed by the schema
inspector and the backup orchestrator.  All methods are ``async def``.

Usage:
    from db_backup.adapters.base import DatabaseConnection

    async def count_users(conn: DatabaseConnection) -> int:
        await conn.connect()
        try:
            rows = await conn.select_all("public", "users")
            return len(rows)
        finally:
            await conn.close()
"""

from typing import Any, Protocol


class DatabaseConnection(Protocol):
    """Connection interface that the dump pipeline depends on.

    Implementations map transport failures to ``ConnectivityError`` and
    rejected statements to ``QueryError`` (see ``db_backup.errors``).
    """

    async def connect(self) -> None:
        """Open the connection.

        Raises:
            ConnectivityError: If the database cannot be reached or the
                credentials are rejected.
        """
        ...

    async def fetch_all(self, query: str, params: tuple[Any, ...] | None = None) -> list[dict]:
        """Run a read-only query and return every row.

        Args:
            query: SQL text with ``%s`` placeholders.
            params: Positional parameters for the placeholders.

        Returns:
            List of dicts, one per row, keys in column order.

        Raises:
            ConnectivityError: If the connection is not open or was lost.
            QueryError: If the database rejects the query.
        """
        ...

    async def select_all(self, schema: str, table: str) -> list[dict]:
        """Return every row of ``schema.table`` in the database's natural order.

        No ``ORDER BY`` is applied.  Keys follow the physical column order.
        """
        ...

    async def close(self) -> None:
        """Close the connection.  Safe to call when already closed."""
        ...
