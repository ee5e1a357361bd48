"""PostgreSQL schema inspection via pg_catalog and information_schema.

Enumerates the tables of one schema and the columns of each table.  This
is the metadata half of the dump: it never writes and has no side
effects.

Usage:
    from db_backup.adapters import AsyncPostgresConnection
    from db_backup.schema.inspector import SchemaInspector

    conn = AsyncPostgresConnection(database_url)
    await conn.connect()
    inspector = SchemaInspector(conn)
    for table in await inspector.list_tables("public"):
        columns = await inspector.list_columns("public", table.name)
"""

from db_backup.adapters.base import DatabaseConnection
from db_backup.schema.models import ColumnDescriptor, TableDescriptor

DEFAULT_SCHEMA = "public"


class SchemaInspector:
    """Inspects tables and columns of a PostgreSQL schema.

    Args:
        connection: An open ``DatabaseConnection``.
        excluded_tables: Table names to leave out of ``list_tables``.
            Defaults to no exclusions; a backup should cover every table
            unless told otherwise.

    Raises (from every query method):
        ConnectivityError: If the connection is unavailable.
        QueryError: If the metadata tables are inaccessible.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        excluded_tables: set[str] | None = None,
    ) -> None:
        self._conn = connection
        self._excluded_tables: set[str] = (
            set(excluded_tables) if excluded_tables is not None else set()
        )

    async def list_tables(self, schema_name: str = DEFAULT_SCHEMA) -> list[TableDescriptor]:
        """List ordinary tables in ``schema_name``, sorted by name.

        The database already orders by name, but its collation may differ
        from plain code-point order; sorting here keeps dumps identical
        across servers.
        """
        query = """
            SELECT tablename
            FROM pg_tables
            WHERE schemaname = %s
            ORDER BY tablename
        """
        rows = await self._conn.fetch_all(query, (schema_name,))
        names = sorted(
            row["tablename"]
            for row in rows
            if row["tablename"] not in self._excluded_tables
        )
        return [TableDescriptor(name=name) for name in names]

    async def list_columns(
        self, schema_name: str, table_name: str
    ) -> list[ColumnDescriptor]:
        """List the columns of a table in ordinal (physical) order."""
        query = """
            SELECT
                column_name,
                data_type,
                character_maximum_length
            FROM information_schema.columns
            WHERE table_schema = %s
              AND table_name = %s
            ORDER BY ordinal_position
        """
        rows = await self._conn.fetch_all(query, (schema_name, table_name))
        return [
            ColumnDescriptor(
                name=row["column_name"],
                data_type=row["data_type"],
                max_length=row["character_maximum_length"],
            )
            for row in rows
        ]

    async def fetch_rows(self, schema_name: str, table_name: str) -> list[dict]:
        """Fetch every row of a table in the database's natural order."""
        return await self._conn.select_all(schema_name, table_name)
