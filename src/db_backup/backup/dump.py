"""SQL dump assembly.

Builds a replayable SQL script from the tables of one schema.  For each
table, in name order, the script drops the table, recreates it from its
column list, and inserts every row.

The ``CREATE TABLE`` is a simplified reconstruction: column names and
types only.  Constraints, indexes, defaults, and foreign keys are not
reproduced.  Replaying the script drops any existing table of the same
name (``CASCADE``).

Identifier quoting is minimal too.  Table names are wrapped in double
quotes as-is; a ``"`` inside a name is not doubled.  Column names in
``CREATE TABLE`` are emitted unquoted, so mixed-case names, reserved
words, and names with spaces do not round-trip.  ``INSERT`` column lists
are double-quoted, with the same caveat about embedded ``"``.

Usage:
    from db_backup.backup.dump import DumpBuilder
    from db_backup.schema.inspector import SchemaInspector

    builder = DumpBuilder(SchemaInspector(conn), database="shop")
    artifact = await builder.build("public")
    print(artifact.size_bytes)
"""

import logging
from collections.abc import Iterator
from datetime import datetime, timezone

from db_backup.backup.models import DumpArtifact
from db_backup.backup.naming import isoformat_utc
from db_backup.backup.serializer import format_column_list, format_values
from db_backup.errors import DumpError, QueryError
from db_backup.schema.inspector import DEFAULT_SCHEMA, SchemaInspector
from db_backup.schema.models import ColumnDescriptor

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
DEFAULT_MARKER = "PostgreSQL"


def _batches(rows: list[dict], size: int) -> Iterator[list[dict]]:
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


def create_table_statement(table: str, columns: list[ColumnDescriptor]) -> str:
    """Synthesize ``CREATE TABLE`` from column descriptors.

    Example:
        >>> create_table_statement("users", [
        ...     ColumnDescriptor(name="id", data_type="integer"),
        ...     ColumnDescriptor(name="name", data_type="character varying", max_length=50),
        ... ])
        'CREATE TABLE "users" (id integer, name character varying(50));'
    """
    definitions = ", ".join(col.definition for col in columns)
    return f'CREATE TABLE "{table}" ({definitions});'


def insert_statements(table: str, rows: list[dict], batch_size: int) -> list[str]:
    """One ``INSERT`` per row.

    Rows are walked in batches sharing one rendered column list; the
    statements produced do not depend on ``batch_size``.
    """
    statements: list[str] = []
    for batch in _batches(rows, batch_size):
        columns = format_column_list(batch[0])
        for row in batch:
            statements.append(
                f'INSERT INTO "{table}" ({columns}) VALUES ({format_values(row)});'
            )
    return statements


class DumpBuilder:
    """Assembles a ``DumpArtifact`` from a schema.

    Tables are dumped one at a time, sequentially, on the inspector's
    single connection.  The whole script is buffered in memory.

    Args:
        inspector: ``SchemaInspector`` bound to an open connection.
        database: Database name recorded in the header.
        batch_size: Rows per text-assembly batch (must be >= 1).
        marker: Tool name written in the first header line.
    """

    def __init__(
        self,
        inspector: SchemaInspector,
        database: str = "unknown",
        batch_size: int = DEFAULT_BATCH_SIZE,
        marker: str = DEFAULT_MARKER,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._inspector = inspector
        self._database = database
        self._batch_size = batch_size
        self._marker = marker

    def header(self, now: datetime) -> list[str]:
        return [
            f"-- {self._marker} Backup",
            f"-- Date: {isoformat_utc(now)}",
            f"-- Database: {self._database}",
            "",
        ]

    async def build(
        self,
        schema_name: str = DEFAULT_SCHEMA,
        now: datetime | None = None,
    ) -> DumpArtifact:
        """Dump every table of ``schema_name``.

        Args:
            schema_name: Schema to dump.
            now: Timestamp written in the header (defaults to current UTC).

        Returns:
            The complete, immutable ``DumpArtifact``.

        Raises:
            DumpError: If a metadata or data query fails.  Carries the
                failing table name (``None`` if listing tables failed).
            ConnectivityError: If the connection drops mid-dump.
        """
        now = now or datetime.now(timezone.utc)

        try:
            tables = await self._inspector.list_tables(schema_name)
        except QueryError as e:
            raise DumpError(None, e) from e

        parts: list[str] = self.header(now)
        for table in tables:
            logger.info("Dumping table: %s", table.name)
            try:
                parts.extend(await self._dump_table(schema_name, table.name))
            except QueryError as e:
                raise DumpError(table.name, e) from e

        artifact = DumpArtifact(
            text="\n".join(parts),
            created_at=now,
            database=self._database,
            tables=[t.name for t in tables],
        )
        logger.info(
            "Database dump completed (%d tables, %d bytes)",
            len(tables),
            artifact.size_bytes,
        )
        return artifact

    async def _dump_table(self, schema_name: str, table: str) -> list[str]:
        """Statements for one table, ending with a blank separator line."""
        columns = await self._inspector.list_columns(schema_name, table)

        lines = [
            f"-- Table: {table}",
            f'DROP TABLE IF EXISTS "{table}" CASCADE;',
            create_table_statement(table, columns),
        ]

        rows = await self._inspector.fetch_rows(schema_name, table)
        if rows:
            lines.append(f"-- Data for {table}")
            lines.extend(insert_statements(table, rows, self._batch_size))
        logger.debug("Table %s: %d columns, %d rows", table, len(columns), len(rows))

        lines.append("")
        return lines
