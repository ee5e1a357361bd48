"""Tests for DumpBuilder output."""

import pytest

from conftest import FIXED_NOW, FakeConnection, users_table
from db_backup.backup.dump import DumpBuilder, create_table_statement, insert_statements
from db_backup.errors import ConnectivityError, DumpError
from db_backup.schema.inspector import SchemaInspector
from db_backup.schema.models import ColumnDescriptor


async def _build(conn: FakeConnection, **kwargs):
    await conn.connect()
    builder = DumpBuilder(SchemaInspector(conn), database="shop", **kwargs)
    return await builder.build("public", now=FIXED_NOW)


# ============================================================================
# Statement helpers
# ============================================================================


class TestStatements:
    """DROP, CREATE and INSERT statement helpers."""

    def test_create_table(self):
        columns = [
            ColumnDescriptor(name="id", data_type="integer"),
            ColumnDescriptor(name="name", data_type="character varying", max_length=50),
        ]
        assert create_table_statement("users", columns) == (
            'CREATE TABLE "users" (id integer, name character varying(50));'
        )

    def test_create_table_without_columns(self):
        assert create_table_statement("empty", []) == 'CREATE TABLE "empty" ();'

    def test_insert_statements_independent_of_batch_size(self):
        rows = [{"id": i, "name": f"n{i}"} for i in range(7)]
        expected = insert_statements("t", rows, 100)
        for size in (1, 2, 3, 7, 8):
            assert insert_statements("t", rows, size) == expected
        assert len(expected) == 7

    def test_insert_statements_empty(self):
        assert insert_statements("t", [], 100) == []


# ============================================================================
# Full dumps
# ============================================================================


class TestDumpBuilder:
    """The assembled script."""

    async def test_header(self):
        artifact = await _build(FakeConnection())
        assert artifact.text.splitlines()[:3] == [
            "-- PostgreSQL Backup",
            "-- Date: 2025-11-19T01:00:00.000Z",
            "-- Database: shop",
        ]

    async def test_users_table_end_to_end(self):
        artifact = await _build(FakeConnection(tables={"users": users_table()}))
        lines = artifact.text.split("\n")
        assert lines[4:10] == [
            "-- Table: users",
            'DROP TABLE IF EXISTS "users" CASCADE;',
            'CREATE TABLE "users" (id integer, name character varying(50));',
            "-- Data for users",
            'INSERT INTO "users" ("id", "name") VALUES (1, \'Al\');',
            'INSERT INTO "users" ("id", "name") VALUES (2, \'O\'\'Brien\');',
        ]

    async def test_one_drop_and_create_per_table_in_order(self, shop_connection):
        artifact = await _build(shop_connection)
        drops = [l for l in artifact.text.splitlines() if l.startswith("DROP TABLE")]
        creates = [l for l in artifact.text.splitlines() if l.startswith("CREATE TABLE")]
        assert drops == [
            'DROP TABLE IF EXISTS "audit" CASCADE;',
            'DROP TABLE IF EXISTS "users" CASCADE;',
        ]
        assert [c.split('"')[1] for c in creates] == ["audit", "users"]
        assert artifact.tables == ["audit", "users"]

    async def test_empty_table_has_no_data_block(self, shop_connection):
        artifact = await _build(shop_connection)
        assert "-- Data for audit" not in artifact.text
        assert 'INSERT INTO "audit"' not in artifact.text
        assert "-- Data for users" in artifact.text

    async def test_no_tables_is_header_only(self):
        artifact = await _build(FakeConnection())
        assert artifact.text == (
            "-- PostgreSQL Backup\n-- Date: 2025-11-19T01:00:00.000Z\n-- Database: shop\n"
        )
        assert artifact.tables == []

    async def test_batch_size_does_not_change_output(self):
        rows = [{"id": i, "name": f"user {i}"} for i in range(250)]
        table = {"columns": [("id", "integer", None), ("name", "text", None)], "rows": rows}
        default = await _build(FakeConnection(tables={"t": dict(table)}))
        small = await _build(FakeConnection(tables={"t": dict(table)}), batch_size=7)
        assert small.text == default.text
        assert default.text.count("INSERT INTO") == 250

    async def test_special_values_in_insert(self):
        table = {
            "columns": [("score", "double precision", None), ("blob", "bytea", None)],
            "rows": [{"score": float("nan"), "blob": b"\x01\x02"}],
        }
        artifact = await _build(FakeConnection(tables={"m": table}))
        assert (
            'INSERT INTO "m" ("score", "blob") VALUES (\'NaN\', \'\\x0102\');'
            in artifact.text.splitlines()
        )

    async def test_size_and_metadata(self, shop_connection):
        artifact = await _build(shop_connection)
        assert artifact.size_bytes == len(artifact.text.encode("utf-8"))
        assert artifact.created_at == FIXED_NOW
        assert artifact.database == "shop"

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            DumpBuilder(SchemaInspector(FakeConnection()), batch_size=0)


class TestDumpFailures:
    """Failures abort the dump and name the table."""

    async def test_query_error_names_table(self, shop_connection):
        shop_connection.failing_table = "users"
        with pytest.raises(DumpError) as exc_info:
            await _build(shop_connection)
        assert exc_info.value.table == "users"
        assert "users" in str(exc_info.value)
        assert "permission denied" in str(exc_info.value)

    async def test_connectivity_error_is_not_wrapped(self, shop_connection):
        builder = DumpBuilder(SchemaInspector(shop_connection))
        with pytest.raises(ConnectivityError):
            await builder.build("public", now=FIXED_NOW)
