"""Pydantic models for schema inspection.

Usage:
    from db_backup.schema.models import ColumnDescriptor, TableDescriptor

    table = TableDescriptor(name="users")
    cols = [
        ColumnDescriptor(name="id", data_type="integer"),
        ColumnDescriptor(name="name", data_type="character varying", max_length=50),
    ]
"""

from pydantic import BaseModel


class TableDescriptor(BaseModel):
    """A table in the target schema."""

    name: str


class ColumnDescriptor(BaseModel):
    """A column of a table, in ordinal order.

    ``data_type`` is the raw ``information_schema`` type name so the
    synthesized ``CREATE TABLE`` stays valid PostgreSQL.  ``name`` is used
    unquoted in ``definition``; names that need quoting (mixed case,
    reserved words, spaces) are not escaped.

    Example:
        >>> ColumnDescriptor(name="name", data_type="character varying", max_length=50).definition
        'name character varying(50)'
    """

    name: str
    data_type: str
    max_length: int | None = None

    @property
    def definition(self) -> str:
        """Column definition fragment: ``name type`` or ``name type(len)``."""
        if self.max_length is not None:
            return f"{self.name} {self.data_type}({self.max_length})"
        return f"{self.name} {self.data_type}"
