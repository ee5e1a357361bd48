"""Schema inspection: tables and columns of the schema being backed up.

Usage:
    from db_backup.schema import SchemaInspector
"""

from db_backup.schema.inspector import DEFAULT_SCHEMA, SchemaInspector
from db_backup.schema.models import ColumnDescriptor, TableDescriptor

__all__ = ["SchemaInspector", "DEFAULT_SCHEMA", "ColumnDescriptor", "TableDescriptor"]
