"""Value objects for the table store domain.

Exports:
    Identifiers:
        - TableName, ColumnName, MigrationId: Type-safe name wrappers
        - Value, Record, Predicate: Scalar domain and row/filter shapes
        - MIGRATIONS_TABLE, MIGRATIONS_COLUMNS: Reserved migrations schema

    Helpers:
        - is_truthy: Presence test used when normalising inserts
        - values_equal: Strict equality used by the query matcher
"""

from tablevault.domain.value_objects.identifiers import (
    MIGRATIONS_COLUMNS,
    MIGRATIONS_TABLE,
    ColumnName,
    MigrationId,
    Predicate,
    Record,
    TableName,
    Value,
    is_truthy,
    values_equal,
)

__all__ = [
    # Identifiers
    "TableName",
    "ColumnName",
    "MigrationId",
    "Value",
    "Record",
    "Predicate",
    "MIGRATIONS_TABLE",
    "MIGRATIONS_COLUMNS",
    # Helpers
    "is_truthy",
    "values_equal",
]
