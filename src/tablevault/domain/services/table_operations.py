"""Schema and record operations over a StoreState.

Every function here mutates the StoreState it is given in place and does
no I/O. The store wraps each call in reload -> apply -> persist; keeping
the rules here means the queue, the direct DDL path and the migration
tracker all share one implementation.

Error kinds:
    TableAlreadyExistsError  - create/rename onto an existing table
    TableNotFoundError       - any operation on a missing table
    ColumnAlreadyExistsError - add/rename onto an existing column
    ColumnNotFoundError      - delete/rename of a missing column
"""

from __future__ import annotations

import copy
from typing import Any

from tablevault.domain.entities import StoreState, Table
from tablevault.domain.services.query_matcher import filter_records, matches, reject_records
from tablevault.domain.value_objects import Predicate, Record, is_truthy
from tablevault.ports.inbound.table_store import (
    ColumnAlreadyExistsError,
    ColumnNotFoundError,
    TableAlreadyExistsError,
    TableNotFoundError,
)


def require_table(state: StoreState, name: str) -> Table:
    """Return the named table.

    Raises:
        TableNotFoundError: If the table does not exist.
    """
    table = state.get(name)
    if table is None:
        raise TableNotFoundError(name)
    return table


def _require_column(table: Table, table_name: str, column: str) -> None:
    if not table.has_column(column):
        raise ColumnNotFoundError(table_name, column)


def _reject_existing_column(table: Table, table_name: str, column: str) -> None:
    if table.has_column(column):
        raise ColumnAlreadyExistsError(table_name, column)


# -- tables ---------------------------------------------------------------


def create_table(state: StoreState, name: str, columns: list[str] | None = None) -> None:
    """Add an empty table.

    Raises:
        TableAlreadyExistsError: If the name is taken.
        ValueError: If ``columns`` contains duplicates.
    """
    if name in state:
        raise TableAlreadyExistsError(name)

    columns = list(columns or [])
    if len(set(columns)) != len(columns):
        raise ValueError(f'Duplicate column names for table "{name}": {columns}')

    state.tables[name] = Table(columns=columns, records=[])


def create_table_if_not_exists(state: StoreState, name: str, columns: list[str]) -> bool:
    """Add an empty table unless present. Returns True if created."""
    if name in state:
        return False
    create_table(state, name, columns)
    return True


def delete_table(state: StoreState, name: str) -> None:
    """Remove a table.

    Raises:
        TableNotFoundError: If the table does not exist.
    """
    require_table(state, name)
    del state.tables[name]


def delete_table_if_exists(state: StoreState, name: str) -> bool:
    """Remove a table if present. Returns True if removed."""
    return state.tables.pop(name, None) is not None


def rename_table(state: StoreState, old_name: str, new_name: str) -> None:
    """Move a table under a new name, keeping columns and records.

    Raises:
        TableNotFoundError: If ``old_name`` does not exist.
        TableAlreadyExistsError: If ``new_name`` already exists.
    """
    table = require_table(state, old_name)
    if new_name in state:
        raise TableAlreadyExistsError(new_name)

    state.tables[new_name] = table
    del state.tables[old_name]


# -- columns --------------------------------------------------------------


def add_column(state: StoreState, table_name: str, column: str, default: Any = None) -> None:
    """Append a column and back-fill every record with ``default``.

    Raises:
        TableNotFoundError: If the table does not exist.
        ColumnAlreadyExistsError: If the column exists.
    """
    table = require_table(state, table_name)
    _reject_existing_column(table, table_name, column)

    table.columns.append(column)
    for record in table.records:
        # Each record gets its own copy of a structured default
        record[column] = copy.deepcopy(default)


def delete_column(state: StoreState, table_name: str, column: str) -> None:
    """Remove a column from the schema and every record.

    Raises:
        TableNotFoundError: If the table does not exist.
        ColumnNotFoundError: If the column does not exist.
    """
    table = require_table(state, table_name)
    _require_column(table, table_name, column)

    table.columns.remove(column)
    for record in table.records:
        record.pop(column, None)


def rename_column(state: StoreState, table_name: str, old_name: str, new_name: str) -> None:
    """Rename a column in place; it keeps its position in the schema.

    Raises:
        TableNotFoundError: If the table does not exist.
        ColumnNotFoundError: If ``old_name`` does not exist.
        ColumnAlreadyExistsError: If ``new_name`` already exists.
    """
    table = require_table(state, table_name)
    _require_column(table, table_name, old_name)
    _reject_existing_column(table, table_name, new_name)

    table.columns[table.columns.index(old_name)] = new_name
    for record in table.records:
        record[new_name] = record.pop(old_name, None)


# -- records --------------------------------------------------------------


def normalize_record(table: Table, record: Record) -> Record:
    """Shape ``record`` to the table schema.

    Present, truthy values are kept; anything else becomes None. Keys
    outside the schema are dropped.
    """
    return {
        column: record.get(column) if is_truthy(record.get(column)) else None
        for column in table.columns
    }


def insert_record(state: StoreState, table_name: str, record: Record) -> Record:
    """Append a schema-normalised copy of ``record``. Returns the stored row.

    Raises:
        TableNotFoundError: If the table does not exist.
    """
    table = require_table(state, table_name)
    normalized = copy.deepcopy(normalize_record(table, record))
    table.records.append(normalized)
    return normalized


def update_records(
    state: StoreState, table_name: str, query: Predicate | None, new_data: Record
) -> int:
    """Write schema columns of ``new_data`` onto matching records.

    Matching is decided before any column is written, so updating a column
    that appears in the predicate still updates the whole record.

    Returns:
        Number of records matched.

    Raises:
        TableNotFoundError: If the table does not exist.
    """
    table = require_table(state, table_name)
    changes = {k: v for k, v in new_data.items() if table.has_column(k)}

    affected = 0
    for record in table.records:
        if matches(record, query):
            record.update(copy.deepcopy(changes))
            affected += 1
    return affected


def delete_records(state: StoreState, table_name: str, query: Predicate | None) -> int:
    """Remove matching records, keeping the rest in order.

    Returns:
        Number of records removed.

    Raises:
        TableNotFoundError: If the table does not exist.
    """
    table = require_table(state, table_name)
    before = len(table.records)
    table.records = reject_records(table.records, query)
    return before - len(table.records)


def select_records(state: StoreState, table_name: str, query: Predicate | None) -> list[Record]:
    """Return copies of matching records in table order.

    Raises:
        TableNotFoundError: If the table does not exist.
    """
    table = require_table(state, table_name)
    return copy.deepcopy(filter_records(table.records, query))


def drop_all_records(state: StoreState) -> None:
    """Empty every table, keeping schemas."""
    for table in state.tables.values():
        table.records = []
