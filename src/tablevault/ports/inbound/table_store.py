"""Table Store port - the public contract of the engine.

This inbound port defines what callers can do with a store: table and
column DDL, record writes, predicate reads, metadata queries and
migrations. It also owns the error kinds those operations raise.

Read/write split:
    - Reads (select, read_tables, metadata) reload the durable file and
      answer immediately. They are never queued.
    - Record writes and renames are queued and drained single-flight.
    - Table/column create and delete are direct read-modify-write cycles.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Protocol

from tablevault.domain.entities import Migration, Table
from tablevault.domain.value_objects import Predicate, Record


class TableStore(Protocol):
    """Protocol for an encrypted, file-backed table store."""

    # -- tables -----------------------------------------------------------

    @abstractmethod
    def create_table(self, table: str, columns: list[str] | None = None) -> None:
        """Create an empty table.

        Raises:
            TableAlreadyExistsError: If the table exists.
        """
        ...

    @abstractmethod
    def create_table_if_not_exists(self, table: str, columns: list[str]) -> None:
        """Create an empty table unless one with that name exists."""
        ...

    @abstractmethod
    def delete_table(self, table: str) -> None:
        """Delete a table.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    @abstractmethod
    def delete_table_if_exists(self, table: str) -> None:
        """Delete a table if it exists."""
        ...

    @abstractmethod
    def rename_table(self, old_name: str, new_name: str) -> None:
        """Queue a table rename.

        Raises:
            TableNotFoundError: If ``old_name`` does not exist.
            TableAlreadyExistsError: If ``new_name`` already exists.
        """
        ...

    # -- columns ----------------------------------------------------------

    @abstractmethod
    def add_column(self, table: str, column: str, default: Any = None) -> None:
        """Append a column and back-fill existing records with ``default``.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnAlreadyExistsError: If the column exists.
        """
        ...

    @abstractmethod
    def delete_column(self, table: str, column: str) -> None:
        """Remove a column from the schema and every record.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnNotFoundError: If the column does not exist.
        """
        ...

    @abstractmethod
    def rename_column(self, table: str, old_name: str, new_name: str) -> None:
        """Queue a column rename.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnNotFoundError: If ``old_name`` does not exist.
            ColumnAlreadyExistsError: If ``new_name`` already exists.
        """
        ...

    # -- records ----------------------------------------------------------

    @abstractmethod
    def insert(self, table: str, record: Record) -> None:
        """Queue an insert of one record, normalised to the schema."""
        ...

    @abstractmethod
    def update(self, table: str, query: Predicate, new_data: Record) -> None:
        """Queue an update of every record matching ``query``."""
        ...

    @abstractmethod
    def delete(self, table: str, query: Predicate | None = None) -> None:
        """Queue a delete of every record matching ``query``."""
        ...

    @abstractmethod
    def select(self, table: str, query: Predicate | None = None) -> list[Record]:
        """Return matching records in table order.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    @abstractmethod
    def drop_all(self) -> None:
        """Queue clearing of every table's records (schemas are kept)."""
        ...

    # -- metadata ---------------------------------------------------------

    @abstractmethod
    def read_tables(self) -> dict[str, Table]:
        """Return a copy of every table."""
        ...

    @abstractmethod
    def get_table_names(self) -> list[str]:
        """Return table names in creation order."""
        ...

    @abstractmethod
    def get_column_names(self, table: str) -> list[str]:
        """Return a table's columns.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    @abstractmethod
    def get_record_count(self, table: str) -> int:
        """Return a table's record count.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    # -- migrations -------------------------------------------------------

    @abstractmethod
    def enable_migrations(self) -> None:
        """Turn on migration tracking and create the ``migrations`` table."""
        ...

    @abstractmethod
    def create_migration(self, migration: Migration, body: Callable[[], None]) -> None:
        """Apply ``body`` once for ``migration.id``.

        Raises:
            MigrationsNotEnabledError: If enable_migrations() was never called.
        """
        ...


class TableStoreError(Exception):
    """Base class for every error raised by the table store."""


class TableAlreadyExistsError(TableStoreError):
    """Raised when creating or renaming onto an existing table name."""

    def __init__(self, table: str) -> None:
        super().__init__(f'Table "{table}" already exists.')
        self.table = table


class TableNotFoundError(TableStoreError):
    """Raised when an operation names a table that does not exist."""

    def __init__(self, table: str) -> None:
        super().__init__(f'Table "{table}" does not exist.')
        self.table = table


class ColumnAlreadyExistsError(TableStoreError):
    """Raised when adding or renaming onto an existing column name."""

    def __init__(self, table: str, column: str) -> None:
        super().__init__(f'Column "{column}" already exists in table "{table}".')
        self.table = table
        self.column = column


class ColumnNotFoundError(TableStoreError):
    """Raised when an operation names a column that does not exist."""

    def __init__(self, table: str, column: str) -> None:
        super().__init__(f'Column "{column}" does not exist in table "{table}".')
        self.table = table
        self.column = column


class MigrationsNotEnabledError(TableStoreError):
    """Raised by create_migration before enable_migrations was called."""

    def __init__(self) -> None:
        super().__init__("Migrations are not enabled. Call enable_migrations() first.")
