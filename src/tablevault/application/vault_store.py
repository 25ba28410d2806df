"""Vault Store - unified entry point for an encrypted table store.

This module provides the VaultStore class that wires the snapshot codec,
the store file, the mutation queue and the migration tracker together
behind the TableStore port.

Usage:
    from tablevault.application import VaultStore

    store = VaultStore("./app.ht", password="s3cret")
    store.create_table("users", ["name", "email"])
    store.insert("users", {"name": "John", "email": "j@x.com"})
    store.select("users", {"name": "John"})

Every operation starts by reloading the store file; no table state is
kept in memory between operations. Reads answer immediately and can see
the file between two queued writes. There is no locking against other
instances or processes using the same path.
"""

from __future__ import annotations

import copy
import threading
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from tablevault.adapters.outbound import AesSnapshotCodec, FileSnapshotStorage
from tablevault.application.migration_tracker import MigrationTracker
from tablevault.application.mutation_queue import MutationQueue
from tablevault.domain.entities import (
    DeleteMutation,
    DropAllDataMutation,
    InsertMutation,
    Migration,
    MigrationApplyMutation,
    Mutation,
    RenameColumnMutation,
    RenameTableMutation,
    StoreState,
    Table,
    UpdateMutation,
)
from tablevault.domain.services import table_operations
from tablevault.domain.value_objects import Predicate, Record
from tablevault.infrastructure.config import Config, get_config
from tablevault.infrastructure.logging import get_logger
from tablevault.infrastructure.metrics import MetricsRegistry, get_metrics
from tablevault.infrastructure.tracing import trace_span
from tablevault.ports.outbound import SnapshotCodec, SnapshotStorage

T = TypeVar("T")


class VaultStore:
    """Password-encrypted, file-backed table store.

    Record writes, ``drop_all`` and the two renames are queued and drained
    single-flight. Table and column create/delete run as direct
    reload-apply-persist cycles. Reads reload and answer immediately.

    Thread Safety:
        Each reload-apply-persist cycle holds the instance's I/O lock, so
        cycles from different threads never interleave. Queue order is
        strict FIFO across threads.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        password: str = "",
        *,
        config: Config | None = None,
        codec: SnapshotCodec | None = None,
        storage: SnapshotStorage | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the store. Nothing is read or written yet.

        Args:
            path: Store file path. Uses config.storage.default_path if empty.
            password: Secret used to encrypt the store file.
            config: Configuration (global config if None).
            codec: Snapshot codec (AES codec from config if None).
            storage: Snapshot storage (file storage at ``path`` if None).
            metrics: Metrics registry (global registry if None).
        """
        if not isinstance(password, str):
            raise TypeError(f"password must be a str, got {type(password).__name__}")

        self._config = config or get_config()
        self._metrics = metrics or get_metrics()

        self._storage: SnapshotStorage = storage or FileSnapshotStorage(
            path=path or self._config.storage.default_path,
            required_suffix=self._config.storage.required_suffix,
            fsync=self._config.storage.fsync,
        )
        self._codec: SnapshotCodec = codec or AesSnapshotCodec(
            key_size=self._config.codec.key_size,
            metrics=self._metrics,
        )
        self._password = password
        self._fail_open = self._config.codec.fail_open

        self._io_lock = threading.RLock()
        self._queue = MutationQueue(self._apply_mutation, metrics=self._metrics)
        self._migrations = MigrationTracker(self, metrics=self._metrics)

        self._logger = get_logger(__name__, path=str(self._storage.path))

    # -- properties ---------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._storage.path

    @property
    def queue(self) -> MutationQueue:
        return self._queue

    @property
    def migrations(self) -> MigrationTracker:
        return self._migrations

    @property
    def migrations_enabled(self) -> bool:
        return self._migrations.enabled

    @property
    def pending_mutations(self) -> int:
        return self._queue.pending

    # -- tables -------------------------------------------------------------

    def create_table(self, table: str, columns: list[str] | None = None) -> None:
        """Create an empty table.

        Raises:
            TableAlreadyExistsError: If the table exists.
        """
        self.transact(lambda state: table_operations.create_table(state, table, columns))
        self._logger.info("table_created", table=table, columns=list(columns or []))

    def create_table_if_not_exists(self, table: str, columns: list[str]) -> None:
        """Create an empty table unless present. Does not write if present."""
        with self._io_lock:
            state = self._reload()
            if table_operations.create_table_if_not_exists(state, table, columns):
                self._persist(state)
                self._logger.info("table_created", table=table, columns=list(columns))

    def delete_table(self, table: str) -> None:
        """Delete a table.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        self.transact(lambda state: table_operations.delete_table(state, table))
        self._logger.info("table_deleted", table=table)

    def delete_table_if_exists(self, table: str) -> None:
        """Delete a table if present. Does not write if absent."""
        with self._io_lock:
            state = self._reload()
            if table_operations.delete_table_if_exists(state, table):
                self._persist(state)
                self._logger.info("table_deleted", table=table)

    def rename_table(self, old_name: str, new_name: str) -> None:
        """Queue a table rename.

        Raises:
            TableNotFoundError: If ``old_name`` does not exist.
            TableAlreadyExistsError: If ``new_name`` already exists.
        """
        self._queue.submit(RenameTableMutation(table=old_name, new_name=new_name))

    # -- columns ------------------------------------------------------------

    def add_column(self, table: str, column: str, default: Any = None) -> None:
        """Append a column, back-filling existing records with ``default``.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnAlreadyExistsError: If the column exists.
        """
        self.transact(
            lambda state: table_operations.add_column(state, table, column, default)
        )
        self._logger.info("column_added", table=table, column=column)

    def delete_column(self, table: str, column: str) -> None:
        """Remove a column from the schema and every record.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnNotFoundError: If the column does not exist.
        """
        self.transact(lambda state: table_operations.delete_column(state, table, column))
        self._logger.info("column_deleted", table=table, column=column)

    def rename_column(self, table: str, old_name: str, new_name: str) -> None:
        """Queue a column rename.

        Raises:
            TableNotFoundError: If the table does not exist.
            ColumnNotFoundError: If ``old_name`` does not exist.
            ColumnAlreadyExistsError: If ``new_name`` already exists.
        """
        self._queue.submit(
            RenameColumnMutation(table=table, column=old_name, new_name=new_name)
        )

    # -- records ------------------------------------------------------------

    def insert(self, table: str, record: Record) -> None:
        """Queue an insert. The stored row only has the table's columns."""
        self._queue.submit(InsertMutation(table=table, record=_snapshot(record, "record")))

    def update(self, table: str, query: Predicate, new_data: Record) -> None:
        """Queue an update of every record matching ``query``."""
        self._queue.submit(
            UpdateMutation(
                table=table,
                query=_snapshot(query, "query"),
                new_data=_snapshot(new_data, "new_data"),
            )
        )

    def delete(self, table: str, query: Predicate | None = None) -> None:
        """Queue a delete of every record matching ``query`` (all if None)."""
        self._queue.submit(DeleteMutation(table=table, query=_snapshot(query or {}, "query")))

    def drop_all(self) -> None:
        """Queue clearing every table's records. Schemas are kept."""
        self._queue.submit(DropAllDataMutation())

    def select(self, table: str, query: Predicate | None = None) -> list[Record]:
        """Return copies of matching records in table order.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        state = self._reload()
        return table_operations.select_records(state, table, query)

    # -- metadata -----------------------------------------------------------

    def read_tables(self) -> dict[str, Table]:
        """Return a copy of every table."""
        state = self._reload()
        return {name: table.copy() for name, table in state.tables.items()}

    def get_table_names(self) -> list[str]:
        return self._reload().table_names

    def get_column_names(self, table: str) -> list[str]:
        """Return the table's columns.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        return list(table_operations.require_table(self._reload(), table).columns)

    def get_record_count(self, table: str) -> int:
        """Return the table's record count.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        return table_operations.require_table(self._reload(), table).record_count

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with various statistics.
        """
        state = self._reload()
        return {
            "path": str(self.path),
            "exists": self._storage.exists(),
            "tables": len(state),
            "records": {name: t.record_count for name, t in state.tables.items()},
            "pending_mutations": self._queue.pending,
            "migrations_enabled": self._migrations.enabled,
        }

    # -- migrations ---------------------------------------------------------

    def enable_migrations(self) -> None:
        """Turn on migration tracking and create the ``migrations`` table."""
        self._migrations.enable()

    def create_migration(self, migration: Migration, body: Callable[[], None]) -> None:
        """Run ``body`` once for ``migration.id``; later calls are no-ops.

        Raises:
            MigrationsNotEnabledError: If enable_migrations() was never called.
        """
        self._migrations.create(migration, body)

    # -- queue / persistence ------------------------------------------------

    def flush(self) -> None:
        """Drain any writes still waiting in the queue."""
        self._queue.flush()

    def transact(self, operation: Callable[[StoreState], T]) -> T:
        """Run one reload -> apply -> persist cycle.

        Nothing is written if ``operation`` raises.
        """
        with self._io_lock:
            state = self._reload()
            result = operation(state)
            self._persist(state)
            return result

    def _apply_mutation(self, mutation: Mutation) -> None:
        """Drain step handed to the MutationQueue."""
        if isinstance(mutation, MigrationApplyMutation):
            self._migrations.run(mutation)
            return
        self.transact(lambda state: self._dispatch(state, mutation))

    def _dispatch(self, state: StoreState, mutation: Mutation) -> None:
        if isinstance(mutation, InsertMutation):
            table_operations.insert_record(state, mutation.table, mutation.record)
        elif isinstance(mutation, UpdateMutation):
            table_operations.update_records(
                state, mutation.table, mutation.query, mutation.new_data
            )
        elif isinstance(mutation, DeleteMutation):
            table_operations.delete_records(state, mutation.table, mutation.query)
        elif isinstance(mutation, DropAllDataMutation):
            table_operations.drop_all_records(state)
        elif isinstance(mutation, RenameTableMutation):
            table_operations.rename_table(state, mutation.table, mutation.new_name)
        elif isinstance(mutation, RenameColumnMutation):
            table_operations.rename_column(
                state, mutation.table, mutation.column, mutation.new_name
            )
        else:
            raise ValueError(f"Unknown mutation kind: {mutation.kind}")

    def _reload(self) -> StoreState:
        with self._io_lock, trace_span("tablevault.reload", {"store.path": str(self.path)}):
            blob = self._storage.read()
            if blob is None:
                state = StoreState.empty()
            elif self._fail_open:
                state = self._codec.decode(blob, self._password)
            else:
                state = self._codec.decode_strict(blob, self._password)

            self._metrics.reloads_total.inc()
            return state

    def _persist(self, state: StoreState) -> None:
        with self._io_lock, trace_span("tablevault.persist", {"store.path": str(self.path)}):
            blob = self._codec.encode(state, self._password)
            self._storage.write(blob)

            self._metrics.persists_total.inc()
            self._metrics.snapshot_bytes.set(len(blob))

    def __enter__(self) -> VaultStore:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - drain leftover writes unless unwinding."""
        if exc_type is None:
            self.flush()

    def __repr__(self) -> str:
        return f"VaultStore(path={str(self.path)!r})"


def _snapshot(data: Mapping[str, Any], name: str) -> dict[str, Any]:
    """Copy caller data at enqueue time so later edits can't leak in."""
    if not isinstance(data, Mapping):
        raise TypeError(f"{name} must be a mapping, got {type(data).__name__}")
    return copy.deepcopy(dict(data))
