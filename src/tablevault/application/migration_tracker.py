"""Migration Tracker - identity-keyed, at-most-once migrations.

Migrations are tracked as rows of the reserved ``migrations`` table with
columns ``[id, description, timestamp, applied]``.

Lifecycle of ``create(migration, body)``:
    1. Refuse unless tracking was enabled.
    2. Reload and look up the row for ``migration.id``.
    3. Applied row found: nothing happens; ``body`` is never called.
    4. Otherwise queue a MIGRATION_APPLY request carrying the migration
       and ``body``.
    5. When that request reaches the head of the queue, the row is
       claimed in one reload-apply-persist cycle: inserted as pending if
       absent, or found applied, in which case ``body`` is skipped.
    6. Otherwise ``body`` runs with its own writes drained in a nested
       frame, then the row is flipped to ``applied = true``.

The check in step 5 is what makes a migration run at most once when the
same id is requested twice before the first request drained.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tablevault.domain.entities import Migration, MigrationApplyMutation, StoreState
from tablevault.domain.services import table_operations
from tablevault.domain.value_objects import MIGRATIONS_COLUMNS, MIGRATIONS_TABLE, MigrationId
from tablevault.infrastructure.logging import get_logger
from tablevault.infrastructure.metrics import MetricsRegistry
from tablevault.ports.inbound.table_store import MigrationsNotEnabledError

if TYPE_CHECKING:
    from tablevault.application.vault_store import VaultStore

logger = get_logger(__name__)


class MigrationTracker:
    """Applies migrations against a VaultStore exactly once per id."""

    def __init__(self, store: VaultStore, metrics: MetricsRegistry | None = None) -> None:
        self._store = store
        self._metrics = metrics
        self._enabled = False
        # Migrations requested through this instance, in request order
        self._history: list[Migration] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def history(self) -> tuple[Migration, ...]:
        """Migrations requested through this tracker, latest state of each."""
        return tuple(self._history)

    @property
    def pending(self) -> tuple[Migration, ...]:
        return tuple(m for m in self._history if not m.applied)

    def enable(self) -> None:
        """Turn tracking on and make sure the reserved table exists."""
        self._enabled = True
        self._store.create_table_if_not_exists(MIGRATIONS_TABLE, list(MIGRATIONS_COLUMNS))

    def find(self, migration_id: str) -> Migration | None:
        """Return the stored migration with this id, if any."""
        rows = self._store.select(MIGRATIONS_TABLE, {"id": migration_id})
        if not rows:
            return None
        return Migration.from_record(rows[0])

    def applied_migrations(self) -> list[Migration]:
        """Every applied migration in the store, in insertion order."""
        rows = self._store.select(MIGRATIONS_TABLE)
        return [m for m in map(Migration.from_record, rows) if m.applied]

    def create(self, migration: Migration, body: Callable[[], None]) -> bool:
        """Queue ``body`` for ``migration.id`` unless it was already applied.

        Returns:
            True if a MIGRATION_APPLY request was queued.

        Raises:
            MigrationsNotEnabledError: If enable() was never called.
        """
        if not self._enabled:
            raise MigrationsNotEnabledError()

        existing = self.find(migration.id)
        if existing is not None and existing.applied:
            self._skip(existing)
            return False

        pending = Migration(
            id=migration.id,
            description=migration.description,
            timestamp=migration.timestamp,
            applied=False,
        )
        self._remember(pending)

        logger.info("migration_queued", migration_id=migration.id)
        self._store.queue.submit(MigrationApplyMutation(migration=pending, body=body))
        return True

    def run(self, mutation: MigrationApplyMutation) -> None:
        """Drain step for MIGRATION_APPLY: claim the row, run the body, mark applied.

        The body is skipped if the row was applied by an earlier request for
        the same id. If the body raises, the row stays pending and the error
        propagates.
        """
        migration_id = mutation.migration_id
        current = self._store.transact(lambda state: self._claim(state, mutation.migration))
        if current.applied:
            self._skip(current)
            return

        logger.info("migration_started", migration_id=migration_id)

        with self._store.queue.nested():
            mutation.body()

        self._store.transact(lambda state: self._mark_applied(state, migration_id))
        self._remember(current.mark_applied())

        if self._metrics is not None:
            self._metrics.migrations_applied_total.inc()
        logger.info("migration_applied", migration_id=migration_id)

    def _skip(self, migration: Migration) -> None:
        logger.info("migration_skipped", migration_id=migration.id)
        if self._metrics is not None:
            self._metrics.migrations_skipped_total.inc()
        self._remember(migration)

    @staticmethod
    def _claim(state: StoreState, migration: Migration) -> Migration:
        """Return the stored row for ``migration``, inserting it if absent."""
        rows = table_operations.select_records(state, MIGRATIONS_TABLE, {"id": migration.id})
        if rows:
            return Migration.from_record(rows[0])
        table_operations.insert_record(state, MIGRATIONS_TABLE, migration.to_record())
        return migration

    @staticmethod
    def _mark_applied(state: StoreState, migration_id: MigrationId) -> int:
        return table_operations.update_records(
            state, MIGRATIONS_TABLE, {"id": migration_id}, {"applied": True}
        )

    def _remember(self, migration: Migration) -> None:
        for index, known in enumerate(self._history):
            if known.id == migration.id:
                self._history[index] = migration
                return
        self._history.append(migration)
