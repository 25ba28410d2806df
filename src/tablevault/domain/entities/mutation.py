"""Mutation request descriptors for the write queue.

Every write that goes through the queue is described by one of these
records. The queue only looks at ``kind`` for logging and metrics; the
store dispatches on the concrete type.

    Kind            | Effect
    ----------------|--------------------------------------------------
    INSERT          | Append one schema-normalised record
    UPDATE          | Overwrite schema columns on matching records
    DELETE          | Remove matching records
    DROP_ALL_DATA   | Clear every table's records, keep schemas
    RENAME_TABLE    | Move a table under a new name
    RENAME_COLUMN   | Rename a column in schema and records
    MIGRATION_APPLY | Run a migration body, then mark it applied
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from tablevault.domain.entities.migration import Migration
from tablevault.domain.value_objects import MigrationId, Predicate, Record


class MutationKind(str, Enum):
    """Kinds of queued write requests."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    DROP_ALL_DATA = "drop_all_data"
    RENAME_TABLE = "rename_table"
    RENAME_COLUMN = "rename_column"
    MIGRATION_APPLY = "migration_apply"


@dataclass(frozen=True)
class Mutation(ABC):
    """Base class for all queued write requests."""

    @property
    @abstractmethod
    def kind(self) -> MutationKind:
        """Return the kind of this mutation."""
        ...

    @property
    def target(self) -> str | None:
        """Table the mutation touches, if it touches exactly one."""
        return None


@dataclass(frozen=True)
class InsertMutation(Mutation):
    table: str
    record: Record = field(default_factory=dict)

    @property
    def kind(self) -> MutationKind:
        return MutationKind.INSERT

    @property
    def target(self) -> str | None:
        return self.table


@dataclass(frozen=True)
class UpdateMutation(Mutation):
    table: str
    query: Predicate = field(default_factory=dict)
    new_data: Record = field(default_factory=dict)

    @property
    def kind(self) -> MutationKind:
        return MutationKind.UPDATE

    @property
    def target(self) -> str | None:
        return self.table


@dataclass(frozen=True)
class DeleteMutation(Mutation):
    table: str
    query: Predicate = field(default_factory=dict)

    @property
    def kind(self) -> MutationKind:
        return MutationKind.DELETE

    @property
    def target(self) -> str | None:
        return self.table


@dataclass(frozen=True)
class DropAllDataMutation(Mutation):
    @property
    def kind(self) -> MutationKind:
        return MutationKind.DROP_ALL_DATA


@dataclass(frozen=True)
class RenameTableMutation(Mutation):
    table: str
    new_name: str

    @property
    def kind(self) -> MutationKind:
        return MutationKind.RENAME_TABLE

    @property
    def target(self) -> str | None:
        return self.table


@dataclass(frozen=True)
class RenameColumnMutation(Mutation):
    table: str
    column: str
    new_name: str

    @property
    def kind(self) -> MutationKind:
        return MutationKind.RENAME_COLUMN

    @property
    def target(self) -> str | None:
        return self.table


@dataclass(frozen=True)
class MigrationApplyMutation(Mutation):
    """Claim the migration row, run ``body``, then flip the row to applied.

    The migration and its body travel with the request, so the row is
    inserted and checked at the head of the queue, not when the request
    was submitted.
    """

    migration: Migration
    body: Callable[[], None] = field(compare=False, repr=False)

    @property
    def migration_id(self) -> MigrationId:
        return self.migration.id

    @property
    def kind(self) -> MutationKind:
        return MutationKind.MIGRATION_APPLY
