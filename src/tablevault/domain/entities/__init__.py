"""Domain entities for the table store.

Exports:
    Tables:
        - Table: Ordered column schema plus ordered records
        - StoreState: All tables of one store (the single owned aggregate)

    Migrations:
        - Migration: Identity-keyed migration descriptor

    Mutations:
        - Mutation: Base class for queued write requests
        - MutationKind: Enumeration of request kinds
        - InsertMutation, UpdateMutation, DeleteMutation: Record writes
        - DropAllDataMutation: Clear all records
        - RenameTableMutation, RenameColumnMutation: Schema renames
        - MigrationApplyMutation: Run a migration body
"""

from tablevault.domain.entities.migration import Migration
from tablevault.domain.entities.mutation import (
    DeleteMutation,
    DropAllDataMutation,
    InsertMutation,
    MigrationApplyMutation,
    Mutation,
    MutationKind,
    RenameColumnMutation,
    RenameTableMutation,
    UpdateMutation,
)
from tablevault.domain.entities.table import StoreState, Table

__all__ = [
    # Tables
    "Table",
    "StoreState",
    # Migrations
    "Migration",
    # Mutations
    "Mutation",
    "MutationKind",
    "InsertMutation",
    "UpdateMutation",
    "DeleteMutation",
    "DropAllDataMutation",
    "RenameTableMutation",
    "RenameColumnMutation",
    "MigrationApplyMutation",
]
