"""Inbound ports - API contracts for the table store.

Inbound ports define the interface callers use to interact with
a store, together with the errors it raises.
"""

from tablevault.ports.inbound.table_store import (
    ColumnAlreadyExistsError,
    ColumnNotFoundError,
    MigrationsNotEnabledError,
    TableAlreadyExistsError,
    TableNotFoundError,
    TableStore,
    TableStoreError,
)

__all__ = [
    "TableStore",
    "TableStoreError",
    "TableAlreadyExistsError",
    "TableNotFoundError",
    "ColumnAlreadyExistsError",
    "ColumnNotFoundError",
    "MigrationsNotEnabledError",
]
