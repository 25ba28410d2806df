"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (TableStore)
- Outbound ports: Dependencies on external systems (SnapshotCodec, SnapshotStorage)

Adapters implement these ports with concrete functionality.
"""

from tablevault.ports.inbound import (
    ColumnAlreadyExistsError,
    ColumnNotFoundError,
    MigrationsNotEnabledError,
    TableAlreadyExistsError,
    TableNotFoundError,
    TableStore,
    TableStoreError,
)
from tablevault.ports.outbound import (
    DecryptionError,
    DecryptionFailure,
    InvalidPathError,
    SnapshotCodec,
    SnapshotStorage,
)

__all__ = [
    # Inbound ports
    "TableStore",
    "TableStoreError",
    "TableAlreadyExistsError",
    "TableNotFoundError",
    "ColumnAlreadyExistsError",
    "ColumnNotFoundError",
    "MigrationsNotEnabledError",
    # Outbound ports
    "SnapshotCodec",
    "DecryptionError",
    "DecryptionFailure",
    "SnapshotStorage",
    "InvalidPathError",
]
