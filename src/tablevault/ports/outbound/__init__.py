"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for what the store depends on:
encrypting snapshots and keeping them on disk.
"""

from tablevault.ports.outbound.snapshot_codec import (
    DecryptionError,
    DecryptionFailure,
    SnapshotCodec,
)
from tablevault.ports.outbound.snapshot_storage import InvalidPathError, SnapshotStorage

__all__ = [
    "SnapshotCodec",
    "DecryptionError",
    "DecryptionFailure",
    "SnapshotStorage",
    "InvalidPathError",
]
