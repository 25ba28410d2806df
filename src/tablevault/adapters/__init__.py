"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: Implement external dependencies (encryption, disk)
"""

from tablevault.adapters.outbound import (
    AesSnapshotCodec,
    FileSnapshotStorage,
)

__all__ = [
    # Outbound adapters
    "AesSnapshotCodec",
    "FileSnapshotStorage",
]
