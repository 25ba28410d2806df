"""Outbound adapters - implementations of outbound ports.

These adapters implement the store's external dependencies:
snapshot encryption and the durable store file.
"""

from tablevault.adapters.outbound.aes_snapshot_codec import AesSnapshotCodec, derive_key_and_iv
from tablevault.adapters.outbound.file_snapshot_storage import FileSnapshotStorage

__all__ = [
    "AesSnapshotCodec",
    "FileSnapshotStorage",
    "derive_key_and_iv",
]
