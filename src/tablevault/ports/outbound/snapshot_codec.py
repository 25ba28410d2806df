"""Snapshot Codec port for turning store state into an opaque blob.

This outbound port defines the contract for encrypting the whole store
with a password and getting it back. Implementations own key derivation
and the on-disk framing.

The codec is responsible for:
- Serializing StoreState losslessly
- Encrypting with a fresh salt on every encode
- Rejecting corrupt or mismatched input on decode
"""

from __future__ import annotations

from abc import abstractmethod
from enum import Enum
from typing import Protocol

from tablevault.domain.entities import StoreState
from tablevault.ports.inbound.table_store import TableStoreError


class DecryptionFailure(str, Enum):
    """Stage of the decode chain that rejected the input."""

    FRAMING = "framing"  # not base64, or shorter than marker + salt
    MAGIC = "magic"  # marker mismatch
    CIPHER = "cipher"  # bad block length or padding (usually wrong password)
    ENCODING = "encoding"  # plaintext is not UTF-8
    PAYLOAD = "payload"  # not JSON, or not the snapshot layout


class SnapshotCodec(Protocol):
    """Protocol for password-based snapshot encryption.

    ``decode`` never raises: any failure yields an empty store. Callers
    that need to tell "empty" from "unreadable" use ``decode_strict``.
    """

    @abstractmethod
    def encode(self, state: StoreState, password: str) -> bytes:
        """Encrypt and frame a snapshot.

        Args:
            state: The store to serialize.
            password: Secret used to derive key and IV.

        Returns:
            Printable (base64) bytes ready to be written to disk.
        """
        ...

    @abstractmethod
    def decode_strict(self, blob: bytes, password: str) -> StoreState:
        """Unframe and decrypt a snapshot.

        Raises:
            DecryptionError: If any stage of the chain fails.
        """
        ...

    @abstractmethod
    def decode(self, blob: bytes, password: str) -> StoreState:
        """Like decode_strict, but returns an empty store on failure."""
        ...


class DecryptionError(TableStoreError):
    """Raised when a snapshot cannot be decoded.

    Attributes:
        reason: The stage of the decode chain that failed.
    """

    def __init__(self, reason: DecryptionFailure, message: str) -> None:
        super().__init__(f"Cannot decode snapshot ({reason.value}): {message}")
        self.reason = reason
