"""Snapshot Storage port for durable artifact I/O.

This outbound port defines the contract for reading and writing the one
file that holds a store. It has no knowledge of the blob's contents.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol

from tablevault.ports.inbound.table_store import TableStoreError


class SnapshotStorage(Protocol):
    """Protocol for storing a single snapshot blob.

    Thread Safety:
        Writes from one instance are serialized by the caller. There is no
        locking across instances or processes sharing a path.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Location of the artifact."""
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Return whether the artifact is present."""
        ...

    @abstractmethod
    def read(self) -> bytes | None:
        """Read the artifact.

        Returns:
            Its bytes, or None if it does not exist.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        ...

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Replace the artifact atomically.

        Raises:
            InvalidPathError: If the path lacks the required suffix.
            OSError: If the write fails.
        """
        ...


class InvalidPathError(TableStoreError, ValueError):
    """Raised when saving to a path without the required suffix."""

    def __init__(self, path: Path | str, suffix: str) -> None:
        super().__init__(f"File path must end with '{suffix}': {path}")
        self.path = Path(path)
        self.suffix = suffix
