"""File-based Snapshot Storage implementation.

This adapter implements the SnapshotStorage protocol with one file per
store. Writes go to a temp file in the same directory and are moved over
the target with ``os.replace``, so a crash mid-write leaves either the
old or the new artifact, never a truncated one.

Thread Safety:
    Reads and writes on one instance are serialized by a lock. Separate
    instances (or processes) on the same path are not coordinated.
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path

from tablevault.infrastructure.config import get_config
from tablevault.infrastructure.logging import get_logger
from tablevault.ports.outbound.snapshot_storage import InvalidPathError

logger = get_logger(__name__)


class FileSnapshotStorage:
    """File-based implementation of the SnapshotStorage protocol.

    Attributes:
        path: Location of the store file.
        required_suffix: Suffix the path must end with to be writable.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        required_suffix: str | None = None,
        fsync: bool | None = None,
    ) -> None:
        """Initialize the storage.

        The suffix is only checked on write, so a store at a bad path can
        still be opened and read (it will look empty) and fails on the
        first save.

        Args:
            path: Store file path (default from config).
            required_suffix: Required file suffix (default from config).
            fsync: fsync before replacing (default from config).
        """
        storage_config = get_config().storage
        self._path = Path(path) if path else storage_config.default_path
        self._required_suffix = required_suffix or storage_config.required_suffix
        self._fsync = storage_config.fsync if fsync is None else fsync
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def required_suffix(self) -> str:
        return self._required_suffix

    def validate_path(self) -> None:
        """Check the path carries the required suffix.

        Raises:
            InvalidPathError: If it does not.
        """
        if not self._path.name.endswith(self._required_suffix):
            raise InvalidPathError(self._path, self._required_suffix)

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> bytes | None:
        """Read the store file, or None if there is none yet."""
        with self._lock:
            try:
                return self._path.read_bytes()
            except FileNotFoundError:
                return None

    def write(self, data: bytes) -> None:
        """Atomically replace the store file with ``data``.

        Raises:
            InvalidPathError: If the path lacks the required suffix.
            OSError: If the write fails.
        """
        self.validate_path()
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)

        with self._lock:
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as tmp:
                    tmp.write(data)
                    tmp.flush()
                    if self._fsync:
                        os.fsync(tmp.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass
                raise

        logger.debug("snapshot_written", path=str(self._path), size=len(data))
