"""Unit tests for the file snapshot storage."""

from __future__ import annotations

from pathlib import Path

import pytest

from tablevault.adapters.outbound import FileSnapshotStorage
from tablevault.ports import InvalidPathError


@pytest.mark.unit
class TestFileSnapshotStorage:
    """Tests for FileSnapshotStorage."""

    def test_read_missing_file(self, temp_dir: Path) -> None:
        storage = FileSnapshotStorage(temp_dir / "none.ht", fsync=False)

        assert storage.exists() is False
        assert storage.read() is None

    def test_write_then_read(self, temp_dir: Path) -> None:
        storage = FileSnapshotStorage(temp_dir / "db.ht", fsync=False)
        storage.write(b"payload")

        assert storage.exists() is True
        assert storage.read() == b"payload"

    def test_write_replaces_content(self, temp_dir: Path) -> None:
        storage = FileSnapshotStorage(temp_dir / "db.ht", fsync=True)
        storage.write(b"first, longer payload")
        storage.write(b"second")

        assert storage.read() == b"second"

    def test_write_leaves_no_temp_files(self, temp_dir: Path) -> None:
        storage = FileSnapshotStorage(temp_dir / "db.ht", fsync=False)
        storage.write(b"a")
        storage.write(b"b")

        assert sorted(p.name for p in temp_dir.iterdir()) == ["db.ht"]

    def test_write_creates_parent_directories(self, temp_dir: Path) -> None:
        path = temp_dir / "nested" / "dir" / "db.ht"
        FileSnapshotStorage(path, fsync=False).write(b"x")

        assert path.read_bytes() == b"x"

    def test_write_requires_suffix(self, temp_dir: Path) -> None:
        storage = FileSnapshotStorage(temp_dir / "db.json", fsync=False)

        with pytest.raises(InvalidPathError, match="must end with '.ht'"):
            storage.write(b"x")
        assert not (temp_dir / "db.json").exists()

    def test_invalid_path_is_value_error(self, temp_dir: Path) -> None:
        storage = FileSnapshotStorage(temp_dir / "db", fsync=False)
        with pytest.raises(ValueError):
            storage.write(b"x")

    def test_read_allowed_without_suffix(self, temp_dir: Path) -> None:
        """Only writes check the suffix."""
        path = temp_dir / "legacy.bin"
        path.write_bytes(b"old")

        assert FileSnapshotStorage(path, fsync=False).read() == b"old"

    def test_custom_suffix(self, temp_dir: Path) -> None:
        storage = FileSnapshotStorage(temp_dir / "db.vault", required_suffix=".vault", fsync=False)
        storage.write(b"x")

        assert storage.required_suffix == ".vault"
        assert storage.read() == b"x"

