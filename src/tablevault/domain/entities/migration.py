"""Migration entity.

A migration is an identity-keyed, at-most-once transformation. Its
bookkeeping lives as ordinary rows in the reserved ``migrations`` table,
so the conversions here are the only place that knows the row layout.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Mapping

from tablevault.domain.value_objects import MigrationId, Record, is_truthy


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Migration:
    """Descriptor of a single migration.

    Attributes:
        id: Unique identity. Applying the same id twice is a no-op.
        description: Free-form text for humans.
        timestamp: Creation time in milliseconds since the epoch.
        applied: Whether the migration body has run to completion.
    """

    id: MigrationId
    description: str = ""
    timestamp: int = field(default_factory=_now_ms)
    applied: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Migration id must be a non-empty string, got {self.id!r}")

    def to_record(self) -> Record:
        """Row layout for the ``migrations`` table."""
        return {
            "id": self.id,
            "description": self.description,
            "timestamp": self.timestamp,
            "applied": self.applied,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Migration:
        """Build a migration from a stored row.

        Inserts normalise falsy values to null, so a pending migration is
        stored with ``applied`` null rather than false; both read as pending.
        """
        timestamp = record.get("timestamp")
        return cls(
            id=MigrationId(str(record["id"])),
            description=record.get("description") or "",
            timestamp=int(timestamp) if isinstance(timestamp, (int, float)) else 0,
            applied=is_truthy(record.get("applied")),
        )

    def mark_applied(self) -> Migration:
        """Return a copy with ``applied`` set."""
        return Migration(
            id=self.id,
            description=self.description,
            timestamp=self.timestamp,
            applied=True,
        )
