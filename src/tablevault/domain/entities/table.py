"""Table and store-state entities.

The whole store is a single aggregate, ``StoreState``, holding every table
by name. It is rebuilt from the decrypted snapshot on each reload and
handed to the table operations by reference; nothing else keeps a copy.

Snapshot JSON layout (shared with CryptoJS-based clients)::

    {
        "users": {
            "columns": ["name", "email"],
            "records": [{"name": "John", "email": "j@x.com"}]
        }
    }
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from tablevault.domain.value_objects import Record


@dataclass
class Table:
    """A named table: ordered column schema plus ordered records.

    Invariant (after any insert): every record has a key for every column
    and no keys outside the schema.
    """

    columns: list[str] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.records)

    def has_column(self, column: str) -> bool:
        return column in self.columns

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot layout."""
        return {
            "columns": list(self.columns),
            "records": [dict(record) for record in self.records],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Table:
        """Deserialize from the snapshot layout.

        Raises:
            ValueError: If the payload does not have the table shape.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Table payload must be an object, got {type(data).__name__}")

        columns = data.get("columns", [])
        records = data.get("records", [])

        if not isinstance(columns, list) or not all(isinstance(c, str) for c in columns):
            raise ValueError("Table columns must be a list of strings")
        if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
            raise ValueError("Table records must be a list of objects")

        return cls(columns=list(columns), records=[dict(r) for r in records])

    def copy(self) -> Table:
        """Deep copy, so callers can't reach into the loaded state."""
        return Table(columns=list(self.columns), records=copy.deepcopy(self.records))


@dataclass
class StoreState:
    """All tables of one store, keyed by table name in creation order."""

    tables: dict[str, Table] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.tables

    def __iter__(self) -> Iterator[str]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    def get(self, name: str) -> Table | None:
        return self.tables.get(name)

    @property
    def table_names(self) -> list[str]:
        return list(self.tables)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot layout."""
        return {name: table.to_dict() for name, table in self.tables.items()}

    @classmethod
    def from_dict(cls, data: Any) -> StoreState:
        """Deserialize from the snapshot layout.

        Raises:
            ValueError: If the payload is not a mapping of table objects.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Store payload must be an object, got {type(data).__name__}")

        tables: dict[str, Table] = {}
        for name, table_data in data.items():
            tables[str(name)] = Table.from_dict(table_data)
        return cls(tables=tables)

    @classmethod
    def empty(cls) -> StoreState:
        return cls()
