"""Core identifiers and the scalar value domain for the table store.

Table and column names are plain strings at runtime; the NewType wrappers
only exist so signatures say which kind of name they expect.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, NewType, Union


TableName = NewType("TableName", str)
"""Unique name of a table inside a store."""

ColumnName = NewType("ColumnName", str)
"""Name of a column inside a table schema."""

MigrationId = NewType("MigrationId", str)
"""Identity of a migration. A given id is applied at most once."""

Value = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]
"""Scalar domain of record values: anything JSON can represent."""

Record = Dict[str, Any]
"""A row: column name -> Value."""

Predicate = Dict[str, Any]
"""Equality filter: column name -> expected Value."""


# Reserved table holding one row per migration
MIGRATIONS_TABLE = TableName("migrations")
MIGRATIONS_COLUMNS: tuple[str, ...] = ("id", "description", "timestamp", "applied")


def is_truthy(value: Any) -> bool:
    """Return whether ``value`` counts as present when normalising an insert.

    Follows JavaScript truthiness so that stores written by CryptoJS-based
    clients read back the same way: ``None``, ``False``, zero, ``NaN``
    and the empty string are falsy, while empty lists and dicts are kept.

    Example:
        >>> is_truthy([])
        True
        >>> is_truthy(0)
        False
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def values_equal(left: Any, right: Any) -> bool:
    """Strict equality over the scalar domain.

    Booleans never equal numbers (``True != 1``); ints and floats share a
    single number type; lists and dicts compare structurally.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            values_equal(left[k], right[k]) for k in left
        )
    return left == right
