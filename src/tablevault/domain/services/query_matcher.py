"""Equality predicate matching.

A predicate maps column names to expected values. A record matches when
it holds every named column and each stored value compares equal under
``values_equal``. A column the record lacks never matches, not even
against None. The empty predicate matches everything.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from tablevault.domain.value_objects import Predicate, Record, values_equal


def matches(record: Mapping[str, object], predicate: Predicate | None) -> bool:
    """Return whether ``record`` satisfies every pair of ``predicate``.

    Example:
        >>> matches({"name": "John", "age": 3}, {"name": "John"})
        True
        >>> matches({"flag": 1}, {"flag": True})
        False
    """
    if not predicate:
        return True
    return all(
        column in record and values_equal(record[column], expected)
        for column, expected in predicate.items()
    )


def filter_records(records: Iterable[Record], predicate: Predicate | None) -> list[Record]:
    """Return matching records, preserving order."""
    return [record for record in records if matches(record, predicate)]


def reject_records(records: Iterable[Record], predicate: Predicate | None) -> list[Record]:
    """Return non-matching records, preserving order."""
    return [record for record in records if not matches(record, predicate)]
