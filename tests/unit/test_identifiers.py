"""Unit tests for domain value objects - identifiers and scalar helpers."""

from __future__ import annotations

import math

import pytest

from tablevault.domain.value_objects import (
    MIGRATIONS_COLUMNS,
    MIGRATIONS_TABLE,
    ColumnName,
    TableName,
    is_truthy,
    values_equal,
)


@pytest.mark.unit
class TestNames:
    """Tests for name wrappers and reserved names."""

    def test_names_are_plain_strings(self) -> None:
        """TableName and ColumnName are str at runtime."""
        assert TableName("users") == "users"
        assert isinstance(ColumnName("email"), str)

    def test_reserved_migrations_schema(self) -> None:
        """The migrations table has a fixed name and column order."""
        assert MIGRATIONS_TABLE == "migrations"
        assert MIGRATIONS_COLUMNS == ("id", "description", "timestamp", "applied")


@pytest.mark.unit
class TestIsTruthy:
    """Tests for insert presence rules."""

    @pytest.mark.parametrize("value", [None, False, 0, 0.0, "", math.nan])
    def test_falsy_values(self, value: object) -> None:
        """Null, false, zero, NaN and empty string are absent."""
        assert is_truthy(value) is False

    @pytest.mark.parametrize("value", ["x", 1, -1, 0.5, True, [], {}, [0], {"a": None}])
    def test_truthy_values(self, value: object) -> None:
        """Empty containers count as present."""
        assert is_truthy(value) is True


@pytest.mark.unit
class TestValuesEqual:
    """Tests for strict scalar equality."""

    def test_equal_strings(self) -> None:
        assert values_equal("John", "John")
        assert not values_equal("John", "john")

    def test_bool_never_equals_number(self) -> None:
        """True/1 and False/0 are distinct."""
        assert not values_equal(True, 1)
        assert not values_equal(0, False)
        assert values_equal(True, True)

    def test_int_and_float_share_number_type(self) -> None:
        assert values_equal(1, 1.0)

    def test_none_only_equals_none(self) -> None:
        assert values_equal(None, None)
        assert not values_equal(None, "")
        assert not values_equal(None, 0)

    def test_string_never_equals_number(self) -> None:
        assert not values_equal("1", 1)

    def test_nested_structures_compare_structurally(self) -> None:
        assert values_equal({"a": [1, 2]}, {"a": [1, 2]})
        assert not values_equal({"a": [1, 2]}, {"a": [2, 1]})
        assert not values_equal([True], [1])
        assert not values_equal({"a": 1}, {"a": 1, "b": 2})
