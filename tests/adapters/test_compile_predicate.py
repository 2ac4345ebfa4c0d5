"""Tests for compiling predicate trees to SQL."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from bujo_cli.adapters.sqlite.task_repository import compile_predicate
from bujo_cli.models.query import (
    AtMost,
    Equals,
    HasTag,
    InRange,
    IsNull,
    NotEquals,
    Predicate,
    all_of,
    any_of,
)

_START = datetime(2024, 4, 20, tzinfo=UTC)
_END = datetime(2024, 4, 20, 23, 59, 59, 999999, tzinfo=UTC)


def test_equals():
    assert compile_predicate(Equals("owner_id", "u1")) == ("t.owner_id = ?", ["u1"])


def test_not_equals_keeps_nulls():
    sql, params = compile_predicate(NotEquals("priority", 1))
    assert sql == "(t.priority IS NULL OR t.priority != ?)"
    assert params == [1]


def test_null_check():
    assert compile_predicate(IsNull("due_date")) == ("t.due_date IS NULL", [])


def test_datetimes_bound_as_fixed_width_strings():
    sql, params = compile_predicate(InRange("due_date", _START, _END))
    assert sql == "t.due_date BETWEEN ? AND ?"
    assert params == [
        "2024-04-20T00:00:00.000000+00:00",
        "2024-04-20T23:59:59.999999+00:00",
    ]


def test_at_most():
    sql, params = compile_predicate(AtMost("created_at", _END))
    assert sql == "t.created_at <= ?"
    assert params == ["2024-04-20T23:59:59.999999+00:00"]


def test_tag_uses_subquery():
    sql, params = compile_predicate(HasTag("work"))
    assert "EXISTS" in sql
    assert params == ["work"]


def test_nested_combinators_keep_parameter_order():
    sql, params = compile_predicate(
        all_of(Equals("owner_id", "u1"), any_of(Equals("status", "pending"), IsNull("due_date")))
    )
    assert sql == "(t.owner_id = ?) AND ((t.status = ?) OR (t.due_date IS NULL))"
    assert params == ["u1", "pending"]


def test_empty_combinators():
    assert compile_predicate(all_of()) == ("1 = 1", [])
    assert compile_predicate(any_of()) == ("1 = 0", [])


def test_unknown_predicate():
    with pytest.raises(TypeError):
        compile_predicate(Predicate())
