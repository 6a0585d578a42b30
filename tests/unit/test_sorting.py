"""Tests for sort transitions and natural ordering."""

import pytest

from recordtable.core.model import SortDirection, SortState
from recordtable.core.sorting import natural_sort_key, request_sort, sort_rows

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("current", "field", "expected"),
    [
        (None, "name", SortState("name", SortDirection.ASC)),
        (SortState("name"), "name", SortState("name", SortDirection.DESC)),
        (
            SortState("name", SortDirection.DESC),
            "name",
            SortState("name", SortDirection.ASC),
        ),
        (
            SortState("name", SortDirection.DESC),
            "email",
            SortState("email", SortDirection.ASC),
        ),
    ],
)
def test_request_sort_transitions(current, field, expected):
    assert request_sort(current, field) == expected


def test_natural_order_compares_digit_runs_numerically():
    values = ["item10", "item2", "Item1"]
    assert sort_rows(values, lambda v: v) == ["Item1", "item2", "item10"]
    assert natural_sort_key(3) < natural_sort_key(20)


def test_empty_values_stay_last_in_both_directions():
    rows = [{"n": 2}, {"n": None}, {"n": 1}, {"n": ""}]

    asc = sort_rows(rows, lambda r: r["n"])
    desc = sort_rows(rows, lambda r: r["n"], SortDirection.DESC)

    assert [r["n"] for r in asc] == [1, 2, None, ""]
    assert [r["n"] for r in desc] == [2, 1, None, ""]


def test_non_decimal_digit_characters_sort_as_text():
    values = ["x²", "x10", "x2", "①"]
    assert sort_rows(values, lambda v: v) == ["x2", "x10", "x²", "①"]
