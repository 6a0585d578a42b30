"""Tests for active filter counting and chips."""

import pytest

from recordtable.core.filters import (
    build_filter_chips,
    count_active_filters,
    is_active_filter_value,
    remove_chip,
)
from recordtable.core.model import (
    FilterDefinition,
    FilterKind,
    FilterOption,
    format_empty_value,
)

pytestmark = pytest.mark.unit

DEFINITIONS = [
    FilterDefinition("q", FilterKind.SEARCH, label="Search"),
    FilterDefinition(
        "status",
        FilterKind.SELECT,
        label="Status",
        options=[FilterOption("open", "Open"), FilterOption("done", "Done")],
    ),
    FilterDefinition("archived", FilterKind.BOOLEAN),
]


def test_empty_values_are_inactive():
    assert not is_active_filter_value(None)
    assert not is_active_filter_value("")
    assert is_active_filter_value(False)
    assert is_active_filter_value(0)


def test_count_ignores_empty_and_undefined_keys():
    values = {"q": "", "status": "open", "archived": False, "owner": "ann"}
    assert count_active_filters(DEFINITIONS, values) == 2
    assert count_active_filters(DEFINITIONS, {}) == 0


def test_chips_use_option_labels_and_fall_back_to_raw_value():
    chips = build_filter_chips(DEFINITIONS, {"q": "report", "status": "open"})
    assert [(c.key, c.display_label, c.display_value) for c in chips] == [
        ("q", "Search", "report"),
        ("status", "Status", "Open"),
    ]

    chips = build_filter_chips(DEFINITIONS, {"status": "blocked"})
    assert chips[0].display_value == "blocked"


def test_boolean_chip_shows_yes_no_and_key_as_label():
    (chip,) = build_filter_chips(DEFINITIONS, {"archived": True})
    assert chip.display_label == "archived"
    assert chip.display_value == "Yes"
    (chip,) = build_filter_chips(DEFINITIONS, {"archived": False})
    assert chip.display_value == "No"


def test_remove_chip_requests_empty_value():
    calls = []
    remove_chip("status", lambda key, value: calls.append((key, value)))
    assert calls == [("status", "")]


def test_clearing_one_key_drops_exactly_its_chip():
    values = {"q": "report", "status": "open", "archived": True}
    assert count_active_filters(DEFINITIONS, values) == 3
    assert [c.key for c in build_filter_chips(DEFINITIONS, values)] == [
        "q",
        "status",
        "archived",
    ]

    values["status"] = ""

    assert count_active_filters(DEFINITIONS, values) == 2
    assert [c.key for c in build_filter_chips(DEFINITIONS, values)] == ["q", "archived"]


def test_format_empty_value():
    assert format_empty_value(None) == "—"
    assert format_empty_value("", "n/a") == "n/a"
    assert format_empty_value(0) == "0"
