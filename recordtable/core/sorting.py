"""Sort state transitions and a natural-order sort for client data sources."""

from __future__ import annotations

from collections.abc import Callable, Iterable
import re
from typing import Any, TypeVar

from .model import SortDirection, SortState, is_empty_value

T = TypeVar("T")

__all__ = ["natural_sort_key", "request_sort", "sort_rows"]

_NUMERIC_SPLIT = re.compile(r"(\d+)")


def request_sort(current: SortState | None, field: str) -> SortState:
    """Return the sort state following a request to sort by ``field``.

    Re-selecting the active field flips the direction; any other field starts
    ascending.
    """
    if current is None:
        return SortState(field, SortDirection.ASC)
    return current.toggled(field)


def natural_sort_key(value: Any) -> tuple:
    """Return a key ordering numbers numerically and text case-insensitively."""
    if isinstance(value, bool):
        return (0, ((0, int(value)),))
    if isinstance(value, (int, float)):
        return (0, ((0, value),))
    text = str(value).strip()
    parts: list[tuple[int, object]] = []
    for part in _NUMERIC_SPLIT.split(text):
        if not part:
            continue
        if part.isdecimal():
            parts.append((0, int(part)))
        else:
            parts.append((1, part.casefold()))
    return (0, tuple(parts))


def sort_rows(
    rows: Iterable[T],
    key: Callable[[T], Any],
    direction: SortDirection = SortDirection.ASC,
) -> list[T]:
    """Sort ``rows`` by ``key`` keeping empty values last in both directions."""
    prepared = list(rows)
    filled = [row for row in prepared if not is_empty_value(key(row))]
    empty = [row for row in prepared if is_empty_value(key(row))]
    filled.sort(
        key=lambda row: natural_sort_key(key(row)),
        reverse=not direction.ascending,
    )
    return filled + empty
