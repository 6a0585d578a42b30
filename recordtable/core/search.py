"""In-memory filtering for callers that hold the whole collection."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from .filters import is_active_filter_value
from .model import Column, FilterDefinition, FilterKind, read_field

T = TypeVar("T")

Predicate = Callable[[Any, Any], bool]

_FALSE_WORDS = frozenset({"", "0", "false", "no", "n", "off"})

__all__ = ["column_text", "filter_rows", "matches_filter"]


def column_text(row: Any, column: Column) -> str:
    """Return the searchable text of ``row`` for ``column``.

    Only accessor and field values are searched; ``render`` output is
    presentation and is skipped.
    """
    if column.accessor is not None:
        value = column.accessor(row)
    else:
        value = read_field(row, column.key)
    return "" if value is None else str(value)


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().casefold() not in _FALSE_WORDS
    return bool(value)


def matches_filter(
    row: Any,
    definition: FilterDefinition,
    value: Any,
    columns: Sequence[Column],
) -> bool:
    """Return ``True`` when ``row`` satisfies ``definition`` set to ``value``.

    Free-text search is a case-insensitive substring match over all columns;
    single-select compares string forms; boolean compares truthiness with
    strings such as ``"false"`` or ``"0"`` read as false.
    """
    if definition.kind is FilterKind.SEARCH:
        needle = str(value).casefold()
        return any(needle in column_text(row, column).casefold() for column in columns)
    field_value = read_field(row, definition.target_field)
    if definition.kind is FilterKind.BOOLEAN:
        return _truthy(field_value) == _truthy(value)
    if field_value is None:
        return False
    return str(field_value) == str(value)


def filter_rows(
    rows: Iterable[T],
    definitions: Iterable[FilterDefinition],
    values: Mapping[str, Any],
    columns: Sequence[Column],
    predicates: Mapping[str, Predicate] | None = None,
) -> list[T]:
    """Keep rows matching every active filter.

    ``predicates`` maps filter keys to ``(row, value) -> bool`` overrides.
    """
    overrides = predicates or {}
    active = [d for d in definitions if is_active_filter_value(values.get(d.key))]
    result = list(rows)
    for definition in active:
        value = values[definition.key]
        predicate = overrides.get(definition.key)
        if predicate is not None:
            result = [row for row in result if predicate(row, value)]
        else:
            result = [
                row for row in result if matches_filter(row, definition, value, columns)
            ]
    return result
