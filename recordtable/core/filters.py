"""Derive active-filter counts and removable chips from caller-owned values."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .model import FilterDefinition, FilterKind, format_boolean, is_empty_value

__all__ = [
    "FilterChip",
    "active_filters",
    "build_filter_chips",
    "count_active_filters",
    "filter_display_value",
    "is_active_filter_value",
    "remove_chip",
]


@dataclass(frozen=True)
class FilterChip:
    """Removable badge describing one active filter."""

    key: str
    display_label: str
    display_value: str


def is_active_filter_value(value: Any) -> bool:
    """Return ``True`` unless ``value`` is ``None`` or ``""``."""
    return not is_empty_value(value)


def active_filters(
    definitions: Iterable[FilterDefinition],
    values: Mapping[str, Any],
) -> list[FilterDefinition]:
    """Return definitions whose current value is active, in declaration order."""
    return [d for d in definitions if is_active_filter_value(values.get(d.key))]


def count_active_filters(
    definitions: Iterable[FilterDefinition],
    values: Mapping[str, Any],
) -> int:
    """Count active filters; keys without a definition are ignored."""
    return len(active_filters(definitions, values))


def filter_display_value(definition: FilterDefinition, value: Any) -> str:
    """Return the human-readable form of ``value`` for ``definition``.

    Single-select values map to their option label, falling back to the raw
    value when no option matches.
    """
    if definition.kind is FilterKind.SELECT:
        for option in definition.options:
            if option.value == value:
                return option.label
    if definition.kind is FilterKind.BOOLEAN and isinstance(value, bool):
        return format_boolean(value)
    return str(value)


def build_filter_chips(
    definitions: Iterable[FilterDefinition],
    values: Mapping[str, Any],
) -> list[FilterChip]:
    """Return one chip per active filter."""
    return [
        FilterChip(
            key=definition.key,
            display_label=definition.display_label,
            display_value=filter_display_value(definition, values[definition.key]),
        )
        for definition in active_filters(definitions, values)
    ]


def remove_chip(key: str, on_filter_change: Callable[[str, Any], None]) -> None:
    """Emit the same request as clearing the underlying control."""
    on_filter_change(key, "")
