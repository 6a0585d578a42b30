"""Header checkbox tri-state and caller-side selection updates."""

from __future__ import annotations

from collections.abc import Container, Hashable, Iterable
from dataclasses import dataclass

__all__ = [
    "SelectAllState",
    "apply_row_selection",
    "apply_select_all",
    "is_row_selected",
    "select_all_state",
]


@dataclass(frozen=True)
class SelectAllState:
    """State of the "select all" checkbox for the visible page."""

    checked: bool = False
    indeterminate: bool = False


def is_row_selected(row_id: Hashable, selected: Container[Hashable]) -> bool:
    return row_id in selected


def select_all_state(
    visible_ids: Iterable[Hashable],
    selected: Container[Hashable],
) -> SelectAllState:
    """Intersect the visible row IDs with ``selected``.

    All of a non-empty page selected is ``checked``; some but not all is
    ``indeterminate``; none (or an empty page) is neither.
    """
    ids = list(visible_ids)
    hits = sum(1 for row_id in ids if row_id in selected)
    if ids and hits == len(ids):
        return SelectAllState(checked=True)
    if hits:
        return SelectAllState(indeterminate=True)
    return SelectAllState()


def apply_row_selection(
    selected: Iterable[Hashable], row_id: Hashable, checked: bool
) -> frozenset[Hashable]:
    """Return ``selected`` with ``row_id`` added or removed."""
    current = set(selected)
    if checked:
        current.add(row_id)
    else:
        current.discard(row_id)
    return frozenset(current)


def apply_select_all(
    selected: Iterable[Hashable], row_ids: Iterable[Hashable], checked: bool
) -> frozenset[Hashable]:
    """Return ``selected`` with every ID in ``row_ids`` added or removed."""
    current = set(selected)
    ids = set(row_ids)
    if checked:
        current |= ids
    else:
        current -= ids
    return frozenset(current)
