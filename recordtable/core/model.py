"""Declarative building blocks shared by every list screen."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from ..i18n import _

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
DEFAULT_PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 20, 50, 100)

# Rendered in place of empty cells so "empty" differs from "not yet loaded".
NO_VALUE = "—"

RowId = Hashable
CellValue = Any


class FilterKind(str, Enum):
    """Enumerate supported filter controls."""

    SEARCH = "search"
    SELECT = "select"
    BOOLEAN = "boolean"


class SortDirection(str, Enum):
    """Enumerate sort directions."""

    ASC = "asc"
    DESC = "desc"

    @property
    def ascending(self) -> bool:
        return self is SortDirection.ASC


class PaginationMode(str, Enum):
    """Enumerate where page slicing happens."""

    CLIENT = "client"
    SERVER = "server"


class SelectAllScope(str, Enum):
    """Enumerate which rows a "select all" request applies to."""

    PAGE = "page"
    FILTERED = "filtered"


@dataclass(frozen=True)
class Column(Generic[T]):
    """Describe one table column.

    Cell content is resolved from ``render`` first, then ``accessor``, then
    the row field named ``key``.
    """

    key: str
    header: str
    accessor: Callable[[T], Any] | None = None
    render: Callable[[T], Any] | None = None
    sortable: bool = True
    width: str | None = None
    min_width: str | None = None
    sticky: bool = False


@dataclass(frozen=True)
class FilterOption:
    """Selectable value of a single-select filter."""

    value: str
    label: str


@dataclass(frozen=True)
class FilterDefinition:
    """Describe a filter control; current values live with the caller."""

    key: str
    kind: FilterKind = FilterKind.SEARCH
    label: str | None = None
    options: Sequence[FilterOption] = ()
    placeholder: str | None = None
    field: str | None = None

    @property
    def display_label(self) -> str:
        return self.label or self.key

    @property
    def target_field(self) -> str:
        """Row field matched by client-side data sources."""
        return self.field or self.key


@dataclass(frozen=True)
class SortState:
    """Active sort field and direction."""

    field: str
    direction: SortDirection = SortDirection.ASC

    def toggled(self, field: str) -> SortState:
        """Return the state that follows a request to sort by ``field``."""
        if field == self.field:
            flipped = (
                SortDirection.DESC
                if self.direction is SortDirection.ASC
                else SortDirection.ASC
            )
            return SortState(field, flipped)
        return SortState(field, SortDirection.ASC)


@dataclass(frozen=True)
class SortConfig:
    """Sort state handed to the controller together with its change request."""

    field: str
    direction: SortDirection
    on_sort: Callable[[str], None]

    @classmethod
    def from_state(
        cls, state: SortState, on_sort: Callable[[str], None]
    ) -> SortConfig:
        return cls(state.field, state.direction, on_sort)


@dataclass(frozen=True)
class PaginationConfig:
    """Pagination inputs; ``total``/``total_pages`` are only read in server mode."""

    page: int
    page_size: int
    on_page_change: Callable[[int], None]
    mode: PaginationMode = PaginationMode.CLIENT
    total: int | None = None
    total_pages: int | None = None
    on_page_size_change: Callable[[int], None] | None = None
    page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS


@dataclass(frozen=True)
class ActionDescriptor(Generic[T]):
    """Per-row action button, evaluated for each row at render time."""

    icon: Any
    label: str
    on_click: Callable[[T], None]
    color_hint: str = "blue"
    is_disabled: Callable[[T], bool] | None = None
    is_visible: Callable[[T], bool] | None = None

    def visible_for(self, row: T) -> bool:
        return self.is_visible is None or bool(self.is_visible(row))

    def disabled_for(self, row: T) -> bool:
        return self.is_disabled is not None and bool(self.is_disabled(row))


@dataclass(frozen=True)
class CSVExportSpec(Generic[T]):
    """Describe how rows become CSV records."""

    filename: str
    headers: Sequence[str]
    get_row_data: Callable[[T], Sequence[CellValue]]
    enabled: bool = True
    on_export: Callable[[], None] | None = None


def is_empty_value(value: Any) -> bool:
    """Return ``True`` for ``None`` and the empty string."""
    return value is None or (isinstance(value, str) and value == "")


def read_field(row: Any, key: str) -> Any:
    """Return ``row[key]`` for mappings, the attribute ``key`` otherwise."""
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def format_boolean(value: bool | None) -> str:
    """Render ``value`` as "Yes" or "No"; ``None`` counts as "No"."""
    return _("Yes") if value else _("No")


def format_empty_value(value: Any, placeholder: str = NO_VALUE) -> str:
    """Return ``placeholder`` for empty values and ``str(value)`` otherwise."""
    if is_empty_value(value):
        return placeholder
    return str(value)


__all__ = [
    "ActionDescriptor",
    "CSVExportSpec",
    "CellValue",
    "Column",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE_OPTIONS",
    "FilterDefinition",
    "FilterKind",
    "FilterOption",
    "NO_VALUE",
    "PaginationConfig",
    "PaginationMode",
    "RowId",
    "SelectAllScope",
    "SortConfig",
    "SortDirection",
    "SortState",
    "format_boolean",
    "format_empty_value",
    "is_empty_value",
    "read_field",
]
