"""State store for one list screen feeding :class:`TableController`."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from ..core.model import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PAGE_SIZE_OPTIONS,
    Column,
    FilterDefinition,
    PaginationConfig,
    PaginationMode,
    SelectAllScope,
    SortConfig,
    SortDirection,
    SortState,
    read_field,
)
from ..core.filters import count_active_filters
from ..core.pagination import visible_rows
from ..core.search import Predicate, filter_rows
from ..core.selection import apply_row_selection, apply_select_all
from ..core.sorting import request_sort, sort_rows
from .table_controller import TableController

T = TypeVar("T")


class ListScreenState(Generic[T]):
    """Hold rows plus filter, sort, page and selection state for a screen.

    The callbacks mirror what a screen does when the controller emits a
    change request: filter and page-size changes go back to page 1, sort
    requests follow :func:`request_sort`, and "select all" applies to the
    visible page or the whole filtered set depending on ``select_all_scope``.
    """

    def __init__(
        self,
        *,
        columns: Sequence[Column[T]],
        get_row_id: Callable[[T], Hashable],
        filters: Sequence[FilterDefinition] = (),
        predicates: Mapping[str, Predicate] | None = None,
        sort_keys: Mapping[str, Callable[[T], Any]] | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
        select_all_scope: SelectAllScope = SelectAllScope.PAGE,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page size must be positive, got {page_size}")
        self.columns = list(columns)
        self.get_row_id = get_row_id
        self.filters = list(filters)
        self.predicates = dict(predicates or {})
        self.sort_keys = dict(sort_keys or {})
        self.page_size_options = tuple(page_size_options)
        self.select_all_scope = select_all_scope
        self._all: list[T] = []
        self.filter_values: dict[str, Any] = {}
        self.sort_state: SortState | None = None
        self.page = 1
        self.page_size = page_size
        self.selected_ids: frozenset[Hashable] = frozenset()

    # data ------------------------------------------------------------
    def set_rows(self, rows: Sequence[T]) -> None:
        """Replace all rows, dropping selections that no longer exist."""
        self._all = list(rows)
        known = {self.get_row_id(row) for row in self._all}
        self.selected_ids = frozenset(i for i in self.selected_ids if i in known)

    def get_all(self) -> list[T]:
        return list(self._all)

    def get_visible(self) -> list[T]:
        """Return filtered and sorted rows (every page)."""
        rows = filter_rows(
            self._all, self.filters, self.filter_values, self.columns, self.predicates
        )
        if self.sort_state is None:
            return rows
        key = self._sort_key(self.sort_state.field)
        return sort_rows(rows, key, self.sort_state.direction)

    def get_page(self) -> list[T]:
        return visible_rows(self.get_visible(), self._pagination())

    def _sort_key(self, field: str) -> Callable[[T], Any]:
        custom = self.sort_keys.get(field)
        if custom is not None:
            return custom
        column = next((c for c in self.columns if c.key == field), None)
        if column is not None and column.accessor is not None:
            return column.accessor
        return lambda row: read_field(row, field)

    # callbacks -------------------------------------------------------
    def on_filter_change(self, key: str, value: Any) -> None:
        self.filter_values[key] = value
        self.page = 1

    def on_clear_filters(self) -> None:
        self.filter_values = {}
        self.page = 1

    def on_sort(self, field: str) -> None:
        self.sort_state = request_sort(self.sort_state, field)

    def on_page_change(self, page: int) -> None:
        self.page = page

    def on_page_size_change(self, size: int) -> None:
        if size <= 0:
            raise ValueError(f"page size must be positive, got {size}")
        self.page_size = size
        self.page = 1

    def on_select_row(self, row_id: Hashable, checked: bool) -> None:
        self.selected_ids = apply_row_selection(self.selected_ids, row_id, checked)

    def on_select_all(self, checked: bool) -> None:
        scope_rows = (
            self.get_page()
            if self.select_all_scope is SelectAllScope.PAGE
            else self.get_visible()
        )
        ids = [self.get_row_id(row) for row in scope_rows]
        self.selected_ids = apply_select_all(self.selected_ids, ids, checked)

    # controller ------------------------------------------------------
    def _pagination(self) -> PaginationConfig:
        return PaginationConfig(
            page=self.page,
            page_size=self.page_size,
            on_page_change=self.on_page_change,
            mode=PaginationMode.CLIENT,
            on_page_size_change=self.on_page_size_change,
            page_size_options=self.page_size_options,
        )

    def controller(self, **extra: Any) -> TableController[T]:
        """Build a controller for the current state.

        ``extra`` carries the remaining presentation inputs (title, actions,
        CSV export, row click, ...).
        """
        filtered = self.get_visible()
        total_without_filters = None
        if count_active_filters(self.filters, self.filter_values):
            total_without_filters = len(self._all)
        sort = (
            SortConfig.from_state(self.sort_state, self.on_sort)
            if self.sort_state is not None
            else SortConfig("", SortDirection.ASC, self.on_sort)
        )
        options: dict[str, Any] = {
            "rows": filtered,
            "columns": self.columns,
            "get_row_id": self.get_row_id,
            "filters": self.filters,
            "filter_values": dict(self.filter_values),
            "on_filter_change": self.on_filter_change,
            "on_clear_filters": self.on_clear_filters,
            "sort": sort,
            "enable_selection": True,
            "selected_ids": self.selected_ids,
            "on_select_all": self.on_select_all,
            "on_select_row": self.on_select_row,
            "pagination": self._pagination(),
            "total_without_filters": total_without_filters,
        }
        options.update(extra)
        return TableController(**options)
