"""Generic table controller shared by every record list screen.

The controller owns no state. A screen passes its rows, column and filter
definitions, and its current filter/sort/page/selection state on each
render, and receives change requests through the callbacks it supplied.
:meth:`TableController.render` derives a :class:`TableView` that a
front-end draws; the ``click_*``/``toggle_*``/``go_to_*`` methods are the
user-interaction entry points and forward to those callbacks.
"""

from __future__ import annotations

from collections.abc import Callable, Container, Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from ..core.csv_export import CSVExport, build_csv_export
from ..core.filters import FilterChip, build_filter_chips, count_active_filters
from ..core.model import (
    NO_VALUE,
    ActionDescriptor,
    Column,
    CSVExportSpec,
    FilterDefinition,
    FilterKind,
    FilterOption,
    PaginationConfig,
    SortConfig,
    SortDirection,
    format_empty_value,
    is_empty_value,
    read_field,
)
from ..core.pagination import PageInfo, describe_page, visible_rows
from ..core.selection import SelectAllState, is_row_selected, select_all_state
from ..i18n import _
from ..log import logger

T = TypeVar("T")


class BodyState(str, Enum):
    """Enumerate what the table body shows."""

    LOADING = "loading"
    EMPTY = "empty"
    ROWS = "rows"


class EmptyStateKind(str, Enum):
    """Enumerate empty-state variants in priority order."""

    CUSTOM = "custom"
    NO_MATCHES = "no_matches"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class FilterControlView:
    key: str
    kind: FilterKind
    label: str
    placeholder: str
    value: Any
    options: Sequence[FilterOption] = ()


@dataclass(frozen=True)
class FilterPanelView:
    show_heading: bool
    active_count: int
    show_clear_all: bool
    controls: list[FilterControlView]
    chips: list[FilterChip]


@dataclass(frozen=True)
class HeaderCell:
    key: str
    header: str
    sortable: bool
    sorted: bool
    direction: SortDirection | None
    width: str | None = None
    min_width: str | None = None
    sticky: bool = False


@dataclass(frozen=True)
class HeaderView:
    cells: list[HeaderCell]
    select_all: SelectAllState | None
    has_actions: bool
    column_count: int


@dataclass(frozen=True)
class CellView:
    key: str
    value: Any
    text: str
    is_placeholder: bool
    sticky: bool = False


@dataclass(frozen=True)
class ActionView:
    index: int
    label: str
    icon: Any
    color_hint: str
    disabled: bool


@dataclass(frozen=True)
class RowView:
    row_id: Hashable
    cells: list[CellView]
    selected: bool
    clickable: bool
    actions: list[ActionView] = field(default_factory=list)


@dataclass(frozen=True)
class EmptyStateView:
    kind: EmptyStateKind
    message: str
    hint: str | None = None
    show_clear_filters: bool = False
    content: Any = None


@dataclass(frozen=True)
class TableBody:
    state: BodyState
    rows: list[RowView] = field(default_factory=list)
    custom_rows: list[Any] = field(default_factory=list)
    empty: EmptyStateView | None = None


@dataclass(frozen=True)
class PaginationView:
    page: int
    page_size: int
    total: int
    total_pages: int
    label: str
    page_label: str
    previous_disabled: bool
    next_disabled: bool
    page_size_options: Sequence[int] = ()
    total_without_filters_label: str | None = None


@dataclass(frozen=True)
class TableView:
    """Everything a front-end needs to draw one list screen."""

    title: str | None
    export_enabled: bool
    filters: FilterPanelView | None
    header: HeaderView
    body: TableBody
    pagination: PaginationView | None


class TableController(Generic[T]):
    """Derive a :class:`TableView` from caller-owned state and forward events."""

    def __init__(
        self,
        *,
        rows: Sequence[T],
        columns: Sequence[Column[T]],
        get_row_id: Callable[[T], Hashable],
        title: str | None = None,
        loading: bool = False,
        empty_message: str | None = None,
        filters: Sequence[FilterDefinition] = (),
        filter_values: Mapping[str, Any] | None = None,
        on_filter_change: Callable[[str, Any], None] | None = None,
        on_clear_filters: Callable[[], None] | None = None,
        show_filters_heading: bool = True,
        sort: SortConfig | None = None,
        enable_selection: bool = False,
        selected_ids: Container[Hashable] = frozenset(),
        on_select_all: Callable[[bool], None] | None = None,
        on_select_row: Callable[[Hashable, bool], None] | None = None,
        pagination: PaginationConfig | None = None,
        actions: Sequence[ActionDescriptor[T]] = (),
        csv_export: CSVExportSpec[T] | None = None,
        on_row_click: Callable[[T], None] | None = None,
        render_empty_state: Callable[[], Any] | None = None,
        render_row: Callable[[T, int], Any] | None = None,
        total_without_filters: int | None = None,
        placeholder: str = NO_VALUE,
    ) -> None:
        self.rows = rows
        self.columns = columns
        self.get_row_id = get_row_id
        self.title = title
        self.loading = loading
        self.empty_message = empty_message
        self.filters = filters
        self.filter_values: Mapping[str, Any] = filter_values or {}
        self.on_filter_change = on_filter_change
        self.on_clear_filters = on_clear_filters
        self.show_filters_heading = show_filters_heading
        self.sort = sort
        self.enable_selection = enable_selection
        self.selected_ids = selected_ids
        self.on_select_all = on_select_all
        self.on_select_row = on_select_row
        self.pagination = pagination
        self.actions = actions
        self.csv_export = csv_export
        self.on_row_click = on_row_click
        self.render_empty_state = render_empty_state
        self.render_row = render_row
        self.total_without_filters = total_without_filters
        self.placeholder = placeholder

    # derived state ---------------------------------------------------
    @property
    def active_filter_count(self) -> int:
        return count_active_filters(self.filters, self.filter_values)

    def filter_chips(self) -> list[FilterChip]:
        return build_filter_chips(self.filters, self.filter_values)

    def visible_rows(self) -> list[T]:
        """Return the rows of the current page."""
        return visible_rows(self.rows, self.pagination)

    def page_info(self) -> PageInfo | None:
        if self.pagination is None:
            return None
        return describe_page(self.pagination, len(self.rows))

    def select_all_state(self) -> SelectAllState:
        ids = [self.get_row_id(row) for row in self.visible_rows()]
        return select_all_state(ids, self.selected_ids)

    def resolve_cell(self, row: T, column: Column[T]) -> CellView:
        """Resolve one cell: ``render``, then ``accessor``, then the row field."""
        if column.render is not None:
            value = column.render(row)
        elif column.accessor is not None:
            value = column.accessor(row)
        else:
            value = read_field(row, column.key)
        return CellView(
            key=column.key,
            value=value,
            text=format_empty_value(value, self.placeholder),
            is_placeholder=is_empty_value(value),
            sticky=column.sticky,
        )

    # rendering -------------------------------------------------------
    def render(self) -> TableView:
        """Build the full view for the current inputs."""
        return TableView(
            title=self.title,
            export_enabled=bool(self.csv_export and self.csv_export.enabled),
            filters=self._render_filters(),
            header=self._render_header(),
            body=self._render_body(),
            pagination=self._render_pagination(),
        )

    def _render_filters(self) -> FilterPanelView | None:
        if not self.filters:
            return None
        count = self.active_filter_count
        controls = [
            FilterControlView(
                key=definition.key,
                kind=definition.kind,
                label=definition.display_label,
                placeholder=self._filter_placeholder(definition),
                value=self.filter_values.get(definition.key, ""),
                options=definition.options,
            )
            for definition in self.filters
        ]
        return FilterPanelView(
            show_heading=self.show_filters_heading,
            active_count=count,
            show_clear_all=count > 0,
            controls=controls,
            chips=self.filter_chips(),
        )

    @staticmethod
    def _filter_placeholder(definition: FilterDefinition) -> str:
        if definition.placeholder:
            return definition.placeholder
        if definition.kind is FilterKind.SEARCH:
            return _("Search...")
        return _("Filter by {label}").format(label=definition.display_label)

    def _render_header(self) -> HeaderView:
        cells = []
        for column in self.columns:
            is_sorted = self.sort is not None and self.sort.field == column.key
            cells.append(
                HeaderCell(
                    key=column.key,
                    header=column.header,
                    sortable=column.sortable,
                    sorted=is_sorted,
                    direction=self.sort.direction if is_sorted else None,
                    width=column.width,
                    min_width=column.min_width,
                    sticky=column.sticky,
                )
            )
        has_actions = bool(self.actions)
        return HeaderView(
            cells=cells,
            select_all=self.select_all_state() if self.enable_selection else None,
            has_actions=has_actions,
            column_count=len(self.columns)
            + int(self.enable_selection)
            + int(has_actions),
        )

    def _render_body(self) -> TableBody:
        if self.loading:
            return TableBody(state=BodyState.LOADING)
        page_rows = self.visible_rows()
        if not page_rows:
            return TableBody(state=BodyState.EMPTY, empty=self._render_empty())
        if self.render_row is not None:
            return TableBody(
                state=BodyState.ROWS,
                custom_rows=[self.render_row(row, i) for i, row in enumerate(page_rows)],
            )
        return TableBody(
            state=BodyState.ROWS,
            rows=[self._render_row(row) for row in page_rows],
        )

    def _render_row(self, row: T) -> RowView:
        row_id = self.get_row_id(row)
        actions = [
            ActionView(
                index=index,
                label=action.label,
                icon=action.icon,
                color_hint=action.color_hint,
                disabled=action.disabled_for(row),
            )
            for index, action in enumerate(self.actions)
            if action.visible_for(row)
        ]
        return RowView(
            row_id=row_id,
            cells=[self.resolve_cell(row, column) for column in self.columns],
            selected=(
                self.enable_selection and is_row_selected(row_id, self.selected_ids)
            ),
            clickable=self.on_row_click is not None,
            actions=actions,
        )

    def _filtered_total(self) -> int:
        info = self.page_info()
        return info.total if info is not None else len(self.rows)

    def _render_empty(self) -> EmptyStateView:
        if self.render_empty_state is not None:
            return EmptyStateView(
                kind=EmptyStateKind.CUSTOM,
                message="",
                content=self.render_empty_state(),
            )
        if self.active_filter_count > 0 and self._filtered_total() == 0:
            return EmptyStateView(
                kind=EmptyStateKind.NO_MATCHES,
                message=_("No data matches your filters"),
                hint=_("Try adjusting your filters or clear them to see all data"),
                show_clear_filters=self.on_clear_filters is not None,
            )
        return EmptyStateView(
            kind=EmptyStateKind.NO_DATA,
            message=self.empty_message or _("No data found"),
        )

    def _render_pagination(self) -> PaginationView | None:
        info = self.page_info()
        if info is None or not info.visible:
            return None
        assert self.pagination is not None
        without_filters = None
        if self.total_without_filters is not None and self.active_filter_count > 0:
            without_filters = _("({count} total without filters)").format(
                count=self.total_without_filters
            )
        return PaginationView(
            page=info.page,
            page_size=info.page_size,
            total=info.total,
            total_pages=info.total_pages,
            label=_("Showing {start} to {end} of {total} items").format(
                start=info.start_index, end=info.end_index, total=info.total
            ),
            page_label=_("Page {page} of {pages}").format(
                page=info.page, pages=info.total_pages
            ),
            previous_disabled=not info.has_previous,
            next_disabled=not info.has_next,
            page_size_options=(
                tuple(self.pagination.page_size_options)
                if self.pagination.on_page_size_change is not None
                else ()
            ),
            total_without_filters_label=without_filters,
        )

    # filter events ---------------------------------------------------
    def change_filter(self, key: str, value: Any) -> None:
        if self.on_filter_change is not None:
            self.on_filter_change(key, value)

    def remove_filter_chip(self, key: str) -> None:
        """Clear one filter exactly as clearing its control would."""
        self.change_filter(key, "")

    def clear_filters(self) -> None:
        if self.on_clear_filters is not None:
            self.on_clear_filters()

    # sort events -----------------------------------------------------
    def click_header(self, key: str) -> bool:
        """Request sorting by ``key``; return ``True`` if a request was emitted."""
        if self.sort is None:
            return False
        column = next((c for c in self.columns if c.key == key), None)
        if column is None or not column.sortable:
            return False
        self.sort.on_sort(column.key)
        return True

    # pagination events -----------------------------------------------
    def go_to_page(self, page: int) -> None:
        if self.pagination is not None:
            logger.debug("Page change requested: %s", page)
            self.pagination.on_page_change(page)

    def go_to_previous_page(self) -> bool:
        view = self._render_pagination()
        if view is None or view.previous_disabled:
            return False
        self.go_to_page(view.page - 1)
        return True

    def go_to_next_page(self) -> bool:
        view = self._render_pagination()
        if view is None or view.next_disabled:
            return False
        self.go_to_page(view.page + 1)
        return True

    def change_page_size(self, size: int) -> bool:
        """Forward a page-size change; the caller is expected to reset the page."""
        if self.pagination is None or self.pagination.on_page_size_change is None:
            return False
        self.pagination.on_page_size_change(size)
        return True

    # selection events ------------------------------------------------
    def toggle_select_all(self, checked: bool) -> None:
        if self.enable_selection and self.on_select_all is not None:
            self.on_select_all(checked)

    def toggle_row(self, row: T, checked: bool) -> None:
        """Toggle one row's checkbox without triggering the row click."""
        if self.enable_selection and self.on_select_row is not None:
            self.on_select_row(self.get_row_id(row), checked)

    # row events ------------------------------------------------------
    def click_row(self, row: T) -> None:
        if self.on_row_click is not None:
            self.on_row_click(row)

    def click_action(self, row: T, index: int) -> bool:
        """Run action ``index`` for ``row``; never triggers the row click."""
        action = self.actions[index]
        if not action.visible_for(row) or action.disabled_for(row):
            return False
        action.on_click(row)
        return True

    # export ----------------------------------------------------------
    def export_csv(self) -> CSVExport | None:
        """Serialize every row passed in, not only the visible page."""
        if self.csv_export is None or not self.csv_export.enabled:
            return None
        return build_csv_export(self.rows, self.csv_export)


__all__ = [
    "ActionView",
    "BodyState",
    "CellView",
    "EmptyStateKind",
    "EmptyStateView",
    "FilterControlView",
    "FilterPanelView",
    "HeaderCell",
    "HeaderView",
    "PaginationView",
    "RowView",
    "TableBody",
    "TableController",
    "TableView",
]
