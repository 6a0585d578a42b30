"""Tests for the generic table controller."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from recordtable.core.model import (
    ActionDescriptor,
    Column,
    CSVExportSpec,
    FilterDefinition,
    FilterKind,
    FilterOption,
    PaginationConfig,
    PaginationMode,
    SortConfig,
    SortDirection,
)
from recordtable.ui.table_controller import BodyState, EmptyStateKind, TableController

pytestmark = pytest.mark.unit


@dataclass
class User:
    id: int
    name: str
    email: str | None
    role: str


USERS = [
    User(1, "Ann", "ann@example.com", "ADMIN"),
    User(2, "Bob", None, "USER"),
    User(3, "Cid", "", "USER"),
]

COLUMNS = [
    Column("name", "Name"),
    Column("email", "Email"),
    Column("role", "Role", sortable=False),
]


def _controller(**overrides) -> TableController[User]:
    options = {"rows": USERS, "columns": COLUMNS, "get_row_id": lambda u: u.id}
    options.update(overrides)
    return TableController(**options)


def _numbered(count: int) -> list[dict]:
    return [{"id": i, "name": f"User {i}"} for i in range(1, count + 1)]


def _pagination(page=1, page_size=10, calls=None, **kwargs) -> PaginationConfig:
    sink = calls if calls is not None else []
    return PaginationConfig(page=page, page_size=page_size, on_page_change=sink.append, **kwargs)


# body --------------------------------------------------------------------
def test_no_rows_with_active_filter_shows_no_matches_state():
    view = _controller(
        rows=[],
        filters=[FilterDefinition("q", FilterKind.SEARCH)],
        filter_values={"q": "zzz"},
        on_clear_filters=lambda: None,
    ).render()

    assert view.body.state is BodyState.EMPTY
    assert view.body.empty.kind is EmptyStateKind.NO_MATCHES
    assert view.body.empty.message == "No data matches your filters"
    assert view.body.empty.hint == "Try adjusting your filters or clear them to see all data"
    assert view.body.empty.show_clear_filters
    assert view.filters.active_count == 1


def test_no_rows_without_filters_shows_no_data_message():
    view = _controller(rows=[]).render()
    assert view.body.empty.kind is EmptyStateKind.NO_DATA
    assert view.body.empty.message == "No data found"

    view = _controller(rows=[], empty_message="No users yet").render()
    assert view.body.empty.message == "No users yet"


def test_custom_empty_state_wins():
    view = _controller(
        rows=[],
        filters=[FilterDefinition("q")],
        filter_values={"q": "x"},
        render_empty_state=lambda: "nothing here",
    ).render()
    assert view.body.empty.kind is EmptyStateKind.CUSTOM
    assert view.body.empty.content == "nothing here"


def test_loading_replaces_rows():
    view = _controller(loading=True).render()
    assert view.body.state is BodyState.LOADING
    assert view.body.rows == []


def test_empty_cells_use_placeholder():
    view = _controller().render()
    bob, cid = view.body.rows[1], view.body.rows[2]
    assert bob.cells[1].text == "—"
    assert bob.cells[1].is_placeholder
    assert cid.cells[1].text == "—"

    view = _controller(placeholder="n/a").render()
    assert view.body.rows[1].cells[1].text == "n/a"


def test_render_wins_over_accessor():
    columns = [
        Column(
            "name",
            "Name",
            accessor=lambda u: u.name.upper(),
            render=lambda u: f"<b>{u.name}</b>",
        ),
        Column("upper", "Upper", accessor=lambda u: u.name.upper()),
    ]
    row = _controller(columns=columns).render().body.rows[0]
    assert [cell.text for cell in row.cells] == ["<b>Ann</b>", "ANN"]


def test_custom_row_rendering():
    view = _controller(render_row=lambda user, index: f"{index}:{user.name}").render()
    assert view.body.custom_rows == ["0:Ann", "1:Bob", "2:Cid"]
    assert view.body.rows == []


# filters -----------------------------------------------------------------
def test_filter_panel_controls_and_chips():
    changes = []
    controller = _controller(
        filters=[
            FilterDefinition("q", FilterKind.SEARCH),
            FilterDefinition(
                "role",
                FilterKind.SELECT,
                label="Role",
                options=[FilterOption("ADMIN", "Administrator")],
            ),
        ],
        filter_values={"role": "ADMIN"},
        on_filter_change=lambda key, value: changes.append((key, value)),
        show_filters_heading=False,
    )
    panel = controller.render().filters

    assert [c.placeholder for c in panel.controls] == ["Search...", "Filter by Role"]
    assert not panel.show_heading
    assert panel.show_clear_all
    assert [(c.display_label, c.display_value) for c in panel.chips] == [
        ("Role", "Administrator")
    ]

    controller.remove_filter_chip("role")
    controller.change_filter("q", "bo")
    assert changes == [("role", ""), ("q", "bo")]


def test_filter_panel_absent_without_definitions():
    assert _controller().render().filters is None


# sorting -----------------------------------------------------------------
def test_header_click_requests_sort_for_sortable_columns_only():
    requests = []
    controller = _controller(sort=SortConfig("name", SortDirection.DESC, requests.append))

    assert controller.click_header("email")
    assert not controller.click_header("role")
    assert not controller.click_header("missing")
    assert requests == ["email"]

    cells = controller.render().header.cells
    assert cells[0].sorted and cells[0].direction is SortDirection.DESC
    assert not cells[1].sorted and cells[1].direction is None


def test_header_click_without_sort_config_is_ignored():
    assert not _controller().click_header("name")


# pagination --------------------------------------------------------------
def test_single_page_has_no_pagination():
    calls = []
    controller = _controller(pagination=_pagination(calls=calls))
    assert controller.render().pagination is None
    assert not controller.go_to_next_page()
    assert calls == []


def test_fifty_rows_first_page():
    calls = []
    controller = _controller(
        rows=_numbered(50),
        columns=[Column("name", "Name")],
        get_row_id=lambda r: r["id"],
        pagination=_pagination(calls=calls),
    )
    view = controller.render()

    assert view.pagination.label == "Showing 1 to 10 of 50 items"
    assert view.pagination.page_label == "Page 1 of 5"
    assert view.pagination.previous_disabled
    assert not view.pagination.next_disabled
    assert [r.row_id for r in view.body.rows] == list(range(1, 11))

    assert not controller.go_to_previous_page()
    assert controller.go_to_next_page()
    assert calls == [2]


def test_last_page_disables_next():
    calls = []
    controller = _controller(
        rows=_numbered(50),
        columns=[Column("name", "Name")],
        get_row_id=lambda r: r["id"],
        pagination=_pagination(page=5, calls=calls),
    )
    assert controller.render().pagination.next_disabled
    assert not controller.go_to_next_page()
    assert controller.go_to_previous_page()
    assert calls == [4]


def test_page_size_options_need_a_handler():
    sizes = []
    base = {"rows": _numbered(30), "columns": [Column("name", "Name")], "get_row_id": lambda r: r["id"]}

    view = _controller(**base, pagination=_pagination()).render()
    assert view.pagination.page_size_options == ()
    assert not _controller(**base, pagination=_pagination()).change_page_size(50)

    controller = _controller(**base, pagination=_pagination(on_page_size_change=sizes.append))
    assert controller.render().pagination.page_size_options == (10, 20, 50, 100)
    assert controller.change_page_size(50)
    assert sizes == [50]


def test_total_without_filters_only_with_active_filters():
    base = {
        "rows": _numbered(30),
        "columns": [Column("name", "Name")],
        "get_row_id": lambda r: r["id"],
        "pagination": _pagination(),
        "filters": [FilterDefinition("q")],
        "total_without_filters": 120,
    }
    view = _controller(**base, filter_values={"q": "user"}).render()
    assert view.pagination.total_without_filters_label == "(120 total without filters)"

    view = _controller(**base).render()
    assert view.pagination.total_without_filters_label is None


def test_server_mode_uses_supplied_totals():
    rows = _numbered(10)
    view = _controller(
        rows=rows,
        columns=[Column("name", "Name")],
        get_row_id=lambda r: r["id"],
        pagination=_pagination(page=2, mode=PaginationMode.SERVER, total=95, total_pages=10),
    ).render()
    assert len(view.body.rows) == 10
    assert view.pagination.label == "Showing 11 to 20 of 95 items"
    assert view.pagination.page_label == "Page 2 of 10"


# selection ---------------------------------------------------------------
def test_selection_header_and_rows():
    selected_rows = []
    select_all = []
    controller = _controller(
        enable_selection=True,
        selected_ids={1},
        on_select_row=lambda row_id, checked: selected_rows.append((row_id, checked)),
        on_select_all=select_all.append,
        actions=[ActionDescriptor("edit", "Edit", lambda u: None)],
    )
    view = controller.render()

    assert view.header.select_all.indeterminate
    assert view.header.column_count == 5
    assert [r.selected for r in view.body.rows] == [True, False, False]

    controller.toggle_row(USERS[1], True)
    controller.toggle_select_all(True)
    assert selected_rows == [(2, True)]
    assert select_all == [True]


def test_selection_disabled_hides_checkboxes():
    calls = []
    controller = _controller(selected_ids={1}, on_select_row=lambda *a: calls.append(a))
    view = controller.render()
    assert view.header.select_all is None
    assert view.header.column_count == 3
    assert not view.body.rows[0].selected
    controller.toggle_row(USERS[0], True)
    assert calls == []


def test_select_all_checked_when_page_fully_selected():
    view = _controller(enable_selection=True, selected_ids={1, 2, 3}).render()
    assert view.header.select_all.checked


# actions and row clicks --------------------------------------------------
def test_action_hidden_for_admin_never_triggers_row_click():
    clicked_rows = []
    deleted = []
    controller = _controller(
        actions=[
            ActionDescriptor(
                "trash",
                "Delete",
                deleted.append,
                color_hint="red",
                is_visible=lambda u: u.role != "ADMIN",
            )
        ],
        on_row_click=clicked_rows.append,
    )
    rows = controller.render().body.rows

    assert rows[0].actions == []
    assert [a.label for a in rows[1].actions] == ["Delete"]
    assert rows[1].actions[0].color_hint == "red"

    assert not controller.click_action(USERS[0], 0)
    assert controller.click_action(USERS[1], 0)
    assert deleted == [USERS[1]]
    assert clicked_rows == []

    controller.click_row(USERS[2])
    assert clicked_rows == [USERS[2]]


def test_disabled_action_is_shown_but_inert():
    calls = []
    controller = _controller(
        actions=[
            ActionDescriptor("mail", "Email", calls.append, is_disabled=lambda u: not u.email)
        ]
    )
    rows = controller.render().body.rows
    assert [r.actions[0].disabled for r in rows] == [False, True, True]
    assert not controller.click_action(USERS[1], 0)
    assert calls == []


def test_rows_are_clickable_only_with_handler():
    assert not _controller().render().body.rows[0].clickable
    assert _controller(on_row_click=lambda u: None).render().body.rows[0].clickable


# export ------------------------------------------------------------------
def test_export_covers_every_row_not_just_the_page():
    spec = CSVExportSpec("users.csv", ["Name"], lambda r: [r["name"]])
    controller = _controller(
        rows=_numbered(25),
        columns=[Column("name", "Name")],
        get_row_id=lambda r: r["id"],
        pagination=_pagination(),
        csv_export=spec,
    )
    assert controller.render().export_enabled
    export = controller.export_csv()
    assert export.row_count == 25
    assert export.content.splitlines()[-1] == '"User 25"'


def test_disabled_export():
    spec = CSVExportSpec("users.csv", ["Name"], lambda u: [u.name], enabled=False)
    controller = _controller(csv_export=spec)
    assert not controller.render().export_enabled
    assert controller.export_csv() is None
    assert _controller().export_csv() is None
