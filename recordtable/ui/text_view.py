"""Render a :class:`TableView` as aligned plain text."""

from __future__ import annotations

from collections.abc import Sequence

from ..core.model import SortDirection
from ..core.selection import SelectAllState
from ..i18n import _
from .table_controller import BodyState, HeaderView, TableView

__all__ = ["render_text"]

_SORT_MARKERS = {SortDirection.ASC: " ▲", SortDirection.DESC: " ▼"}


def _clip(text: str, width: int) -> str:
    flat = text.replace("\r\n", " ").replace("\n", " ").replace("\t", " ")
    if len(flat) <= width:
        return flat
    return flat[: max(1, width - 1)] + "…"


def _checkbox(checked: bool, indeterminate: bool = False) -> str:
    if checked:
        return "[x]"
    if indeterminate:
        return "[-]"
    return "[ ]"


def _header_labels(header: HeaderView) -> list[str]:
    labels: list[str] = []
    if header.select_all is not None:
        state: SelectAllState = header.select_all
        labels.append(_checkbox(state.checked, state.indeterminate))
    for cell in header.cells:
        marker = _SORT_MARKERS.get(cell.direction, "") if cell.sorted else ""
        labels.append(f"{cell.header}{marker}")
    if header.has_actions:
        labels.append(_("Actions"))
    return labels


def _format_grid(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    widths = [
        max(len(value) for value in column)
        for column in zip(headers, *rows, strict=True)
    ]
    fmt = "  ".join(f"{{:<{width}}}" for width in widths)
    lines = [fmt.format(*headers).rstrip(), "  ".join("-" * w for w in widths)]
    lines.extend(fmt.format(*row).rstrip() for row in rows)
    return lines


def render_text(view: TableView, *, max_cell_width: int = 40) -> str:
    """Return ``view`` as text lines suitable for a terminal."""
    lines: list[str] = []
    if view.title:
        lines.append(view.title)
        lines.append("=" * len(view.title))

    if view.filters is not None and view.filters.active_count:
        chips = ", ".join(
            f"{chip.display_label}: {chip.display_value}" for chip in view.filters.chips
        )
        lines.append(
            _("Filters ({count} active): {chips}").format(
                count=view.filters.active_count, chips=chips
            )
        )

    body = view.body
    if body.state is BodyState.LOADING:
        lines.append(_("Loading..."))
        return "\n".join(lines)

    headers = [_clip(label, max_cell_width) for label in _header_labels(view.header)]
    if body.state is BodyState.EMPTY:
        lines.extend(_format_grid(headers, []))
        assert body.empty is not None
        if body.empty.content is not None:
            lines.append(str(body.empty.content))
        else:
            lines.append(body.empty.message)
            if body.empty.hint:
                lines.append(body.empty.hint)
    elif body.custom_rows:
        lines.extend(str(row) for row in body.custom_rows)
    else:
        grid: list[list[str]] = []
        for row in body.rows:
            cells: list[str] = []
            if view.header.select_all is not None:
                cells.append(_checkbox(row.selected))
            cells.extend(_clip(cell.text, max_cell_width) for cell in row.cells)
            if view.header.has_actions:
                cells.append(
                    _clip(
                        " ".join(
                            f"({a.label})" if a.disabled else a.label
                            for a in row.actions
                        ),
                        max_cell_width,
                    )
                )
            grid.append(cells)
        lines.extend(_format_grid(headers, grid))

    pagination = view.pagination
    if pagination is not None:
        footer = f"{pagination.label}  {pagination.page_label}"
        if pagination.total_without_filters_label:
            footer = f"{footer}  {pagination.total_without_filters_label}"
        lines.append(footer)
    return "\n".join(lines)
