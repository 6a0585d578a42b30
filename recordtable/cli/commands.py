"""Command implementations for the CLI interface."""

from __future__ import annotations

import argparse
import csv
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from recordtable.core.csv_export import write_csv_export
from recordtable.core.model import (
    Column,
    CSVExportSpec,
    FilterDefinition,
    FilterKind,
    FilterOption,
    read_field,
)
from recordtable.core.sorting import natural_sort_key
from recordtable.i18n import _
from recordtable.log import logger
from recordtable.settings import AppSettings
from recordtable.ui.list_model import ListScreenState
from recordtable.ui.table_controller import TableController
from recordtable.ui.text_view import render_text

SEARCH_FILTER_KEY = "search"

Record = dict[str, Any]


class RecordSourceError(Exception):
    """Raised when a record file cannot be read as a list of records."""


@dataclass
class Command:
    """Describe a CLI command and its argument handler."""

    func: Callable[[argparse.Namespace], None]
    help: str
    add_arguments: Callable[[argparse.ArgumentParser], None]


# loading ---------------------------------------------------------------
def load_records(path: str | Path) -> list[Record]:
    """Read records from a JSON array of objects or a CSV file with headers."""
    p = Path(path)
    try:
        if p.suffix.lower() == ".csv":
            # newline="" keeps line breaks inside quoted cells
            with p.open(newline="", encoding="utf-8") as fh:
                return [dict(row) for row in csv.DictReader(fh)]
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RecordSourceError(f"cannot read {p}: {exc}") from exc
    except csv.Error as exc:
        raise RecordSourceError(f"{p} is not valid CSV: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordSourceError(f"{p} is not valid JSON: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(i, dict) for i in data):
        raise RecordSourceError(f"{p} must contain a JSON array of objects")
    return data


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_assignment(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(_("expected key=value, got {raw}").format(raw=raw))
    return key.strip(), value.strip()


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(
            _("expected a positive integer, got {raw}").format(raw=raw)
        ) from None
    if value <= 0:
        raise argparse.ArgumentTypeError(
            _("expected a positive integer, got {raw}").format(raw=raw)
        )
    return value


def build_columns(records: Sequence[Record], keys: Sequence[str]) -> list[Column[Record]]:
    """Return columns for ``keys`` or for every key seen in ``records``."""
    if not keys:
        seen: dict[str, None] = {}
        for record in records:
            for key in record:
                seen.setdefault(key, None)
        keys = list(seen)
    return [Column(key=key, header=key.replace("_", " ").title()) for key in keys]


def build_filters(
    records: Sequence[Record], args: argparse.Namespace
) -> tuple[list[FilterDefinition], dict[str, Any]]:
    """Translate CLI filter options into definitions and current values."""
    definitions: list[FilterDefinition] = []
    values: dict[str, Any] = {}
    if args.search:
        definitions.append(
            FilterDefinition(SEARCH_FILTER_KEY, FilterKind.SEARCH, label=_("Search"))
        )
        values[SEARCH_FILTER_KEY] = args.search
    for key, value in args.filter or []:
        distinct = {
            str(v) for v in (read_field(r, key) for r in records) if v not in (None, "")
        }
        options = [FilterOption(v, v) for v in sorted(distinct, key=natural_sort_key)]
        definitions.append(FilterDefinition(key, FilterKind.SELECT, options=options))
        values[key] = value
    for key in args.flag or []:
        definitions.append(FilterDefinition(key, FilterKind.BOOLEAN))
        values[key] = True
    for key in args.no_flag or []:
        definitions.append(FilterDefinition(key, FilterKind.BOOLEAN))
        values[key] = False
    return definitions, values


def _row_id_getter(
    records: Sequence[Record], id_field: str | None
) -> Callable[[Record], str]:
    if id_field:
        return lambda record: str(read_field(record, id_field))
    positions = {id(record): index for index, record in enumerate(records, start=1)}
    return lambda record: str(positions[id(record)])


def build_screen(args: argparse.Namespace) -> TableController[Record]:
    """Load the record file and build a controller reflecting ``args``."""
    settings: AppSettings = getattr(args, "app_settings", None) or AppSettings()
    records = load_records(args.file)
    columns = build_columns(records, _split_csv(args.columns))
    definitions, values = build_filters(records, args)
    id_field = args.id_field or ("id" if any("id" in r for r in records) else None)

    state: ListScreenState[Record] = ListScreenState(
        columns=columns,
        get_row_id=_row_id_getter(records, id_field),
        filters=definitions,
        page_size=(
            args.page_size
            if args.page_size is not None
            else settings.table.default_page_size
        ),
        page_size_options=settings.table.page_size_options,
        select_all_scope=settings.table.select_all_scope,
    )
    state.set_rows(records)
    for key, value in values.items():
        state.on_filter_change(key, value)
    if args.sort:
        state.on_sort(args.sort)
        if args.desc:
            state.on_sort(args.sort)
    state.on_page_change(args.page)
    for row_id in _split_csv(args.select):
        state.on_select_row(row_id, True)

    headers = [column.header for column in columns]
    keys = [column.key for column in columns]
    export_name = Path(args.output).name if getattr(args, "output", None) else (
        f"{Path(args.file).stem}.csv"
    )
    return state.controller(
        title=args.title or Path(args.file).stem,
        placeholder=settings.table.placeholder,
        show_filters_heading=settings.table.show_filters_heading,
        csv_export=CSVExportSpec(
            filename=export_name,
            headers=headers,
            get_row_data=lambda record: [read_field(record, key) for key in keys],
        ),
    )


# commands --------------------------------------------------------------
def cmd_list(args: argparse.Namespace) -> None:
    """Print one page of the filtered, sorted records."""
    settings: AppSettings = getattr(args, "app_settings", None) or AppSettings()
    controller = build_screen(args)
    print(render_text(controller.render(), max_cell_width=settings.ui.max_cell_width))


def cmd_export(args: argparse.Namespace) -> None:
    """Write every filtered record (not just one page) as CSV."""
    controller = build_screen(args)
    export = controller.export_csv()
    assert export is not None
    target = write_csv_export(export, Path(args.output).parent)
    logger.info(
        "export_written",
        extra={
            "json": {
                "event": "export_written",
                "payload": {"path": str(target), "rows": export.row_count},
            }
        },
    )
    print(_("Exported {count} rows to {path}").format(count=export.row_count, path=target))


def add_view_arguments(p: argparse.ArgumentParser) -> None:
    """Arguments shared by commands that build a list screen."""
    p.add_argument("file", help=_("JSON or CSV file with records"))
    p.add_argument("--title", help=_("table title"))
    p.add_argument("--columns", help=_("comma-separated record fields to show"))
    p.add_argument("--id-field", dest="id_field", help=_("field identifying a record"))
    p.add_argument("--search", help=_("free-text search over all columns"))
    p.add_argument(
        "--filter",
        action="append",
        type=_parse_assignment,
        metavar="KEY=VALUE",
        help=_("exact-match filter on a field (repeatable)"),
    )
    p.add_argument("--flag", action="append", metavar="KEY", help=_("keep records where KEY is true"))
    p.add_argument(
        "--no-flag",
        dest="no_flag",
        action="append",
        metavar="KEY",
        help=_("keep records where KEY is false"),
    )
    p.add_argument("--sort", help=_("field to sort by"))
    p.add_argument("--desc", action="store_true", help=_("sort descending"))
    p.add_argument("--page", type=_positive_int, default=1, help=_("page number"))
    p.add_argument("--page-size", dest="page_size", type=_positive_int, help=_("rows per page"))
    p.add_argument("--select", help=_("comma-separated record identifiers to mark"))


def add_list_arguments(p: argparse.ArgumentParser) -> None:
    add_view_arguments(p)


def add_export_arguments(p: argparse.ArgumentParser) -> None:
    add_view_arguments(p)
    p.add_argument("--output", "-o", required=True, help=_("CSV file to write"))


COMMANDS: dict[str, Command] = {
    "list": Command(cmd_list, _("show records as a table"), add_list_arguments),
    "export": Command(cmd_export, _("export filtered records as CSV"), add_export_arguments),
}
