"""CSV serialization of tabular rows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import csv
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import TypeVar

from ..log import logger
from .model import CellValue, CSVExportSpec

T = TypeVar("T")

__all__ = [
    "CSVExport",
    "CSVExportError",
    "build_csv_export",
    "serialize_csv",
    "write_csv_export",
]

_LINE_TERMINATOR = "\n"


class CSVExportError(ValueError):
    """Raised when rows cannot be serialized as a rectangular table."""


@dataclass(frozen=True)
class CSVExport:
    """Serialized export ready to be handed to a download collaborator."""

    filename: str
    content: str
    row_count: int


def _cell_text(value: CellValue) -> str:
    return "" if value is None else str(value)


def serialize_csv(
    headers: Sequence[str],
    rows: Iterable[Sequence[CellValue]],
) -> str:
    """Render ``headers`` and ``rows`` as CSV with every cell quoted.

    Quotes inside cells are doubled and ``None`` becomes an empty string.
    Lines are joined with ``\\n`` and the text carries no trailing newline.
    """
    buffer = StringIO()
    writer = csv.writer(
        buffer,
        quoting=csv.QUOTE_ALL,
        doublequote=True,
        lineterminator=_LINE_TERMINATOR,
    )
    width = len(headers)
    writer.writerow([_cell_text(header) for header in headers])
    for index, row in enumerate(rows):
        if len(row) != width:
            raise CSVExportError(
                f"row {index} has {len(row)} cells, expected {width}"
            )
        writer.writerow([_cell_text(cell) for cell in row])
    return buffer.getvalue().removesuffix(_LINE_TERMINATOR)


def build_csv_export(rows: Sequence[T], spec: CSVExportSpec[T]) -> CSVExport:
    """Serialize the whole ``rows`` collection according to ``spec``.

    ``get_row_data`` runs for every row before anything is serialized, so a
    failure leaves no partial export behind; the exception propagates.
    ``on_export`` is notified only after the content is built.
    """
    try:
        records = [list(spec.get_row_data(row)) for row in rows]
        content = serialize_csv(spec.headers, records)
    except Exception as exc:
        logger.warning("CSV export %s aborted: %s", spec.filename, exc)
        raise
    logger.debug(
        "csv_export",
        extra={
            "json": {
                "event": "csv_export",
                "payload": {"filename": spec.filename, "rows": len(records)},
            }
        },
    )
    if spec.on_export is not None:
        spec.on_export()
    return CSVExport(filename=spec.filename, content=content, row_count=len(records))


def write_csv_export(export: CSVExport, directory: str | Path) -> Path:
    """Write ``export`` below ``directory`` and return the file path."""
    target = Path(directory) / export.filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(export.content, encoding="utf-8")
    return target
