"""Page slicing and page metadata for client- and server-driven pagination."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math
from typing import TypeVar

from .model import PaginationConfig, PaginationMode

T = TypeVar("T")

__all__ = [
    "PageInfo",
    "clamp_page",
    "client_total_pages",
    "describe_page",
    "page_slice",
    "visible_rows",
]


@dataclass(frozen=True)
class PageInfo:
    """Derived pagination metadata for one render pass."""

    page: int
    page_size: int
    total: int
    total_pages: int
    start_index: int
    end_index: int

    @property
    def has_previous(self) -> bool:
        return self.page != 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def visible(self) -> bool:
        """Single-page collections show no pagination chrome at all."""
        return self.total_pages > 1


def _check_page_size(page_size: int) -> None:
    if page_size <= 0:
        raise ValueError(f"page size must be positive, got {page_size}")


def client_total_pages(count: int, page_size: int) -> int:
    """Return ``ceil(count / page_size)`` with a minimum of one page."""
    _check_page_size(page_size)
    return max(1, math.ceil(count / page_size))


def page_slice(rows: Sequence[T], page: int, page_size: int) -> list[T]:
    """Return the rows of the 1-based ``page``; empty past the last page."""
    _check_page_size(page_size)
    start = max(0, (page - 1) * page_size)
    return list(rows[start : start + page_size])


def visible_rows(rows: Sequence[T], config: PaginationConfig | None) -> list[T]:
    """Return the rows to display for ``config``.

    Server mode and missing pagination pass ``rows`` through untouched.
    """
    if config is None or config.mode is PaginationMode.SERVER:
        return list(rows)
    return page_slice(rows, config.page, config.page_size)


def describe_page(config: PaginationConfig, row_count: int) -> PageInfo:
    """Compute page metadata.

    ``row_count`` is the length of the full collection in client mode; in
    server mode the caller-supplied ``total``/``total_pages`` are trusted.
    The page itself is never corrected.
    """
    _check_page_size(config.page_size)
    if config.mode is PaginationMode.SERVER:
        total = config.total or 0
        total_pages = config.total_pages or 1
    else:
        total = row_count
        total_pages = client_total_pages(row_count, config.page_size)
    return PageInfo(
        page=config.page,
        page_size=config.page_size,
        total=total,
        total_pages=total_pages,
        start_index=(config.page - 1) * config.page_size + 1,
        end_index=min(config.page * config.page_size, total),
    )


def clamp_page(page: int, total_pages: int) -> int:
    """Return ``page`` limited to ``[1, total_pages]`` for callers that want it."""
    return min(max(1, page), max(1, total_pages))
