"""Typed settings with Pydantic validation."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.model import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PAGE_SIZE_OPTIONS,
    NO_VALUE,
    SelectAllScope,
)

DEFAULT_MAX_CELL_WIDTH = 40
MIN_MAX_CELL_WIDTH = 4


class TableSettings(BaseModel):
    """Defaults applied to every list screen."""

    model_config = ConfigDict(validate_assignment=True)

    default_page_size: int = Field(DEFAULT_PAGE_SIZE, gt=0)
    page_size_options: list[int] = Field(
        default_factory=lambda: list(DEFAULT_PAGE_SIZE_OPTIONS)
    )
    placeholder: str = NO_VALUE
    select_all_scope: SelectAllScope = SelectAllScope.PAGE
    show_filters_heading: bool = True

    @field_validator("default_page_size", mode="before")
    @classmethod
    def _normalize_page_size(cls, value: int | str | None) -> int:
        """Fall back to the default for blank values."""
        if value is None:
            return DEFAULT_PAGE_SIZE
        if isinstance(value, bool):
            raise ValueError("Boolean is not a valid page size")
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return DEFAULT_PAGE_SIZE
            try:
                return int(raw)
            except ValueError:  # pragma: no cover - delegated to Pydantic
                return value
        return value

    @field_validator("page_size_options")
    @classmethod
    def _normalize_page_size_options(cls, value: list[int]) -> list[int]:
        """Keep positive sizes, sorted and unique."""
        cleaned = sorted({size for size in value if size > 0})
        if not cleaned:
            raise ValueError("page_size_options needs at least one positive size")
        return cleaned

    @field_validator("placeholder", mode="before")
    @classmethod
    def _normalize_placeholder(cls, value: str | None) -> str:
        if value is None:
            return NO_VALUE
        text = str(value).strip()
        return text or NO_VALUE


class UISettings(BaseModel):
    """Settings for the terminal front-end."""

    model_config = ConfigDict(validate_assignment=True)

    language: str | None = None
    log_level: int = Field(default=logging.INFO)
    max_cell_width: int = Field(DEFAULT_MAX_CELL_WIDTH, ge=MIN_MAX_CELL_WIDTH)

    @field_validator("language", mode="before")
    @classmethod
    def _normalise_language(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: int | str | None) -> int:
        """Accept level names such as ``"debug"`` as well as numbers."""
        if value is None:
            return logging.INFO
        if isinstance(value, str):
            raw = value.strip()
            if raw.isdigit():
                return int(raw)
            level = logging.getLevelName(raw.upper())
            if not isinstance(level, int):
                raise ValueError(f"unknown log level: {value}")
            return level
        return value


class AppSettings(BaseModel):
    """Aggregate settings for the application."""

    model_config = ConfigDict(validate_assignment=True)

    table: TableSettings = Field(default_factory=TableSettings)
    ui: UISettings = Field(default_factory=UISettings)

    def to_dict(self) -> dict:
        """Return settings as a plain dictionary."""
        return self.model_dump(mode="json")


def load_app_settings(path: str | Path) -> AppSettings:
    """Load :class:`AppSettings` from *path*.

    ``.toml`` files are read with :mod:`tomllib`, anything else as JSON.
    Validation errors are re-raised as :class:`ValueError`.
    """
    p = Path(path)
    with p.open("rb") as fh:
        data = tomllib.load(fh) if p.suffix.lower() == ".toml" else json.load(fh)
    try:
        return AppSettings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
