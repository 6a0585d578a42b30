"""Entry point for the command-line interface."""

from __future__ import annotations

import argparse
import logging

from recordtable import i18n
from recordtable.core.csv_export import CSVExportError
from recordtable.i18n import _
from recordtable.log import configure_logging, logger
from recordtable.settings import AppSettings, load_app_settings

from .commands import COMMANDS, RecordSourceError

APP_NAME = "recordtable"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    """Construct argument parser for CLI commands."""
    parser = argparse.ArgumentParser(prog=APP_NAME, description=_("Tabular record viewer"))
    parser.add_argument(
        "--settings",
        help=_("path to JSON/TOML settings"),
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        help=_("console log level (defaults to the settings value)"),
    )
    sub = parser.add_subparsers(dest="command", required=True)
    for name, cmd in COMMANDS.items():
        p = sub.add_parser(name, help=cmd.help)
        cmd.add_arguments(p)
        p.set_defaults(func=cmd.func)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.getLevelName(args.log_level) if args.log_level else None
    settings = AppSettings()
    if args.settings:
        try:
            settings = load_app_settings(args.settings)
        except (OSError, ValueError) as exc:
            configure_logging(level or logging.INFO)
            logger.error("cannot load settings from %s: %s", args.settings, exc)
            return 1
    configure_logging(level or settings.ui.log_level)
    preferred_language = settings.ui.language
    if preferred_language:
        i18n.install([preferred_language])
    args.app_settings = settings
    try:
        args.func(args)
    except (RecordSourceError, CSVExportError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
