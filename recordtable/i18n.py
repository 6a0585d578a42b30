"""Runtime gettext translations for user-visible table strings."""

from __future__ import annotations

import gettext as _gettext
import os
from collections.abc import Iterable, Sequence
from io import BytesIO
from pathlib import Path
from typing import Final

import polib
from gettext import GNUTranslations, NullTranslations, _expand_lang

DOMAIN = "recordtable"
LOCALE_DIR = Path(__file__).resolve().parent / "locale"

_active: NullTranslations = NullTranslations()


def gettext(message: str) -> str:
    """Translate *message* with the active catalogue."""
    return _active.gettext(message)


def ngettext(singular: str, plural: str, number: int) -> str:
    """Translate a message whose form depends on *number*."""
    return _active.ngettext(singular, plural, number)


_: Final = gettext


def install(
    languages: Iterable[str] | None = None,
    *,
    localedir: str | os.PathLike[str] | None = None,
    domain: str = DOMAIN,
) -> NullTranslations:
    """Activate the catalogue for *languages* (environment when ``None``).

    Compiled ``.mo`` files win; otherwise the first matching ``.po`` source is
    compiled in memory. Missing catalogues leave messages untranslated.
    """
    directory = Path(localedir) if localedir is not None else LOCALE_DIR
    requested = _requested_languages(languages)
    translation = _gettext.translation(
        domain,
        localedir=str(directory),
        languages=requested or None,
        fallback=True,
    )
    if type(translation) is NullTranslations:
        source = _po_catalogue(domain, directory, requested)
        if source is not None:
            translation = source
    global _active
    _active = translation
    return translation


def reset() -> None:
    """Drop the active catalogue."""
    global _active
    _active = NullTranslations()


def _requested_languages(languages: Iterable[str] | None) -> list[str]:
    if languages is None:
        raw: list[str] = []
        for name in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
            value = os.environ.get(name)
            if value:
                raw.extend(part.strip() for part in value.split(":") if part.strip())
        languages = raw
    expanded: list[str] = []
    for language in languages:
        if not language:
            continue
        for candidate in _expand_lang(language):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


def _po_catalogue(
    domain: str, directory: Path, languages: Sequence[str]
) -> GNUTranslations | None:
    for language in languages:
        po_path = directory / language / "LC_MESSAGES" / f"{domain}.po"
        if not po_path.exists():
            continue
        catalogue = polib.pofile(str(po_path))
        return GNUTranslations(BytesIO(catalogue.to_binary()))
    return None


__all__ = ["DOMAIN", "LOCALE_DIR", "_", "gettext", "install", "ngettext", "reset"]
