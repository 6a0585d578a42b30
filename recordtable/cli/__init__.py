"""Command-line interface package for recordtable.

:func:`main` is resolved lazily so that importing ``recordtable.cli.main``
directly is not shadowed by the function of the same name.
"""

from importlib import import_module
from typing import Any


def __getattr__(name: str) -> Any:
    if name == "main":
        return import_module(".main", __name__).main
    raise AttributeError(f"module {__name__!r} has no attribute {name}")


__all__ = ["main"]
