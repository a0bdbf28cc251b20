"""Service package exports."""

from __future__ import annotations

import importlib
from typing import Any

__all__ = ["olt"]


def __getattr__(name: str) -> Any:
    if name == "olt":
        return importlib.import_module("app.services.olt")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
