"""Helpers for reading loosely typed spreadsheet and API rows."""

from __future__ import annotations

import math
from typing import Any


def read_field(row: Any, *keys: str) -> Any:
    """Return the first non-empty value stored under any of ``keys``.

    Rows arrive as plain dicts or as sheet row objects exposing ``get``.
    """
    getter = getattr(row, "get", None)
    if getter is None:
        return None
    for key in keys:
        try:
            value = getter(key)
        except (KeyError, TypeError, ValueError):
            continue
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def read_text(row: Any, *keys: str) -> str | None:
    value = read_field(row, *keys)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        number = float(str(value).replace(",", "").strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def to_int(value: Any, default: int = 0) -> int:
    number = to_float(value, float(default))
    return int(number)


def to_non_negative_int(value: Any) -> int:
    return max(0, to_int(value, 0))
