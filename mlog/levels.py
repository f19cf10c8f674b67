"""Severity levels and threshold filtering."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class Severity(IntEnum):
    """Ordered log severities."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4


_ALIASES = {"WARN": Severity.WARNING}


def level_name(level: Any) -> str:
    """Return the tag rendered for a level, or UNKNOWN for values outside the set."""
    try:
        return Severity(level).name
    except ValueError:
        return "UNKNOWN"


def should_emit(level: int, min_level: int) -> bool:
    return level >= min_level


def parse_level(value: Any, default: Severity = Severity.INFO) -> Severity:
    """Coerce a level name, number or Severity into a Severity.

    Args:
        value: Raw level such as ``"debug"``, ``"WARN"``, ``3`` or a Severity.
        default: Level returned when ``value`` is not recognized.

    Returns:
        Matching Severity, or ``default``.
    """
    if isinstance(value, Severity):
        return value
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        try:
            return Severity(value)
        except ValueError:
            return default
    if isinstance(value, str):
        key = value.strip().upper()
        if key in _ALIASES:
            return _ALIASES[key]
        if key in Severity.__members__:
            return Severity[key]
    return default
