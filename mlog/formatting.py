"""Line formatting for log messages."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from mlog.levels import level_name


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def timestamp(now: datetime | None = None) -> str:
    """Render a local wall-clock timestamp with whole-second resolution."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def safe_str(value: Any) -> str:
    """Return ``str(value)``, or a placeholder naming the type when that raises."""
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def render_parts(*parts: Any) -> str:
    """Concatenate message parts.

    A space separates two adjacent parts only when neither of them is a string,
    so ``render_parts("id=", 7)`` gives ``"id=7"`` and ``render_parts(1, 2)``
    gives ``"1 2"``.
    """
    pieces: list[str] = []
    previous_is_text = True
    for index, part in enumerate(parts):
        is_text = isinstance(part, str)
        if index > 0 and not is_text and not previous_is_text:
            pieces.append(" ")
        pieces.append(part if is_text else safe_str(part))
        previous_is_text = is_text
    return "".join(pieces)


def render_template(template: str, *args: Any) -> str:
    """Apply ``%``-style substitution without ever raising.

    Args:
        template: Format string such as ``"%s has %d items"``.
        *args: Substitution arguments.

    Returns:
        The substituted text. When the arguments do not fit the template the
        template is kept as-is and the arguments are appended after it.
    """
    text = safe_str(template)
    if not args:
        return text
    try:
        return text % args
    except Exception:
        return " ".join([text, *(safe_str(arg) for arg in args)])


def _line(level: int, message: str, now: datetime | None) -> str:
    return f"[{timestamp(now)}] [{level_name(level)}] {message}"


def format_message(level: int, *parts: Any, now: datetime | None = None) -> str:
    """Build ``[timestamp] [LEVEL] message`` from pre-formatted parts."""
    return _line(level, render_parts(*parts), now)


def format_messagef(template: str, level: int, *args: Any, now: datetime | None = None) -> str:
    """Build ``[timestamp] [LEVEL] message`` from a template and its arguments."""
    return _line(level, render_template(template, *args), now)
