"""Logger configuration dataclass and builders."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from mlog.levels import Severity, parse_level
from mlog.sinks import DEFAULT_BUFFER_SIZE


ENV_KEYS = {
    "level": "MLOG_LEVEL",
    "output": "MLOG_OUTPUT",
    "tee_console": "MLOG_TEE",
    "buffer_size": "MLOG_BUFFER_SIZE",
    "exit_code": "MLOG_EXIT_CODE",
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


@dataclass
class LoggerConfig:
    """Logger settings."""

    level: Severity = Severity.INFO
    output: Path | None = None
    tee_console: bool = True
    buffer_size: int = DEFAULT_BUFFER_SIZE
    exit_code: int = 1


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return default


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_path(value: Any) -> Path | None:
    if not value:
        return None
    return Path(str(value)).expanduser()


def config_from_dict(raw: Mapping[str, Any]) -> LoggerConfig:
    """Build a LoggerConfig from a raw dictionary.

    Unknown keys are ignored and unusable values fall back to the defaults.

    Args:
        raw: Raw settings keyed by LoggerConfig field name.

    Returns:
        Normalized LoggerConfig instance.
    """
    buffer_size = _as_int(raw.get("buffer_size", DEFAULT_BUFFER_SIZE), DEFAULT_BUFFER_SIZE)
    if buffer_size <= 0:
        buffer_size = DEFAULT_BUFFER_SIZE
    exit_code = _as_int(raw.get("exit_code", 1), 1)
    if exit_code == 0:
        exit_code = 1
    return LoggerConfig(
        level=parse_level(raw.get("level"), Severity.INFO),
        output=_as_path(raw.get("output")),
        tee_console=_as_bool(raw.get("tee_console"), True),
        buffer_size=buffer_size,
        exit_code=exit_code,
    )


def config_from_env(environ: Mapping[str, str] | None = None) -> LoggerConfig:
    """Build a LoggerConfig from ``MLOG_*`` environment variables.

    Args:
        environ: Optional mapping to read instead of ``os.environ``.

    Returns:
        LoggerConfig with environment overrides applied over the defaults.
    """
    env = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    for field_name, env_key in ENV_KEYS.items():
        value = env.get(env_key)
        if value is not None and value.strip():
            raw[field_name] = value.strip()
    return config_from_dict(raw)
