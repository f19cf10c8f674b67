"""Leveled logging with a process-wide default logger.

The module-level functions forward to the logger returned by ``get_logger``,
which is created on first use with level INFO writing to the console.
Applications that want their own instance can construct ``Logger`` directly or
install it with ``set_default``.
"""

from __future__ import annotations

import os
import threading
from typing import Any

from mlog.config import LoggerConfig, config_from_dict, config_from_env
from mlog.levels import Severity, level_name, parse_level, should_emit
from mlog.logger import Logger

__version__ = "0.1.0"

_default: Logger | None = None
_default_lock = threading.Lock()


def get_logger() -> Logger:
    """Return the shared logger instance, creating it on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Logger()
        return _default


def set_default(logger: Logger) -> None:
    """Install ``logger`` as the shared instance."""
    global _default
    with _default_lock:
        _default = logger


def reset_default() -> None:
    """Forget the shared instance without closing it."""
    global _default
    with _default_lock:
        _default = None


def set_level(level: Severity) -> None:
    get_logger().set_level(level)


def set_output(path: str | os.PathLike[str], tee: bool | None = None) -> None:
    get_logger().set_output(path, tee=tee)


def flush() -> None:
    get_logger().flush()


def close() -> None:
    get_logger().close()


def log(level: Severity, *parts: Any) -> None:
    get_logger().log(level, *parts)


def logf(template: str, level: Severity, *args: Any) -> None:
    get_logger().logf(template, level, *args)


def debug(*parts: Any) -> None:
    get_logger().debug(*parts)


def debugf(template: str, *args: Any) -> None:
    get_logger().debugf(template, *args)


def info(*parts: Any) -> None:
    get_logger().info(*parts)


def infof(template: str, *args: Any) -> None:
    get_logger().infof(template, *args)


def warn(*parts: Any) -> None:
    get_logger().warn(*parts)


def warnf(template: str, *args: Any) -> None:
    get_logger().warnf(template, *args)


def error(*parts: Any) -> None:
    get_logger().error(*parts)


def errorf(template: str, *args: Any) -> None:
    get_logger().errorf(template, *args)


def fatal(*parts: Any) -> None:
    """Log at FATAL, flush, close the output file and end the process."""
    get_logger().fatal(*parts)


def fatalf(template: str, *args: Any) -> None:
    """Formatted variant of ``fatal``."""
    get_logger().fatalf(template, *args)


__all__ = [
    "Logger",
    "LoggerConfig",
    "Severity",
    "close",
    "config_from_dict",
    "config_from_env",
    "debug",
    "debugf",
    "error",
    "errorf",
    "fatal",
    "fatalf",
    "flush",
    "get_logger",
    "info",
    "infof",
    "level_name",
    "log",
    "logf",
    "parse_level",
    "reset_default",
    "set_default",
    "set_level",
    "set_output",
    "should_emit",
    "warn",
    "warnf",
]
