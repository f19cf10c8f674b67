"""Leveled, buffered logger with file+console output."""

from __future__ import annotations

import errno
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, TextIO

from mlog.config import LoggerConfig
from mlog.formatting import format_message, format_messagef
from mlog.levels import Severity, parse_level, should_emit
from mlog.locks import ReadWriteLock
from mlog.sinks import DEFAULT_BUFFER_SIZE, BufferedWriter, ConsoleWriter, TeeWriter


ExitHook = Callable[[int], Any]


class Logger:
    """Thread-safe leveled logger.

    Messages below the current level are dropped before any formatting. Accepted
    messages are written as one line each through a buffered sink that targets
    the console, or a file teed with the console after ``set_output``. A FATAL
    message flushes, closes the file and calls the exit hook, which defaults to
    ``os._exit``.
    """

    def __init__(
        self,
        level: Severity = Severity.INFO,
        stream: TextIO | None = None,
        *,
        tee: bool = True,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        exit_hook: ExitHook | None = None,
        exit_code: int = 1,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._level = parse_level(level)
        self._console = ConsoleWriter(stream)
        self._tee = tee
        self._buffer_size = buffer_size
        self._sink = BufferedWriter(self._console, buffer_size)
        self._file: TextIO | None = None
        self._output_path: Path | None = None
        self._exit_hook: ExitHook = exit_hook or os._exit
        self._exit_code = exit_code if exit_code != 0 else 1
        self._clock = clock or datetime.now
        self._lock = ReadWriteLock()

    @classmethod
    def from_config(
        cls,
        config: LoggerConfig,
        stream: TextIO | None = None,
        exit_hook: ExitHook | None = None,
    ) -> "Logger":
        """Build a logger from a LoggerConfig.

        Args:
            config: Logger settings.
            stream: Optional console stream override.
            exit_hook: Optional replacement for process termination on FATAL.

        Returns:
            Configured Logger.

        Raises:
            OSError: If ``config.output`` is set and cannot be opened.
        """
        logger = cls(
            level=config.level,
            stream=stream,
            tee=config.tee_console,
            buffer_size=config.buffer_size,
            exit_hook=exit_hook,
            exit_code=config.exit_code,
        )
        if config.output is not None:
            logger.set_output(config.output)
        return logger

    @property
    def level(self) -> Severity:
        with self._lock.read_locked():
            return self._level

    @property
    def output_path(self) -> Path | None:
        """Path of the file currently receiving output, if any."""
        with self._lock.read_locked():
            return self._output_path

    def set_level(self, level: Severity) -> None:
        """Change the minimum level; unrecognized values keep the current one."""
        with self._lock.write_locked():
            self._level = parse_level(level, self._level)

    def set_output(self, path: str | os.PathLike[str], tee: bool | None = None) -> None:
        """Redirect output to a file opened for append.

        The file is opened before anything else changes, so a path that cannot
        be opened leaves the current sink in place. On success previously
        buffered text is flushed to the old destination, the new sink is
        installed and the previous file, if any, is closed.

        Args:
            path: File to append to; created when missing.
            tee: Also write to the console. Defaults to the logger's setting.

        Raises:
            OSError: If the file cannot be opened, the old buffer cannot be
                flushed, or the previous file fails to close. Only in the last
                case has the new output already been installed.
        """
        use_tee = self._tee if tee is None else tee
        try:
            file = open(path, "a", encoding="utf-8")
        except ValueError as exc:
            raise OSError(errno.EINVAL, str(exc)) from exc
        with self._lock.write_locked():
            try:
                self._sink.flush()
            except OSError:
                file.close()
                raise
            previous = self._file
            target = TeeWriter(file, self._console) if use_tee else file
            self._sink = BufferedWriter(target, self._buffer_size)
            self._file = file
            self._output_path = Path(path)
            if previous is not None:
                previous.close()

    def flush(self) -> None:
        """Write buffered lines out and sync the backing file.

        Raises:
            OSError: The first error from flushing or syncing.
        """
        with self._lock.write_locked():
            self._flush_locked()

    def close(self) -> None:
        """Flush, close the backing file and fall back to console output.

        Closing an already closed logger does nothing.

        Raises:
            OSError: The first error from flushing, syncing or closing.
        """
        with self._lock.write_locked():
            self._close_locked()

    def log(self, level: Severity, *parts: Any) -> None:
        if not self._enabled(level):
            return
        self._emit(level, lambda: format_message(level, *parts, now=self._clock()))

    def logf(self, template: str, level: Severity, *args: Any) -> None:
        if not self._enabled(level):
            return
        self._emit(level, lambda: format_messagef(template, level, *args, now=self._clock()))

    def debug(self, *parts: Any) -> None:
        self.log(Severity.DEBUG, *parts)

    def debugf(self, template: str, *args: Any) -> None:
        self.logf(template, Severity.DEBUG, *args)

    def info(self, *parts: Any) -> None:
        self.log(Severity.INFO, *parts)

    def infof(self, template: str, *args: Any) -> None:
        self.logf(template, Severity.INFO, *args)

    def warn(self, *parts: Any) -> None:
        self.log(Severity.WARNING, *parts)

    def warnf(self, template: str, *args: Any) -> None:
        self.logf(template, Severity.WARNING, *args)

    def error(self, *parts: Any) -> None:
        self.log(Severity.ERROR, *parts)

    def errorf(self, template: str, *args: Any) -> None:
        self.logf(template, Severity.ERROR, *args)

    def fatal(self, *parts: Any) -> None:
        self.log(Severity.FATAL, *parts)

    def fatalf(self, template: str, *args: Any) -> None:
        self.logf(template, Severity.FATAL, *args)

    def _enabled(self, level: Severity) -> bool:
        with self._lock.read_locked():
            return should_emit(level, self._level)

    def _emit(self, level: Severity, render: Callable[[], str]) -> None:
        # Nothing on this path raises into the caller, and FATAL always reaches
        # the exit hook.
        line: str | None = None
        try:
            line = render()
        except Exception:
            pass
        with self._lock.write_locked():
            if line is not None:
                try:
                    self._sink.write(line + "\n")
                except Exception:
                    pass
            if level == Severity.FATAL:
                try:
                    self._shutdown_locked()
                finally:
                    self._exit_hook(self._exit_code)

    def _shutdown_locked(self) -> None:
        """Flush, sync and close with every step attempted and no error raised."""
        file = self._file
        steps = [self._sink.flush]
        if file is not None:
            steps += [file.flush, lambda: os.fsync(file.fileno()), file.close]
        for step in steps:
            try:
                step()
            except Exception:
                pass
        if file is not None:
            self._file = None
            self._output_path = None
            self._sink = BufferedWriter(self._console, self._buffer_size)

    def _flush_locked(self) -> None:
        error: OSError | None = None
        try:
            self._sink.flush()
        except OSError as exc:
            error = exc
        if self._file is not None:
            try:
                os.fsync(self._file.fileno())
            except OSError as exc:
                if error is None:
                    error = exc
        if error is not None:
            raise error

    def _close_locked(self) -> None:
        error: OSError | None = None
        try:
            self._flush_locked()
        except OSError as exc:
            error = exc
        if self._file is not None:
            file = self._file
            self._file = None
            self._output_path = None
            self._sink = BufferedWriter(self._console, self._buffer_size)
            try:
                file.close()
            except OSError as exc:
                if error is None:
                    error = exc
        if error is not None:
            raise error
