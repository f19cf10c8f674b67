"""Output targets and the buffered writer in front of them."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


DEFAULT_BUFFER_SIZE = 4096


class Writer(Protocol):
    def write(self, data: str) -> object: ...

    def flush(self) -> None: ...


class ConsoleWriter:
    """Console target that resolves ``sys.stdout`` at write time unless given a stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def write(self, data: str) -> None:
        self.stream.write(data)

    def flush(self) -> None:
        self.stream.flush()


class TeeWriter:
    """Duplicate writes to every target.

    Every target is attempted even when an earlier one fails; the first error
    is raised once all targets have been tried.
    """

    def __init__(self, *targets: Writer) -> None:
        self._targets = targets

    @property
    def targets(self) -> tuple[Writer, ...]:
        return self._targets

    def _each(self, method: str, *args: str) -> None:
        error: Exception | None = None
        for target in self._targets:
            try:
                getattr(target, method)(*args)
            except Exception as exc:
                if error is None:
                    error = exc
        if error is not None:
            raise error

    def write(self, data: str) -> None:
        self._each("write", data)

    def flush(self) -> None:
        self._each("flush")


class BufferedWriter:
    """Accumulate text and hand it to the target in batches."""

    def __init__(self, target: Writer, size: int = DEFAULT_BUFFER_SIZE) -> None:
        self._target = target
        self._size = size if size > 0 else DEFAULT_BUFFER_SIZE
        self._pending: list[str] = []
        self._pending_size = 0

    @property
    def target(self) -> Writer:
        return self._target

    @property
    def buffered(self) -> int:
        """Number of characters waiting to be written."""
        return self._pending_size

    def write(self, data: str) -> None:
        self._pending.append(data)
        self._pending_size += len(data)
        if self._pending_size >= self._size:
            self.flush()

    def flush(self) -> None:
        """Write pending text to the target and flush it.

        Pending text is released before the target is written, so a failed
        flush drops that batch rather than repeating it on the next call.
        """
        if self._pending:
            data = "".join(self._pending)
            self._pending = []
            self._pending_size = 0
            self._target.write(data)
        self._target.flush()
