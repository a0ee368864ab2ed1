"""
Diagnostic sinks.

The evaluator reports errors as text fragments; a single message may arrive
in several calls ("Unknown character: ", "$", "\\n"). These sinks collect,
log or print the fragments.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional, TextIO


class CollectingSink:
    """Collects fragments in memory, optionally forwarding each one."""

    def __init__(self, forward: Optional[Callable[[str], None]] = None):
        self.fragments: List[str] = []
        self._forward = forward

    def __call__(self, fragment: str) -> None:
        self.fragments.append(fragment)
        if self._forward is not None:
            self._forward(fragment)

    @property
    def text(self) -> str:
        """All fragments concatenated."""
        return "".join(self.fragments)

    @property
    def lines(self) -> List[str]:
        """Non-empty diagnostic lines."""
        return [line for line in self.text.splitlines() if line]

    def clear(self) -> None:
        self.fragments.clear()


class LoggingSink:
    """
    Sends diagnostics to a logger, one record per line.

    Fragments are buffered until a newline arrives. Call flush() to emit a
    trailing line that was never terminated.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        level: int = logging.WARNING,
    ):
        self.logger = logger or logging.getLogger("backend.condparser")
        self.level = level
        self._buffer: List[str] = []

    def __call__(self, fragment: str) -> None:
        while "\n" in fragment:
            head, fragment = fragment.split("\n", 1)
            self._buffer.append(head)
            self._emit()
        if fragment:
            self._buffer.append(fragment)

    def flush(self) -> None:
        if self._buffer:
            self._emit()

    def _emit(self) -> None:
        line = "".join(self._buffer)
        self._buffer = []
        if line:
            self.logger.log(self.level, line)


class StreamSink:
    """Writes fragments verbatim to a text stream (stderr by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def __call__(self, fragment: str) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        stream.write(fragment)
