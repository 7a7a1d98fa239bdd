"""Indentation-aware text assembly for generated JavaScript.

The Emitter is the only writer of the output buffer. Everything the
compiler produces flows through ``write``/``write_line`` so indentation is
tracked in one place.

Example:
    >>> emitter = Emitter()
    >>> emitter.write_line("if (x) {")
    >>> with emitter.indented():
    ...     emitter.write_line("y();")
    >>> emitter.write_line("}")
    >>> print(emitter.getvalue(), end="")
    if (x) {
      y();
    }
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager

from templatejs.environment.exceptions import ErrorCode, InternalCompilerError

INDENT = "  "


class Emitter:
    """Append-only text buffer with a current indentation level."""

    __slots__ = ("_buffer", "_indent", "_lines")

    def __init__(self) -> None:
        self._buffer = io.StringIO()
        self._indent = 0
        self._lines = 0

    @property
    def indent_level(self) -> int:
        return self._indent

    @property
    def line_count(self) -> int:
        """Number of newlines written so far."""
        return self._lines

    def write(self, *parts: str) -> None:
        """Append ``parts`` verbatim."""
        for part in parts:
            self._buffer.write(part)
            self._lines += part.count("\n")

    def write_indent(self) -> None:
        self._buffer.write(INDENT * self._indent)

    def write_line(self, *parts: str) -> None:
        """Write one indented line. With no parts, write an empty line."""
        if parts:
            self.write_indent()
            self.write(*parts)
        self._buffer.write("\n")
        self._lines += 1

    def increase_indent(self) -> None:
        self._indent += 1

    def decrease_indent(self) -> None:
        if self._indent == 0:
            raise InternalCompilerError(
                "indentation decreased below zero", code=ErrorCode.INDENT_UNDERFLOW
            )
        self._indent -= 1

    @contextmanager
    def indented(self) -> Iterator[None]:
        """Indent everything written inside the block by one level."""
        self.increase_indent()
        try:
            yield
        finally:
            self.decrease_indent()

    def getvalue(self) -> str:
        return self._buffer.getvalue()
