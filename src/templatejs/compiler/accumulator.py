"""Output-accumulator management.

Each generated template function writes into a StringBuilder held in a
local variable (the accumulator). Adjacent output fragments are not
appended one by one: they queue up in the current frame and are written as
a single ``append`` (or a single seeded constructor) when the compiler
reaches a boundary such as a control-flow statement or the function's
return.

Frames form a stack; the top frame is the accumulator currently written to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from templatejs.environment.exceptions import ErrorCode, InternalCompilerError

if TYPE_CHECKING:
    from templatejs.compiler.emitter import Emitter


@dataclass(slots=True)
class AccumulatorFrame:
    """One accumulator variable.

    Attributes:
        name: JavaScript variable holding the builder
        initialized: Whether the variable has been declared and constructed
        pending: Expression fragments not yet written out
    """

    name: str
    initialized: bool = False
    pending: list[str] = field(default_factory=list)


class OutputAccumulator:
    """Stack of accumulator frames writing through an Emitter.

    Args:
        emitter: Destination for flushed statements
        builder: JavaScript constructor for new accumulators
    """

    __slots__ = ("_builder", "_emitter", "_frames")

    def __init__(self, emitter: Emitter, builder: str = "soy.StringBuilder"):
        self._emitter = emitter
        self._builder = builder
        self._frames: list[AccumulatorFrame] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def _top(self) -> AccumulatorFrame:
        if not self._frames:
            raise InternalCompilerError(
                "no active output accumulator", code=ErrorCode.STACK_UNDERFLOW
            )
        return self._frames[-1]

    def push_frame(self, name: str) -> None:
        self._frames.append(AccumulatorFrame(name))

    def pop_frame(self) -> None:
        """Discard the top frame.

        The frame must already be flushed; queued output would otherwise be
        lost silently.
        """
        frame = self._top()
        if frame.pending:
            raise InternalCompilerError(
                f"accumulator {frame.name!r} popped with {len(frame.pending)} unflushed "
                "fragment(s)",
                code=ErrorCode.UNFLUSHED_OUTPUT,
            )
        self._frames.pop()

    @property
    def current_name(self) -> str:
        return self._top().name

    def is_initialized(self) -> bool:
        return self._top().initialized

    def mark_initialized(self) -> None:
        self._top().initialized = True

    def ensure_initialized(self) -> None:
        """Declare and construct the current accumulator if not done yet."""
        frame = self._top()
        if not frame.initialized:
            self._emitter.write_line(f"var {frame.name} = new {self._builder}();")
            frame.initialized = True

    def enqueue(self, expr: str) -> None:
        self._top().pending.append(expr)

    def has_pending(self) -> bool:
        return bool(self._top().pending)

    def flush_pending(self) -> None:
        """Write queued fragments as one statement and clear the queue."""
        frame = self._top()
        if not frame.pending:
            return
        args = ", ".join(frame.pending)
        if frame.initialized:
            self._emitter.write_line(f"{frame.name}.append({args});")
        else:
            self._emitter.write_line(f"var {frame.name} = new {self._builder}({args});")
            frame.initialized = True
        frame.pending.clear()
