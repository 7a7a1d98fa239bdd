"""Basic statement compilation for the templatejs compiler.

Provides mixin for compiling text and actions, and the variable binding
shared by actions and control structures.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from templatejs.compiler.expressions import LITERAL_OPERANDS
from templatejs.compiler.utils import quote_js_string

if TYPE_CHECKING:
    from templatejs.compiler.accumulator import OutputAccumulator
    from templatejs.compiler.emitter import Emitter
    from templatejs.nodes import Action, Pipe, Text, Variable


class BasicStatementMixin:
    """Mixin for compiling basic output statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _emitter: Emitter
        _acc: OutputAccumulator
        _runtime: str

        # From ExpressionCompilationMixin
        def _compile_pipe(self, pipe: Pipe, context: str) -> str: ...

        # From JSCompiler core
        def _declare_var(self, node: Variable) -> str: ...
        def _resolve_var(self, node: Variable) -> str: ...

    def _compile_text(self, node: Text) -> None:
        """Queue literal text: output.append('...')."""
        if node.value:
            self._acc.enqueue(quote_js_string(node.value))

    def _compile_action(self, node: Action) -> None:
        """Compile {{ pipeline }} and {{ $x := pipeline }}.

        Literal pipelines are queued as they are; every other value goes
        through the runtime print helper. Declarations print nothing.
        """
        pipe = node.pipe
        if pipe.decl:
            self._compile_declared_pipe(pipe, "command")
            return

        value = self._compile_pipe(pipe, "command")
        cmd = pipe.cmds[0]
        if len(pipe.cmds) == 1 and len(cmd.args) == 1 and isinstance(cmd.args[0], LITERAL_OPERANDS):
            self._acc.enqueue(value)
        else:
            self._acc.enqueue(f"{self._runtime}.$$print({value})")

    def _compile_declared_pipe(self, pipe: Pipe, context: str) -> str:
        """Evaluate ``pipe`` and bind its declared variable, if any.

        Returns the expression holding the pipeline's value: the bound
        variable when there is a declaration, else the pipeline itself.
        """
        value = self._compile_pipe(pipe, context)
        if not pipe.decl:
            return value

        self._acc.flush_pending()
        target = pipe.decl[0]
        if pipe.is_assign:
            name = self._resolve_var(target)
            self._emitter.write_line(f"{name} = {value};")
        else:
            name = self._declare_var(target)
            self._emitter.write_line(f"var {name} = {value};")
        return name
