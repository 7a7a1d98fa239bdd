"""Template structure statement compilation for the templatejs compiler.

Provides mixin for compiling {{template}} invocations ({{block}} is parsed
into a definition plus an invocation, so it arrives here as well).

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from templatejs.environment.exceptions import ErrorCode

if TYPE_CHECKING:
    from templatejs.compiler.accumulator import OutputAccumulator
    from templatejs.environment.exceptions import TemplateCompileError
    from templatejs.nodes import Node, Pipe, Template


class TemplateStructureMixin:
    """Mixin for compiling template invocations.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _acc: OutputAccumulator

        # From ExpressionCompilationMixin
        def _compile_pipe(self, pipe: Pipe, context: str) -> str: ...

        # From JSCompiler core
        def _qualified_name(self, name: str, node: Node | None = None) -> str: ...
        def _error(
            self,
            message: str,
            node: Node,
            code: ErrorCode = ErrorCode.UNSUPPORTED_CONSTRUCT,
        ) -> TemplateCompileError: ...

    def _compile_template(self, node: Template) -> None:
        """Compile {{template "name" pipeline}}.

        Queues the called function's string result:
            output.append(app.views.name(opt_data.User));
        """
        self._acc.flush_pending()
        data = "null"
        if node.pipe is not None:
            if node.pipe.decl:
                raise self._error("variable declaration in template invocation", node.pipe)
            data = self._compile_pipe(node.pipe, "template clause")
        self._acc.enqueue(f"{self._qualified_name(node.name, node)}({data})")
