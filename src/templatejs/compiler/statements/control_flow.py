"""Control flow statement compilation for the templatejs compiler.

Provides mixin for compiling if, range, with, break and continue.

Every control structure starts at a flush boundary: queued output is
written and the accumulator is constructed before the structure opens, so
both branches append to the same, already declared, builder.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from templatejs.nodes import If

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from templatejs.compiler.accumulator import OutputAccumulator
    from templatejs.compiler.emitter import Emitter
    from templatejs.nodes import Break, Continue, Node, Pipe, Range, Variable, With


class ControlFlowMixin:
    """Mixin for compiling control flow statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _emitter: Emitter
        _acc: OutputAccumulator
        _runtime: str
        _dot_stack: list[str]

        # From ExpressionCompilationMixin
        def _compile_pipe(self, pipe: Pipe, context: str) -> str: ...

        # From BasicStatementMixin
        def _compile_declared_pipe(self, pipe: Pipe, context: str) -> str: ...

        # From JSCompiler core
        def _compile_node(self, node: Node) -> None: ...
        def _new_temp(self) -> int: ...
        def _declare_var(self, node: Variable) -> str: ...
        def _resolve_var(self, node: Variable) -> str: ...
        def _variable_scope(self) -> AbstractContextManager[None]: ...

    def _begin_control(self) -> None:
        self._acc.flush_pending()
        self._acc.ensure_initialized()

    def _compile_body(self, nodes: Sequence[Node], dot: str | None = None) -> None:
        """Compile one indented branch, optionally with a new dot."""
        with self._emitter.indented():
            if dot is not None:
                self._dot_stack.append(dot)
            try:
                for child in nodes:
                    self._compile_node(child)
                self._acc.flush_pending()
            finally:
                if dot is not None:
                    self._dot_stack.pop()

    def _truth(self, value: str) -> str:
        return f"{self._runtime}.$$truth({value})"

    def _compile_if(self, node: If) -> None:
        """Compile {{if}} ... {{else if}} ... {{else}} ... {{end}}.

        Generates:
            if (soy.$$truth(cond)) {
              ...
            } else if (soy.$$truth(cond2)) {
              ...
            } else {
              ...
            }
        """
        self._begin_control()
        with self._variable_scope():
            test = self._compile_declared_pipe(node.pipe, "if")
            self._emitter.write_line(f"if ({self._truth(test)}) {{")
            self._compile_if_branches(node)
        self._emitter.write_line("}")

    def _compile_if_branches(self, node: If) -> None:
        self._compile_body(node.body)
        else_ = node.else_
        if not else_:
            return
        if len(else_) == 1 and isinstance(else_[0], If) and not else_[0].pipe.decl:
            nested = else_[0]
            with self._variable_scope():
                # Temporaries of the test are declared at the end of the previous branch
                with self._emitter.indented():
                    test = self._compile_pipe(nested.pipe, "if")
                self._emitter.write_line(f"}} else if ({self._truth(test)}) {{")
                self._compile_if_branches(nested)
            return
        self._emitter.write_line("} else {")
        self._compile_body(else_)

    def _compile_range(self, node: Range) -> None:
        """Compile {{range}} ... {{else}} ... {{end}}.

        Generates:
            var items1 = soy.$$items(value);
            if (items1.length > 0) {
              for (var i1 = 0; i1 < items1.length; i1++) {
                var dot1 = items1[i1][1];
                ...
              }
            } else {
              ...
            }

        The emptiness check is only emitted when there is an else branch.
        """
        self._begin_control()
        n = self._new_temp()
        items, index, dot = f"items{n}", f"i{n}", f"dot{n}"
        emitter = self._emitter
        with self._variable_scope():
            value = self._compile_pipe(node.pipe, "range")
            emitter.write_line(f"var {items} = {self._runtime}.$$items({value});")
            if node.else_:
                emitter.write_line(f"if ({items}.length > 0) {{")
                emitter.increase_indent()

            emitter.write_line(f"for (var {index} = 0; {index} < {items}.length; {index}++) {{")
            with emitter.indented():
                emitter.write_line(f"var {dot} = {items}[{index}][1];")
                self._bind_range_vars(node.pipe, f"{items}[{index}]", dot)
            self._compile_body(node.body, dot=dot)
            emitter.write_line("}")

            if node.else_:
                emitter.decrease_indent()
                emitter.write_line("} else {")
                self._compile_body(node.else_)
                emitter.write_line("}")

    def _bind_range_vars(self, pipe: Pipe, pair: str, element: str) -> None:
        # One variable takes the element; two take the key and the element
        if not pipe.decl:
            return
        if len(pipe.decl) == 1:
            bindings = [(pipe.decl[0], element)]
        else:
            bindings = [(pipe.decl[0], f"{pair}[0]"), (pipe.decl[1], element)]
        for var, value in bindings:
            if pipe.is_assign:
                self._emitter.write_line(f"{self._resolve_var(var)} = {value};")
            else:
                self._emitter.write_line(f"var {self._declare_var(var)} = {value};")

    def _compile_with(self, node: With) -> None:
        """Compile {{with}} ... {{else}} ... {{end}}.

        Generates:
            var with1 = value;
            if (soy.$$truth(with1)) {
              ...dot is with1...
            } else {
              ...
            }
        """
        self._begin_control()
        name = f"with{self._new_temp()}"
        with self._variable_scope():
            value = self._compile_declared_pipe(node.pipe, "with")
            self._emitter.write_line(f"var {name} = {value};")
            self._emitter.write_line(f"if ({self._truth(name)}) {{")
            self._compile_body(node.body, dot=name)
            if node.else_:
                self._emitter.write_line("} else {")
                self._compile_body(node.else_)
        self._emitter.write_line("}")

    def _compile_break(self, node: Break) -> None:
        self._acc.flush_pending()
        self._emitter.write_line("break;")

    def _compile_continue(self, node: Continue) -> None:
        self._acc.flush_pending()
        self._emitter.write_line("continue;")
