"""Expression compilation for the templatejs compiler.

Provides mixin for lowering pipelines, commands and operands to JavaScript
expression strings.

Pipeline stages are chained left to right; the value of each stage becomes
the final argument of the next one:

    {{.Title | printf "%s!" | html}}
    soy.$$escapeHtml(soy.$$sprintf('%s!', opt_data.Title))

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from templatejs.compiler.utils import property_access, quote_js_string
from templatejs.environment.exceptions import ErrorCode
from templatejs.nodes import (
    Bool,
    Chain,
    Command,
    Dot,
    Expr,
    Field,
    Identifier,
    Nil,
    Number,
    Pipe,
    String,
    Variable,
    describe,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from templatejs.compiler.emitter import Emitter
    from templatejs.environment.exceptions import TemplateCompileError
    from templatejs.nodes import Node

# Literal operands that can be printed without the runtime print helper
LITERAL_OPERANDS = (Bool, Number, String)

# Built-ins evaluated lazily: name -> whether a truthy operand ends the chain
SHORT_CIRCUIT = {"and": False, "or": True}


class ExpressionCompilationMixin:
    """Mixin for compiling pipelines and operands.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _functions: Mapping[str, str]
        _dot_stack: list[str]
        _emitter: Emitter
        _runtime: str

        def _error(
            self,
            message: str,
            node: Node,
            code: ErrorCode = ErrorCode.UNSUPPORTED_CONSTRUCT,
        ) -> TemplateCompileError: ...
        def _resolve_var(self, node: Variable) -> str: ...
        def _new_temp(self) -> int: ...

    @property
    def _dot(self) -> str:
        return self._dot_stack[-1]

    def _compile_pipe(self, pipe: Pipe, context: str) -> str:
        """Lower the commands of ``pipe`` to one expression.

        Declarations are ignored here; statement lowering binds them.
        """
        if not pipe.cmds:
            raise self._error(
                f"missing value for {context}", pipe, code=ErrorCode.EMPTY_PIPELINE
            )
        value: str | None = None
        for cmd in pipe.cmds:
            value = self._compile_command(cmd, value)
        assert value is not None
        return value

    def _compile_command(self, cmd: Command, final: str | None) -> str:
        """Lower one pipeline stage; ``final`` is the previous stage's value."""
        if not cmd.args:
            raise self._error("empty command", cmd, code=ErrorCode.EMPTY_PIPELINE)
        first, rest = cmd.args[0], cmd.args[1:]
        args = [self._compile_arg(arg) for arg in rest]
        if final is not None:
            args.append(final)
        has_args = bool(args)

        if isinstance(first, Identifier):
            callee = self._callee(first)
            if self._is_short_circuit(first, callee):
                return self._compile_short_circuit(first, args)
            return f"{callee}({', '.join(args)})"
        if isinstance(first, Field):
            return self._compile_field_chain(self._dot, first.ident, args, has_args)
        if isinstance(first, Chain):
            receiver = f"({self._compile_arg(first.node)})"
            return self._compile_field_chain(receiver, first.field, args, has_args)
        if isinstance(first, Variable) and len(first.ident) > 1:
            return self._compile_field_chain(
                self._resolve_var(first), first.ident[1:], args, has_args
            )
        if isinstance(first, Nil):
            raise self._error("nil is not a command", first, code=ErrorCode.NOT_A_FUNCTION)
        if has_args:
            raise self._error(
                f"can't give argument to non-function {describe(first)}",
                first,
                code=ErrorCode.NOT_A_FUNCTION,
            )
        return self._compile_arg(first)

    def _compile_field_chain(
        self, receiver: str, fields: Sequence[str], args: list[str], has_args: bool
    ) -> str:
        """Lower ``receiver.A.B``; with arguments the last field is called."""
        expr = receiver
        for name in fields:
            expr = property_access(expr, name)
        if has_args:
            return f"{expr}({', '.join(args)})"
        return expr

    def _compile_arg(self, node: Expr) -> str:
        """Lower an operand in argument position."""
        if isinstance(node, Dot):
            return self._dot
        if isinstance(node, Nil):
            return "null"
        if isinstance(node, Bool):
            return "true" if node.value else "false"
        if isinstance(node, String):
            return quote_js_string(node.value)
        if isinstance(node, Number):
            return self._compile_number(node)
        if isinstance(node, Field):
            return self._compile_field_chain(self._dot, node.ident, [], False)
        if isinstance(node, Variable):
            return self._compile_field_chain(self._resolve_var(node), node.ident[1:], [], False)
        if isinstance(node, Chain):
            receiver = f"({self._compile_arg(node.node)})"
            return self._compile_field_chain(receiver, node.field, [], False)
        if isinstance(node, Identifier):
            # A bare function name in argument position is called with no arguments
            callee = self._callee(node)
            if self._is_short_circuit(node, callee):
                return self._compile_short_circuit(node, [])
            return f"{callee}()"
        if isinstance(node, Pipe):
            if node.decl:
                raise self._error(
                    "variable declaration in parenthesized pipeline", node
                )
            return self._compile_pipe(node, "parenthesized pipeline")
        raise self._error(f"unexpected operand {type(node).__name__}", node)

    def _callee(self, node: Identifier) -> str:
        callee = self._functions.get(node.name)
        if callee is None:
            raise self._error(
                f"function {node.name!r} not defined", node, code=ErrorCode.NOT_A_FUNCTION
            )
        return callee

    def _is_short_circuit(self, node: Identifier, callee: str) -> bool:
        # Only the runtime's own helpers; an overriding function is called normally
        return node.name in SHORT_CIRCUIT and callee == f"{self._runtime}.$${node.name}"

    def _compile_short_circuit(self, node: Identifier, args: list[str]) -> str:
        """Lower ``and``/``or`` so later operands run only when needed.

        ``and`` yields the first falsy operand or the last one; ``or`` yields
        the first truthy operand or the last one:

            {{and .X .X.Y}}
            (and1 = opt_data.X, !soy.$$truth(and1) ? and1 : opt_data.X.Y)

        The temporary is declared with ``var`` on the line before.
        """
        if not args:
            raise self._error(
                f"wrong number of args for {node.name}: want at least 1 got 0",
                node,
                code=ErrorCode.NOT_A_FUNCTION,
            )
        if len(args) == 1:
            return args[0]
        temp = f"{node.name}{self._new_temp()}"
        self._emitter.write_line(f"var {temp};")
        test = f"{self._runtime}.$$truth({temp})"
        if not SHORT_CIRCUIT[node.name]:
            test = f"!{test}"
        expr = args[-1]
        for arg in reversed(args[:-1]):
            expr = f"({temp} = {arg}, {test} ? {temp} : {expr})"
        return expr

    def _compile_number(self, node: Number) -> str:
        """Lower a numeric constant to a JavaScript number literal.

        Rules:
            - character constants become their code point
            - legacy octal ``017`` becomes ``0o17``
            - hexadecimal floats become their decimal value
            - everything else keeps its text, without digit separators
        """
        if node.is_complex:
            raise self._error(f"complex number {node.text} is not supported", node)
        if node.is_char:
            return str(node.int_value)
        text = node.text.replace("_", "")
        sign = text[0] if text[0] in "+-" else ""
        digits = text[len(sign):]
        prefix = digits[:2].lower()
        if prefix == "0x" and any(ch in digits for ch in ".pP"):
            return repr(node.float_value)
        if node.is_int and len(digits) > 1 and digits[0] == "0" and prefix not in ("0x", "0o", "0b"):
            return f"{sign}0o{digits[1:]}"
        return text
