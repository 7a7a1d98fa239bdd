"""Pipeline parsing for the templatejs parser.

Provides mixin for parsing pipelines, commands and operands.

Grammar::

    pipeline := [decl] command ( '|' command )*
    decl     := VARIABLE [ ',' VARIABLE ] ( ':=' | '=' )
    command  := operand ( SPACE operand )*
    operand  := term FIELD*
    term     := IDENTIFIER | '.' | 'nil' | VARIABLE | FIELD | BOOL
              | NUMBER | CHAR | STRING | RAW_STRING | '(' pipeline ')'

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from templatejs._types import Token, TokenType
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
    from collections.abc import Sequence

    from templatejs.parser.errors import ParseError

_ESCAPE_RE = re.compile(
    r"""\\(?:
        (?P<simple>[abfnrtv\\'"])
      | (?P<octal>[0-7]{3})
      | x(?P<hex>[0-9a-fA-F]{2})
      | u(?P<u4>[0-9a-fA-F]{4})
      | U(?P<u8>[0-9a-fA-F]{8})
    )""",
    re.VERBOSE,
)

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_LEGACY_OCTAL_RE = re.compile(r"0[0-7_]+")

# Operand kinds that cannot receive a piped value
_NON_EXECUTABLE = (Bool, Dot, Nil, Number, String)


def unquote(text: str) -> str:
    """Decode a Go interpreted (``"..."``/``'...'``) or raw (```...```) literal.

    Raises ValueError on a malformed escape sequence.
    """
    if text.startswith("`"):
        return text[1:-1].replace("\r", "")
    body = text[1:-1]
    out: list[str] = []
    pos = 0
    while True:
        slash = body.find("\\", pos)
        if slash < 0:
            out.append(body[pos:])
            return "".join(out)
        out.append(body[pos:slash])
        match = _ESCAPE_RE.match(body, slash)
        if match is None:
            raise ValueError(f"invalid escape sequence in {text}")
        if match.group("simple"):
            out.append(_SIMPLE_ESCAPES[match.group("simple")])
        elif match.group("octal"):
            out.append(chr(int(match.group("octal"), 8)))
        else:
            digits = match.group("hex") or match.group("u4") or match.group("u8")
            out.append(chr(int(digits, 16)))
        pos = match.end()


class ExpressionParsingMixin:
    """Mixin for parsing pipelines and their operands.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _tokens: Sequence[Token]
        _pos: int
        _funcs: frozenset[str]
        _vars: list[str]

        def _advance(self) -> Token: ...
        def _backup(self, count: int = 1) -> None: ...
        def _peek(self) -> Token: ...
        def _next_non_space(self) -> Token: ...
        def _peek_non_space(self) -> Token: ...
        def _error(
            self,
            message: str,
            token: Token | None = None,
            suggestion: str | None = None,
            code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN,
        ) -> ParseError: ...
        def _unexpected(self, token: Token, context: str) -> ParseError: ...
        def _declare_var(self, name: str) -> None: ...
        def _use_var(self, token: Token) -> str: ...

    def _parse_pipeline(self, context: str, end: TokenType) -> Pipe:
        """Parse a pipeline up to (and including) the ``end`` token."""
        start = self._peek_non_space()
        decl, is_assign = self._parse_declarations(context)

        cmds: list[Command] = []
        while True:
            token = self._next_non_space()
            if token.type is end:
                self._check_pipeline(context, cmds, token)
                return Pipe(start.lineno, start.col_offset, tuple(decl), tuple(cmds), is_assign)
            if token.type in _TERM_STARTS:
                self._backup()
                cmds.append(self._parse_command())
            else:
                raise self._unexpected(token, context)

    def _parse_declarations(self, context: str) -> tuple[list[Variable], bool]:
        token = self._peek_non_space()
        if token.type is not TokenType.VARIABLE:
            return [], False

        first = self._advance()
        after = self._peek_non_space()
        if after.type in (TokenType.DECLARE, TokenType.ASSIGN):
            self._advance()
            is_assign = after.type is TokenType.ASSIGN
            return [self._bind_variable(first, is_assign)], is_assign

        if after.type is TokenType.COMMA:
            if context != "range":
                raise self._error(f"too many declarations in {context}", after)
            self._advance()
            second = self._next_non_space()
            if second.type is not TokenType.VARIABLE:
                raise self._unexpected(second, "range declaration")
            op = self._next_non_space()
            if op.type not in (TokenType.DECLARE, TokenType.ASSIGN):
                raise self._unexpected(op, "range declaration")
            is_assign = op.type is TokenType.ASSIGN
            return [
                self._bind_variable(first, is_assign),
                self._bind_variable(second, is_assign),
            ], is_assign

        # A plain variable operand, not a declaration.
        self._rewind_to(first)
        return [], False

    def _rewind_to(self, token: Token) -> None:
        while self._tokens[self._pos] is not token:
            self._pos -= 1

    def _bind_variable(self, token: Token, is_assign: bool) -> Variable:
        if is_assign:
            self._use_var(token)
        else:
            self._declare_var(token.value)
        return Variable(token.lineno, token.col_offset, (token.value,))

    def _check_pipeline(self, context: str, cmds: list[Command], token: Token) -> None:
        if not cmds:
            raise self._error(
                f"missing value for {context}", token, code=ErrorCode.MISSING_VALUE
            )
        for index, cmd in enumerate(cmds[1:], start=2):
            if isinstance(cmd.args[0], _NON_EXECUTABLE):
                raise self._error(
                    f"non executable command in pipeline stage {index}",
                    token,
                    suggestion="Only functions, fields and methods can receive a piped value",
                )

    def _parse_command(self) -> Command:
        start = self._peek_non_space()
        args: list[Expr] = []
        while True:
            self._peek_non_space()
            operand = self._parse_operand()
            if operand is not None:
                args.append(operand)
            token = self._advance()
            if token.type is TokenType.SPACE:
                continue
            if token.type in (TokenType.RIGHT_DELIM, TokenType.RIGHT_PAREN):
                self._backup()
            elif token.type is TokenType.PIPE:
                if self._peek_non_space().type in (TokenType.RIGHT_DELIM, TokenType.RIGHT_PAREN):
                    raise self._error("missing command after '|'", token)
            else:
                raise self._unexpected(token, "operand")
            break
        if not args:
            raise self._error("empty command", start, code=ErrorCode.MISSING_VALUE)
        return Command(start.lineno, start.col_offset, tuple(args))

    def _parse_operand(self) -> Expr | None:
        node = self._parse_term()
        if node is None:
            return None
        if self._peek().type is not TokenType.FIELD:
            return node

        fields: list[str] = []
        while self._peek().type is TokenType.FIELD:
            fields.append(self._advance().value[1:])

        if isinstance(node, Field):
            return Field(node.lineno, node.col_offset, (*node.ident, *fields))
        if isinstance(node, Variable):
            return Variable(node.lineno, node.col_offset, (*node.ident, *fields))
        if isinstance(node, (Bool, String, Number, Nil, Dot)):
            raise self._error(f"unexpected . after term {describe(node)}")
        return Chain(node.lineno, node.col_offset, node, tuple(fields))

    def _parse_term(self) -> Expr | None:
        token = self._next_non_space()
        ttype = token.type
        pos = (token.lineno, token.col_offset)
        if ttype is TokenType.IDENTIFIER:
            if token.value not in self._funcs:
                raise self._error(
                    f"function {token.value!r} not defined",
                    token,
                    code=ErrorCode.UNDEFINED_FUNCTION,
                )
            return Identifier(*pos, token.value)
        if ttype is TokenType.DOT:
            return Dot(*pos)
        if ttype is TokenType.NIL:
            return Nil(*pos)
        if ttype is TokenType.VARIABLE:
            return Variable(*pos, (self._use_var(token),))
        if ttype is TokenType.FIELD:
            return Field(*pos, (token.value[1:],))
        if ttype is TokenType.BOOL:
            return Bool(*pos, token.value == "true")
        if ttype in (TokenType.NUMBER, TokenType.CHAR_CONSTANT):
            return self._parse_number(token)
        if ttype is TokenType.LEFT_PAREN:
            return self._parse_pipeline("parenthesized pipeline", TokenType.RIGHT_PAREN)
        if ttype in (TokenType.STRING, TokenType.RAW_STRING):
            try:
                value = unquote(token.value)
            except ValueError as exc:
                raise self._error(str(exc), token) from exc
            return String(*pos, token.value, value)
        self._backup()
        return None

    def _parse_number(self, token: Token) -> Number:
        pos = (token.lineno, token.col_offset)
        text = token.value
        if token.type is TokenType.CHAR_CONSTANT:
            try:
                value = unquote(text)
            except ValueError as exc:
                raise self._error(str(exc), token) from exc
            if len(value) != 1:
                raise self._error(f"malformed character constant: {text}", token)
            code = ord(value)
            return Number(*pos, text, int_value=code, float_value=float(code), is_char=True)

        try:
            if text.endswith("i"):
                imag = float(text[:-1].replace("_", ""))
                return Number(*pos, text, complex_value=complex(0, imag))
            digits = text.lstrip("+-")
            sign = -1 if text.startswith("-") else 1
            if _LEGACY_OCTAL_RE.fullmatch(digits):
                value = sign * int(digits.replace("_", ""), 8)
                return Number(*pos, text, int_value=value, float_value=float(value))
            if digits[:2].lower() in ("0x", "0o", "0b") and not _is_hex_float(digits):
                value = sign * int(digits, 0)
                return Number(*pos, text, int_value=value, float_value=float(value))
            if _is_hex_float(digits):
                return Number(*pos, text, float_value=sign * float.fromhex(digits.replace("_", "")))
            if any(ch in digits for ch in ".eE"):
                return Number(*pos, text, float_value=float(text))
            value = int(text)
            return Number(*pos, text, int_value=value, float_value=float(value))
        except (ValueError, OverflowError) as exc:
            raise self._error(
                f"illegal number syntax: {text!r}", token, code=ErrorCode.UNEXPECTED_TOKEN
            ) from exc


def _is_hex_float(digits: str) -> bool:
    return digits[:2].lower() == "0x" and any(ch in digits for ch in ".pP")


_TERM_STARTS = frozenset(
    {
        TokenType.BOOL,
        TokenType.CHAR_CONSTANT,
        TokenType.DOT,
        TokenType.FIELD,
        TokenType.IDENTIFIER,
        TokenType.LEFT_PAREN,
        TokenType.NIL,
        TokenType.NUMBER,
        TokenType.RAW_STRING,
        TokenType.STRING,
        TokenType.VARIABLE,
    }
)
