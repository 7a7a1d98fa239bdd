"""Control flow action parsing for the templatejs parser.

Provides mixin for parsing if, range, with, else, break and continue.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from templatejs._types import Token, TokenType
from templatejs.environment.exceptions import ErrorCode
from templatejs.nodes import Break, Continue, If, Range, With

if TYPE_CHECKING:
    from templatejs.nodes import Node, Pipe
    from templatejs.parser.core import Terminator
    from templatejs.parser.errors import ParseError


class ControlFlowBlockParsingMixin:
    """Mixin for parsing control structures.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _vars: list[str]
        _range_depth: int

        def _next_non_space(self) -> Token: ...
        def _peek_non_space(self) -> Token: ...
        def _expect(self, token_type: TokenType, context: str) -> Token: ...
        def _error(
            self,
            message: str,
            token: Token | None = None,
            suggestion: str | None = None,
            code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN,
        ) -> ParseError: ...
        def _unexpected(self, token: Token, context: str) -> ParseError: ...
        def _parse_item_list(self, context: str) -> tuple[list[Node], Terminator]: ...
        def _parse_pipeline(self, context: str, end: TokenType) -> Pipe: ...
        def _pop_vars(self, mark: int) -> None: ...

    def _parse_control(self, context: str) -> tuple[Pipe, list[Node], list[Node]]:
        """Parse ``pipeline}} body [{{else}} body] {{end}}`` for ``context``.

        Variables declared in the pipeline or the body go out of scope at
        ``{{end}}``.
        """
        mark = len(self._vars)
        try:
            pipe = self._parse_pipeline(context, TokenType.RIGHT_DELIM)
            if context == "range":
                self._range_depth += 1
            try:
                body, term = self._parse_item_list(context)
            finally:
                if context == "range":
                    self._range_depth -= 1

            else_: list[Node] = []
            if term.kind == "else":
                if term.chained is not None:
                    else_ = [self._parse_chained_else(context, term)]
                else:
                    else_, end = self._parse_item_list(context)
                    if end.kind != "end":
                        raise self._error(f"expected end; found {{{{{end.kind}}}}}", end.token)
            return pipe, body, else_
        finally:
            self._pop_vars(mark)

    def _parse_chained_else(self, context: str, term: Terminator) -> Node:
        """Parse the nested If/With of ``{{else if}}`` / ``{{else with}}``.

        The nested node consumes the shared ``{{end}}``.
        """
        keyword = self._next_non_space()
        if term.chained is TokenType.IF and context == "if":
            return self._parse_if(keyword)
        if term.chained is TokenType.WITH and context == "with":
            return self._parse_with(keyword)
        raise self._error(
            f"{{{{else {keyword.value}}}}} is not allowed in {{{{{context}}}}}",
            keyword,
        )

    def _parse_if(self, token: Token) -> If:
        """Parse {{if pipeline}} T1 [{{else if ...}} | {{else}} T0] {{end}}."""
        pipe, body, else_ = self._parse_control("if")
        return If(token.lineno, token.col_offset, pipe, tuple(body), tuple(else_))

    def _parse_range(self, token: Token) -> Range:
        """Parse {{range [$k, $v :=] pipeline}} T1 [{{else}} T0] {{end}}."""
        pipe, body, else_ = self._parse_control("range")
        return Range(token.lineno, token.col_offset, pipe, tuple(body), tuple(else_))

    def _parse_with(self, token: Token) -> With:
        """Parse {{with pipeline}} T1 [{{else with ...}} | {{else}} T0] {{end}}."""
        pipe, body, else_ = self._parse_control("with")
        return With(token.lineno, token.col_offset, pipe, tuple(body), tuple(else_))

    def _parse_else(self, token: Token) -> Terminator:
        from templatejs.parser.core import Terminator

        peek = self._peek_non_space()
        if peek.type in (TokenType.IF, TokenType.WITH):
            return Terminator("else", token, chained=peek.type)
        self._expect(TokenType.RIGHT_DELIM, "else")
        return Terminator("else", token)

    def _parse_break(self, token: Token) -> Break:
        self._expect(TokenType.RIGHT_DELIM, "{{break}}")
        if not self._range_depth:
            raise self._error(
                "{{break}} outside {{range}}", token, code=ErrorCode.UNEXPECTED_TOKEN
            )
        return Break(token.lineno, token.col_offset)

    def _parse_continue(self, token: Token) -> Continue:
        self._expect(TokenType.RIGHT_DELIM, "{{continue}}")
        if not self._range_depth:
            raise self._error(
                "{{continue}} outside {{range}}", token, code=ErrorCode.UNEXPECTED_TOKEN
            )
        return Continue(token.lineno, token.col_offset)
