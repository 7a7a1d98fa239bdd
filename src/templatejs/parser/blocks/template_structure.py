"""Template structure action parsing for the templatejs parser.

Provides mixin for parsing define, block and template actions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from templatejs._types import Token, TokenType
from templatejs.environment.exceptions import ErrorCode
from templatejs.nodes import Template, Tree
from templatejs.parser.expressions import unquote

if TYPE_CHECKING:
    from templatejs.nodes import Node, Pipe
    from templatejs.parser.core import Terminator
    from templatejs.parser.errors import ParseError


class TemplateStructureBlockParsingMixin:
    """Mixin for parsing template structure actions.

    Required Host Attributes:
        - _name, _source
        - _next_non_space, _peek_non_space, _backup, _expect
        - _error, _unexpected
        - _parse_pipeline, _parse_sub_tree, _add_tree
    """

    if TYPE_CHECKING:
        _name: str
        _source: str | None

        def _next_non_space(self) -> Token: ...
        def _peek_non_space(self) -> Token: ...
        def _backup(self, count: int = 1) -> None: ...
        def _expect(self, token_type: TokenType, context: str) -> Token: ...
        def _error(
            self,
            message: str,
            token: Token | None = None,
            suggestion: str | None = None,
            code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN,
        ) -> ParseError: ...
        def _unexpected(self, token: Token, context: str) -> ParseError: ...
        def _parse_pipeline(self, context: str, end: TokenType) -> Pipe: ...
        def _parse_sub_tree(self, context: str) -> tuple[list[Node], Terminator]: ...
        def _add_tree(self, tree: Tree, token: Token | None = None) -> None: ...

    def _parse_template_name(self, context: str) -> str:
        token = self._next_non_space()
        if token.type not in (TokenType.STRING, TokenType.RAW_STRING):
            raise self._unexpected(token, context)
        try:
            return unquote(token.value)
        except ValueError as exc:
            raise self._error(str(exc), token) from exc

    def _parse_definition(self, token: Token) -> None:
        """Parse {{define "name"}}...{{end}} into a new tree.

        The define keyword has been consumed.
        """
        context = "define clause"
        name = self._parse_template_name(context)
        self._expect(TokenType.RIGHT_DELIM, context)
        body, end = self._parse_sub_tree(context)
        if end.kind != "end":
            raise self._unexpected(end.token, context)
        self._add_tree(Tree(name, tuple(body), self._name, self._source), token)

    def _parse_block(self, token: Token) -> Template:
        """Parse {{block "name" pipeline}}...{{end}}.

        Shorthand for defining ``name`` and invoking it in place.
        """
        context = "block clause"
        name = self._parse_template_name(context)
        pipe = self._parse_pipeline(context, TokenType.RIGHT_DELIM)
        body, end = self._parse_sub_tree(context)
        if end.kind != "end":
            raise self._unexpected(end.token, context)
        self._add_tree(Tree(name, tuple(body), self._name, self._source), token)
        return Template(token.lineno, token.col_offset, name, pipe)

    def _parse_template(self, token: Token) -> Template:
        """Parse {{template "name" [pipeline]}}."""
        context = "template clause"
        name = self._parse_template_name(context)
        pipe = None
        if self._peek_non_space().type is not TokenType.RIGHT_DELIM:
            pipe = self._parse_pipeline(context, TokenType.RIGHT_DELIM)
        else:
            self._next_non_space()
        return Template(token.lineno, token.col_offset, name, pipe)
