"""Parser core: token navigation, action dispatch and the tree set.

The parser consumes the lexer's token list and produces one Tree per
template name: the top-level template plus every ``{{define}}`` and
``{{block}}`` found in it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from templatejs._types import Token, TokenType
from templatejs.environment.exceptions import ErrorCode
from templatejs.nodes import Action, Node, Text, Tree
from templatejs.parser.blocks import ControlFlowBlockParsingMixin, TemplateStructureBlockParsingMixin
from templatejs.parser.errors import ParseError
from templatejs.parser.expressions import ExpressionParsingMixin


# Action keyword → parser method
_ACTION_PARSERS: dict[TokenType, str] = {
    TokenType.BLOCK: "_parse_block",
    TokenType.BREAK: "_parse_break",
    TokenType.CONTINUE: "_parse_continue",
    TokenType.ELSE: "_parse_else",
    TokenType.IF: "_parse_if",
    TokenType.RANGE: "_parse_range",
    TokenType.TEMPLATE: "_parse_template",
    TokenType.WITH: "_parse_with",
}


@dataclass(frozen=True, slots=True)
class Terminator:
    """An ``{{end}}`` or ``{{else}}`` closing an item list.

    ``chained`` is IF or WITH for ``{{else if ...}}`` / ``{{else with ...}}``;
    the chained keyword is left unconsumed for the caller.
    """

    kind: str
    token: Token
    chained: TokenType | None = None


class TokenNavigationMixin:
    """Cursor over the token list."""

    _tokens: Sequence[Token]
    _pos: int
    _name: str
    _source: str | None

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _backup(self, count: int = 1) -> None:
        self._pos -= count

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _skip_space(self) -> None:
        while self._tokens[self._pos].type is TokenType.SPACE:
            self._pos += 1

    def _next_non_space(self) -> Token:
        self._skip_space()
        return self._advance()

    def _peek_non_space(self) -> Token:
        self._skip_space()
        return self._tokens[self._pos]

    def _match(self, *types: TokenType) -> bool:
        return self._tokens[self._pos].type in types

    def _expect(self, token_type: TokenType, context: str) -> Token:
        token = self._next_non_space()
        if token.type is not token_type:
            raise self._unexpected(token, context)
        return token

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
        code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN,
    ) -> ParseError:
        return ParseError(
            message,
            token or self._current,
            name=self._name,
            source=self._source,
            suggestion=suggestion,
            code=code,
        )

    def _unexpected(self, token: Token, context: str) -> ParseError:
        if token.type is TokenType.EOF:
            return self._error(f"unexpected EOF in {context}", token, code=ErrorCode.UNCLOSED_BLOCK)
        return self._error(f"unexpected {token} in {context}", token)


class Parser(
    TokenNavigationMixin,
    ExpressionParsingMixin,
    ControlFlowBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
):
    """Parse a token list into a set of named template trees.

    Example:
        >>> from templatejs.lexer import tokenize
        >>> trees = Parser(tokenize('{{define "x"}}X{{end}}hi'), "page").parse()
        >>> sorted(trees)
        ['page', 'x']

    Attributes:
        _funcs: Names of functions pipelines may call
        _vars: Visible variable names, innermost last
        _range_depth: Number of enclosing ``{{range}}`` bodies
        _tree_set: Trees parsed so far, keyed by name
    """

    __slots__ = (
        "_funcs",
        "_name",
        "_pos",
        "_range_depth",
        "_source",
        "_tokens",
        "_tree_set",
        "_vars",
    )

    def __init__(
        self,
        tokens: Sequence[Token],
        name: str,
        source: str | None = None,
        funcs: Iterable[str] = (),
    ):
        self._tokens = tokens
        self._pos = 0
        self._name = name
        self._source = source
        self._funcs = frozenset(funcs)
        self._vars: list[str] = ["$"]
        self._range_depth = 0
        self._tree_set: dict[str, Tree] = {}

    def parse(self) -> dict[str, Tree]:
        """Parse the whole token list and return the tree set."""
        root: list[Node] = []
        while not self._match(TokenType.EOF):
            if self._match(TokenType.LEFT_DELIM):
                mark = self._pos
                delim = self._advance()
                if self._peek_non_space().type is TokenType.DEFINE:
                    self._advance()
                    self._parse_definition(delim)
                    continue
                self._pos = mark
            item = self._parse_text_or_action()
            if isinstance(item, Terminator):
                raise self._error(f"unexpected {{{{{item.kind}}}}}", item.token)
            root.append(item)
        self._add_tree(Tree(self._name, tuple(root), self._name, self._source))
        return self._tree_set

    # ------------------------------------------------------------------
    # Tree set
    # ------------------------------------------------------------------

    def _add_tree(self, tree: Tree, token: Token | None = None) -> None:
        existing = self._tree_set.get(tree.name)
        if existing is None or existing.is_empty:
            self._tree_set[tree.name] = tree
            return
        if not tree.is_empty:
            raise self._error(
                f"template: multiple definition of template {tree.name!r}",
                token or self._current,
                code=ErrorCode.DUPLICATE_TEMPLATE,
            )

    def _parse_sub_tree(self, context: str) -> tuple[list[Node], Terminator]:
        """Parse a define/block body with a fresh variable scope."""
        saved_vars, saved_depth = self._vars, self._range_depth
        self._vars, self._range_depth = ["$"], 0
        try:
            return self._parse_item_list(context)
        finally:
            self._vars, self._range_depth = saved_vars, saved_depth

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def _declare_var(self, name: str) -> None:
        self._vars.append(name)

    def _use_var(self, token: Token) -> str:
        name = token.value
        if name not in self._vars:
            raise self._error(
                f"undefined variable {name!r}", token, code=ErrorCode.UNDEFINED_VARIABLE
            )
        return name

    def _pop_vars(self, mark: int) -> None:
        del self._vars[mark:]

    # ------------------------------------------------------------------
    # Item lists
    # ------------------------------------------------------------------

    def _parse_item_list(self, context: str) -> tuple[list[Node], Terminator]:
        """Parse nodes up to the ``{{end}}`` or ``{{else}}`` closing ``context``."""
        nodes: list[Node] = []
        while True:
            if self._match(TokenType.EOF):
                raise self._error(
                    f"unexpected EOF in {context}", code=ErrorCode.UNCLOSED_BLOCK
                )
            item = self._parse_text_or_action()
            if isinstance(item, Terminator):
                return nodes, item
            nodes.append(item)

    def _parse_text_or_action(self) -> Node | Terminator:
        token = self._next_non_space()
        if token.type is TokenType.TEXT:
            return Text(token.lineno, token.col_offset, token.value)
        if token.type is TokenType.LEFT_DELIM:
            return self._parse_action()
        raise self._unexpected(token, "input")

    def _parse_action(self) -> Node | Terminator:
        """Parse the inside of ``{{ ... }}`` after the left delimiter."""
        token = self._next_non_space()
        method_name = _ACTION_PARSERS.get(token.type)
        if method_name is not None:
            return getattr(self, method_name)(token)
        if token.type is TokenType.END:
            self._expect(TokenType.RIGHT_DELIM, "end")
            return Terminator("end", token)
        if token.type is TokenType.DEFINE:
            raise self._error(
                "{{define}} is only allowed at the top level of a template",
                token,
                suggestion="Move the definition out of the enclosing action",
            )
        self._backup()
        pipe = self._parse_pipeline("command", TokenType.RIGHT_DELIM)
        return Action(token.lineno, token.col_offset, pipe)
