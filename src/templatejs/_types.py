"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Kinds of token produced by the lexer."""

    TEXT = auto()
    COMMENT = auto()
    LEFT_DELIM = auto()
    RIGHT_DELIM = auto()
    SPACE = auto()

    # Operands
    IDENTIFIER = auto()
    FIELD = auto()
    VARIABLE = auto()
    STRING = auto()
    RAW_STRING = auto()
    CHAR_CONSTANT = auto()
    NUMBER = auto()
    BOOL = auto()
    NIL = auto()
    DOT = auto()

    # Punctuation
    DECLARE = auto()  # :=
    ASSIGN = auto()  # =
    PIPE = auto()  # |
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    COMMA = auto()

    # Keywords
    BLOCK = auto()
    BREAK = auto()
    CONTINUE = auto()
    DEFINE = auto()
    ELSE = auto()
    END = auto()
    IF = auto()
    RANGE = auto()
    TEMPLATE = auto()
    WITH = auto()

    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "block": TokenType.BLOCK,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "define": TokenType.DEFINE,
    "else": TokenType.ELSE,
    "end": TokenType.END,
    "if": TokenType.IF,
    "range": TokenType.RANGE,
    "template": TokenType.TEMPLATE,
    "with": TokenType.WITH,
    "nil": TokenType.NIL,
    "true": TokenType.BOOL,
    "false": TokenType.BOOL,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token with its source position.

    Attributes:
        type: Token kind
        value: Raw source text of the token
        lineno: 1-based line number
        col_offset: 0-based column
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int

    def __str__(self) -> str:
        if self.type is TokenType.EOF:
            return "EOF"
        if self.type in _KEYWORD_TYPES:
            return f"<{self.value}>"
        if len(self.value) > 10:
            return f"{self.value[:10]!r}..."
        return repr(self.value)


_KEYWORD_TYPES = frozenset(
    t for t in KEYWORDS.values() if t not in (TokenType.NIL, TokenType.BOOL)
)
