"""Lexer for Go text/template syntax.

Splits template source into a flat token list: TEXT runs between actions,
and inside each action the delimiters, operands, punctuation and keywords.

Whitespace control follows text/template: a left delimiter followed by
``"- "`` trims all trailing whitespace from the preceding text, and ``" -"``
before a right delimiter trims leading whitespace from the following text.
Comments (``{{/* ... */}}``) are dropped.

Example:
    >>> [t.type.name for t in tokenize("hi {{.Name}}")]
    ['TEXT', 'LEFT_DELIM', 'FIELD', 'RIGHT_DELIM', 'EOF']
"""

from __future__ import annotations

import bisect
import re

from templatejs._types import KEYWORDS, Token, TokenType
from templatejs.environment.exceptions import ErrorCode, TemplateSyntaxError

_SPACE_CHARS = " \t\r\n"
_TRIM_MARKER = "-"
_LEFT_COMMENT = "/*"
_RIGHT_COMMENT = "*/"

# Go number syntax: optional sign, base prefix, digits with underscores,
# fraction, exponent (p for hex floats) and an imaginary suffix.
_NUMBER_RE = re.compile(
    r"""
    [+-]?
    (?:
        0[xX](?:[0-9a-fA-F_]*\.?[0-9a-fA-F_]*)(?:[pP][+-]?[0-9_]+)?
      | 0[oO][0-7_]+
      | 0[bB][01_]+
      | (?:[0-9][0-9_]*\.?[0-9_]*|\.[0-9][0-9_]*)(?:[eE][+-]?[0-9_]+)?
    )
    i?
    """,
    re.VERBOSE,
)

_ALNUM_RE = re.compile(r"[\w]*", re.UNICODE)


class LexerError(TemplateSyntaxError):
    """Malformed template source found while tokenizing."""

    code = ErrorCode.UNEXPECTED_CHARACTER


class Lexer:
    """Tokenizer for one template source.

    Attributes:
        name: Template name used in error messages
        source: Template text
        left_delim / right_delim: Action delimiters
    """

    __slots__ = (
        "_line_starts",
        "_paren_depth",
        "_pos",
        "_tokens",
        "_trim_next_text",
        "left_delim",
        "name",
        "right_delim",
        "source",
    )

    def __init__(
        self,
        source: str,
        name: str | None = None,
        left_delim: str = "{{",
        right_delim: str = "}}",
    ):
        self.source = source
        self.name = name
        self.left_delim = left_delim or "{{"
        self.right_delim = right_delim or "}}"
        self._pos = 0
        self._tokens: list[Token] = []
        self._paren_depth = 0
        self._trim_next_text = False
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]

    # ------------------------------------------------------------------
    # Positions and errors
    # ------------------------------------------------------------------

    def _position(self, pos: int) -> tuple[int, int]:
        line_index = bisect.bisect_right(self._line_starts, pos) - 1
        return line_index + 1, pos - self._line_starts[line_index]

    def _emit(self, token_type: TokenType, start: int, end: int) -> None:
        lineno, col = self._position(start)
        self._tokens.append(Token(token_type, self.source[start:end], lineno, col))

    def _error(self, message: str, pos: int, code: ErrorCode) -> LexerError:
        lineno, col = self._position(pos)
        return LexerError(
            message,
            name=self.name,
            lineno=lineno,
            col_offset=col,
            source=self.source,
            code=code,
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source. Raises LexerError on malformed input."""
        while self._pos < len(self.source):
            self._lex_text()
        self._emit(TokenType.EOF, len(self.source), len(self.source))
        return self._tokens

    def _lex_text(self) -> None:
        start = self._pos
        delim_at = self.source.find(self.left_delim, start)
        end = len(self.source) if delim_at < 0 else delim_at

        text_start = start
        if self._trim_next_text:
            while text_start < end and self.source[text_start] in _SPACE_CHARS:
                text_start += 1
            self._trim_next_text = False

        trim_left = delim_at >= 0 and self._has_left_trim_marker(delim_at + len(self.left_delim))
        text_end = end
        if trim_left:
            while text_end > text_start and self.source[text_end - 1] in _SPACE_CHARS:
                text_end -= 1

        if text_end > text_start:
            self._emit(TokenType.TEXT, text_start, text_end)

        if delim_at < 0:
            self._pos = len(self.source)
            return
        self._lex_left_delim(delim_at, trim_left)

    def _has_left_trim_marker(self, pos: int) -> bool:
        src = self.source
        return (
            pos + 1 < len(src)
            and src[pos] == _TRIM_MARKER
            and src[pos + 1] in _SPACE_CHARS
        )

    def _right_trim_at(self, pos: int) -> bool:
        """True if a right trim marker and the right delimiter start at ``pos``."""
        src = self.source
        return (
            pos + 1 < len(src)
            and src[pos] in _SPACE_CHARS
            and src[pos + 1] == _TRIM_MARKER
            and src.startswith(self.right_delim, pos + 2)
        )

    def _lex_left_delim(self, pos: int, trimmed: bool) -> None:
        after = pos + len(self.left_delim)
        inner = after + 2 if trimmed else after
        if self.source.startswith(_LEFT_COMMENT, inner):
            self._lex_comment(pos, inner)
            return
        self._emit(TokenType.LEFT_DELIM, pos, after)
        self._pos = inner
        self._paren_depth = 0
        self._lex_inside_action(pos)

    def _lex_comment(self, delim_pos: int, start: int) -> None:
        close = self.source.find(_RIGHT_COMMENT, start + len(_LEFT_COMMENT))
        if close < 0:
            raise self._error("unclosed comment", delim_pos, ErrorCode.UNCLOSED_COMMENT)
        pos = close + len(_RIGHT_COMMENT)
        if self._right_trim_at(pos):
            self._trim_next_text = True
            pos += 2
        if not self.source.startswith(self.right_delim, pos):
            raise self._error(
                "comment ends before closing delimiter", close, ErrorCode.UNCLOSED_COMMENT
            )
        self._pos = pos + len(self.right_delim)

    # ------------------------------------------------------------------
    # Inside an action
    # ------------------------------------------------------------------

    def _lex_inside_action(self, delim_pos: int) -> None:
        src = self.source
        while True:
            pos = self._pos
            if pos >= len(src):
                raise self._error("unclosed action", delim_pos, ErrorCode.UNCLOSED_ACTION)

            trimmed = self._right_trim_at(pos)
            if trimmed or src.startswith(self.right_delim, pos):
                if self._paren_depth:
                    raise self._error("unclosed left paren", pos, ErrorCode.UNCLOSED_ACTION)
                if trimmed:
                    self._trim_next_text = True
                    pos += 2
                self._emit(TokenType.RIGHT_DELIM, pos, pos + len(self.right_delim))
                self._pos = pos + len(self.right_delim)
                return

            ch = src[pos]
            if ch in _SPACE_CHARS:
                self._lex_space()
            elif ch == "=":
                self._emit(TokenType.ASSIGN, pos, pos + 1)
                self._pos += 1
            elif ch == ":":
                if not src.startswith(":=", pos):
                    raise self._error("expected :=", pos, ErrorCode.UNEXPECTED_CHARACTER)
                self._emit(TokenType.DECLARE, pos, pos + 2)
                self._pos += 2
            elif ch == "|":
                self._emit(TokenType.PIPE, pos, pos + 1)
                self._pos += 1
            elif ch == ",":
                self._emit(TokenType.COMMA, pos, pos + 1)
                self._pos += 1
            elif ch == '"':
                self._lex_quote()
            elif ch == "`":
                self._lex_raw_quote()
            elif ch == "'":
                self._lex_char()
            elif ch == "$":
                self._lex_variable()
            elif ch == "." and not (pos + 1 < len(src) and src[pos + 1].isdigit()):
                self._lex_field()
            elif ch in "+-." or ch.isdigit():
                self._lex_number()
            elif ch.isalpha() or ch == "_":
                self._lex_identifier()
            elif ch == "(":
                self._emit(TokenType.LEFT_PAREN, pos, pos + 1)
                self._paren_depth += 1
                self._pos += 1
            elif ch == ")":
                self._paren_depth -= 1
                if self._paren_depth < 0:
                    raise self._error("unexpected right paren", pos, ErrorCode.UNEXPECTED_CHARACTER)
                self._emit(TokenType.RIGHT_PAREN, pos, pos + 1)
                self._pos += 1
            else:
                raise self._error(
                    f"unrecognized character in action: {ch!r}",
                    pos,
                    ErrorCode.UNEXPECTED_CHARACTER,
                )

    def _lex_space(self) -> None:
        start = self._pos
        pos = start
        src = self.source
        while pos < len(src) and src[pos] in _SPACE_CHARS:
            # Stop before a trim-marked right delimiter: " -}}"
            if self._right_trim_at(pos):
                break
            pos += 1
        if pos > start:
            self._emit(TokenType.SPACE, start, pos)
        self._pos = pos

    def _at_terminator(self, pos: int) -> bool:
        src = self.source
        if pos >= len(src):
            return True
        ch = src[pos]
        if ch in _SPACE_CHARS or ch in ".,|:()=":
            return True
        return src.startswith(self.right_delim, pos)

    def _scan_alnum(self, pos: int) -> int:
        return _ALNUM_RE.match(self.source, pos).end()

    def _lex_identifier(self) -> None:
        start = self._pos
        end = self._scan_alnum(start)
        if not self._at_terminator(end):
            raise self._error(
                f"bad character {self.source[end]!r}", end, ErrorCode.UNEXPECTED_CHARACTER
            )
        word = self.source[start:end]
        self._emit(KEYWORDS.get(word, TokenType.IDENTIFIER), start, end)
        self._pos = end

    def _lex_field(self) -> None:
        start = self._pos
        end = self._scan_alnum(start + 1)
        if end == start + 1:
            self._emit(TokenType.DOT, start, end)
        else:
            if not self._at_terminator(end):
                raise self._error(
                    f"bad character {self.source[end]!r}", end, ErrorCode.UNEXPECTED_CHARACTER
                )
            self._emit(TokenType.FIELD, start, end)
        self._pos = end

    def _lex_variable(self) -> None:
        start = self._pos
        end = self._scan_alnum(start + 1)
        if not self._at_terminator(end):
            raise self._error(
                f"bad character {self.source[end]!r}", end, ErrorCode.UNEXPECTED_CHARACTER
            )
        self._emit(TokenType.VARIABLE, start, end)
        self._pos = end

    def _lex_number(self) -> None:
        start = self._pos
        match = _NUMBER_RE.match(self.source, start)
        end = match.end() if match else start
        digits = self.source[start:end].lstrip("+-")
        if not digits or digits == "." or (end < len(self.source) and self.source[end].isalnum()):
            bad_end = self._scan_alnum(end) if end < len(self.source) else end
            raise self._error(
                f"bad number syntax: {self.source[start:max(bad_end, start + 1)]!r}",
                start,
                ErrorCode.BAD_NUMBER,
            )
        self._emit(TokenType.NUMBER, start, end)
        self._pos = end

    def _lex_quote(self) -> None:
        start = self._pos
        pos = start + 1
        src = self.source
        while True:
            if pos >= len(src) or src[pos] == "\n":
                raise self._error(
                    "unterminated quoted string", start, ErrorCode.UNTERMINATED_STRING
                )
            ch = src[pos]
            if ch == "\\":
                pos += 2
                continue
            pos += 1
            if ch == '"':
                break
        self._emit(TokenType.STRING, start, pos)
        self._pos = pos

    def _lex_raw_quote(self) -> None:
        start = self._pos
        close = self.source.find("`", start + 1)
        if close < 0:
            raise self._error(
                "unterminated raw quoted string", start, ErrorCode.UNTERMINATED_STRING
            )
        self._emit(TokenType.RAW_STRING, start, close + 1)
        self._pos = close + 1

    def _lex_char(self) -> None:
        start = self._pos
        pos = start + 1
        src = self.source
        while True:
            if pos >= len(src) or src[pos] == "\n":
                raise self._error(
                    "unterminated character constant", start, ErrorCode.UNTERMINATED_STRING
                )
            ch = src[pos]
            if ch == "\\":
                pos += 2
                continue
            pos += 1
            if ch == "'":
                break
        self._emit(TokenType.CHAR_CONSTANT, start, pos)
        self._pos = pos


def tokenize(
    source: str,
    name: str | None = None,
    left_delim: str = "{{",
    right_delim: str = "}}",
) -> list[Token]:
    """Tokenize ``source`` and return the token list ending in EOF."""
    return Lexer(source, name, left_delim, right_delim).tokenize()
