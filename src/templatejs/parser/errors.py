"""Parser error handling for templatejs.

Provides ParseError, a TemplateSyntaxError anchored on the offending token.
"""

from __future__ import annotations

from templatejs._types import Token
from templatejs.environment.exceptions import ErrorCode, TemplateSyntaxError


class ParseError(TemplateSyntaxError):
    """Parser error with the offending token and an optional suggestion.

    Displays errors with the source line and a caret under the token,
    matching the format used by the lexer.
    """

    def __init__(
        self,
        message: str,
        token: Token,
        *,
        name: str | None = None,
        source: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.token = token
        self.suggestion = suggestion
        super().__init__(
            message,
            name=name,
            lineno=token.lineno,
            col_offset=token.col_offset,
            source=source,
            code=code,
        )

    def _format_message(self) -> str:
        msg = super()._format_message()
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg
