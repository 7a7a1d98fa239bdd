"""Exceptions for the templatejs compiler.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError       # Lexer/parser failure in template source
├── TemplateCompileError      # A parsed node that cannot be lowered
└── InternalCompilerError     # Compiler defect (never the template's fault)

Error Messages:
Syntax and compile errors name the template and the source position of the
offending node and, when the template source is known, show the line with a
caret under the column:

    ```
    Compile Error: can't give argument to non-function "hello"
      --> page:3:4
       |
      3 | {{"hello" 1}}
       |     ^
    ```

Internal errors are kept apart from the other two: they carry the
``TJ-INT-*`` codes and a distinct header, and signal a bug in the compiler
rather than something the template author can fix.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from templatejs.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes.

    Format: TJ-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), CMP (lowering), INT (internal)
    """

    # Lexer errors (TJ-LEX-xxx)
    UNCLOSED_ACTION = "TJ-LEX-001"
    UNCLOSED_COMMENT = "TJ-LEX-002"
    UNTERMINATED_STRING = "TJ-LEX-003"
    BAD_NUMBER = "TJ-LEX-004"
    UNEXPECTED_CHARACTER = "TJ-LEX-005"

    # Parser errors (TJ-PAR-xxx)
    UNEXPECTED_TOKEN = "TJ-PAR-001"
    UNCLOSED_BLOCK = "TJ-PAR-002"
    UNDEFINED_VARIABLE = "TJ-PAR-003"
    UNDEFINED_FUNCTION = "TJ-PAR-004"
    MISSING_VALUE = "TJ-PAR-005"
    DUPLICATE_TEMPLATE = "TJ-PAR-006"

    # Lowering errors (TJ-CMP-xxx)
    NOT_A_FUNCTION = "TJ-CMP-001"
    UNSUPPORTED_CONSTRUCT = "TJ-CMP-002"
    INVALID_NAME = "TJ-CMP-003"
    EMPTY_PIPELINE = "TJ-CMP-004"

    # Compiler defects (TJ-INT-xxx)
    UNKNOWN_NODE = "TJ-INT-001"
    STACK_UNDERFLOW = "TJ-INT-002"
    INDENT_UNDERFLOW = "TJ-INT-003"
    UNFLUSHED_OUTPUT = "TJ-INT-004"
    UNEXPECTED_FAILURE = "TJ-INT-005"

    @property
    def category(self) -> str:
        """Error category (e.g., 'lexer', 'parser', 'compiler', 'internal')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "CMP": "compiler",
            "INT": "internal",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """A window of template source ending up in a diagnostic.

    ``first`` is the 1-based number of ``text[0]``; ``column`` places the
    caret on ``error_line``.
    """

    first: int
    text: tuple[str, ...]
    error_line: int
    column: int | None = None

    def numbered(self) -> list[tuple[int, str]]:
        return list(enumerate(self.text, start=self.first))

    def format(self) -> str:
        rule = terminal.style("muted", "   |")
        out = [rule]
        for lineno, content in self.numbered():
            is_error = lineno == self.error_line
            out.append(terminal.format_source_line(lineno, content, is_error))
            if is_error and self.column is not None:
                out.append(f"{rule}   {terminal.style('error', ' ' * self.column + '^')}")
        out.append(rule)
        return "\n".join(out)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 1,
    column: int | None = None,
) -> SourceSnippet | None:
    """Cut ``context_lines`` lines either side of ``error_line`` out of ``source``.

    Returns None when ``error_line`` is not a line of ``source``.
    """
    lines = source.splitlines()
    if error_line < 1 or error_line > len(lines):
        return None
    first = max(1, error_line - context_lines)
    window = lines[first - 1 : error_line + context_lines]
    return SourceSnippet(first, tuple(window), error_line, column)


class TemplateError(Exception):
    """Base exception for all templatejs errors.

    Catch this to handle every failure of a compilation run:

        >>> try:
        ...     js = env.compile_to_js("page", source, "app.views")
        ... except TemplateError as e:
        ...     log.error("template error: %s", e)

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short terminal diagnostic."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = terminal.format_error_header(self.code.value, header)
        return header


class _LocatedError(TemplateError):
    """Shared formatting for errors that point into template source."""

    kind = "Error"

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        lineno: int | None = None,
        col_offset: int | None = None,
        source: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.name = name
        self.lineno = lineno
        self.col_offset = col_offset
        self.source = source
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        parts = [self.name or "<template>"]
        if self.lineno:
            parts.append(str(self.lineno))
            if self.col_offset is not None:
                parts.append(str(self.col_offset))
        return ":".join(parts)

    def _snippet(self) -> SourceSnippet | None:
        if not (self.source and self.lineno):
            return None
        return build_source_snippet(
            self.source, self.lineno, context_lines=0, column=self.col_offset
        )

    def _format_message(self) -> str:
        header = f"{self.kind}: {self.message}\n  --> {self.location}"
        snippet = self._snippet()
        if snippet is not None:
            return header + "\n" + terminal.strip_colors(snippet.format())
        return header

    def format_compact(self) -> str:
        code = self.code.value if self.code else None
        parts = [
            terminal.format_error_header(code, self.message),
            f"  --> {terminal.style('location', self.location)}",
        ]
        snippet = self._snippet()
        if snippet is not None:
            parts.append(snippet.format())
        return "\n".join(parts)


class TemplateSyntaxError(_LocatedError):
    """Malformed template source: unbalanced delimiters, bad pipelines, etc.

    Raised by the lexer and parser and surfaced to the caller unchanged.
    """

    kind = "Syntax Error"
    code: ErrorCode | None = ErrorCode.UNEXPECTED_TOKEN


class TemplateCompileError(_LocatedError):
    """A structurally valid node that cannot be lowered to JavaScript.

    Example:
            >>> env.compile_to_js("t", '{{"hello" 1}}')
        TemplateCompileError: can't give argument to non-function "hello"
    """

    kind = "Compile Error"
    code: ErrorCode | None = ErrorCode.UNSUPPORTED_CONSTRUCT


class InternalCompilerError(TemplateError):
    """A defect in the compiler itself.

    Raised for unknown node kinds, accumulator or indentation underflow and
    any unexpected exception escaping the lowering engine. It is not a
    problem with the template and is never to be "fixed" by changing input.
    """

    code: ErrorCode | None = ErrorCode.UNEXPECTED_FAILURE

    def __init__(self, message: str, *, code: ErrorCode | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(f"Internal Compiler Error: {message}")
