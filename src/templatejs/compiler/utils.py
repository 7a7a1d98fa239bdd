"""JavaScript literal and name helpers for the compiler."""

from __future__ import annotations

import re

# ECMAScript reserved words plus the strict-mode and literal names that can
# not be used as a variable name.
JS_RESERVED_WORDS: frozenset[str] = frozenset(
    {
        "arguments",
        "await",
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "eval",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "implements",
        "import",
        "in",
        "instanceof",
        "interface",
        "let",
        "new",
        "null",
        "package",
        "private",
        "protected",
        "public",
        "return",
        "static",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "undefined",
        "var",
        "void",
        "while",
        "with",
        "yield",
    }
)

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_NEEDS_ESCAPE_RE = re.compile(r"[\\'\x00-\x1f\x7f\u2028\u2029]|</")


def _escape(match: re.Match[str]) -> str:
    text = match.group()
    if text == "</":
        return "<\\/"
    escaped = _ESCAPES.get(text)
    if escaped is not None:
        return escaped
    return f"\\x{ord(text):02x}"


def quote_js_string(value: str) -> str:
    """Return ``value`` as a single-quoted JavaScript string literal.

    ``</`` is written as ``<\\/`` so the literal can sit inside an inline
    ``<script>`` element.

    Example:
        >>> quote_js_string("it's </b>")
        "'it\\\\'s <\\\\/b>'"
    """
    return "'" + _NEEDS_ESCAPE_RE.sub(_escape, value) + "'"


def is_js_identifier(name: str) -> bool:
    """True if ``name`` is an ASCII JavaScript identifier name."""
    return _IDENTIFIER_RE.fullmatch(name) is not None


def is_js_variable_name(name: str) -> bool:
    """True if ``name`` can be declared with ``var``."""
    return is_js_identifier(name) and name not in JS_RESERVED_WORDS


def property_access(target: str, name: str) -> str:
    """Return ``target.name``, or ``target['name']`` when dot access won't parse."""
    if is_js_identifier(name):
        return f"{target}.{name}"
    return f"{target}[{quote_js_string(name)}]"


def namespace_segments(namespace: str) -> list[str]:
    """Split a dotted namespace, ignoring leading, trailing and empty segments."""
    return [segment for segment in namespace.strip(".").split(".") if segment]


_TEMP_NAME_RE = re.compile(r"(?:items|i|dot|with|and|or)[0-9]+")


def is_generated_temp(name: str) -> bool:
    """True if ``name`` has the shape of a compiler temporary (``items1``, ``i1``, ...)."""
    return _TEMP_NAME_RE.fullmatch(name) is not None
