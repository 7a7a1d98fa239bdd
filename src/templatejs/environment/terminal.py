"""ANSI styling for compiler diagnostics.

Diagnostics are styled by role (error code, location, line number, ...)
rather than by colour. Styling is on when stderr is a TTY; ``NO_COLOR``
turns it off, ``FORCE_COLOR`` turns it on, and ``TERM=dumb`` is treated
as no colour support.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

Role = Literal["code", "location", "lineno", "error", "muted"]

# SGR parameters per role
_ROLES: dict[str, tuple[int, ...]] = {
    "code": (91, 1),
    "location": (36,),
    "lineno": (33,),
    "error": (91,),
    "muted": (2,),
}

_RESET = "\033[0m"
_SGR_RE = re.compile(r"\033\[[0-9;]*m")


def _detect() -> bool:
    env = os.environ
    if env.get("FORCE_COLOR"):
        return True
    if env.get("NO_COLOR") or env.get("TERM") == "dumb":
        return False
    return sys.stderr.isatty()


_USE_COLORS = _detect()


def supports_color() -> bool:
    return _USE_COLORS


def style(role: Role, text: str) -> str:
    """Wrap ``text`` in the escape sequence for ``role``.

    Unknown roles and disabled colour leave ``text`` untouched:

        >>> style("location", "page:1:2")  # with colour on
        '\\x1b[36mpage:1:2\\x1b[0m'
    """
    params = _ROLES.get(role)
    if not (_USE_COLORS and params):
        return text
    return f"\033[{';'.join(map(str, params))}m{text}{_RESET}"


def strip_colors(text: str) -> str:
    return _SGR_RE.sub("", text)


def format_error_header(code: str | None, message: str) -> str:
    """``CODE: message``, or just the message without a code."""
    return f"{style('code', code)}: {message}" if code else message


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """One gutter-numbered source line; the error line is marked with ``>``."""
    gutter = style("lineno", f"{'>' if is_error else ' '}{lineno:>3}")
    return f"{gutter} | {style('error' if is_error else 'muted', content)}"
