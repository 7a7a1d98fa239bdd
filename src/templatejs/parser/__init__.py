"""Template front-end: turns a token list into named template trees."""

from __future__ import annotations

from templatejs.parser.core import Parser
from templatejs.parser.errors import ParseError

__all__ = ["ParseError", "Parser"]
