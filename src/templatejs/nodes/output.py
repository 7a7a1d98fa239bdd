"""Output nodes for the template AST."""

from __future__ import annotations

from dataclasses import dataclass

from templatejs.nodes.base import Node
from templatejs.nodes.expressions import Pipe


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text between actions."""

    value: str


@dataclass(frozen=True, slots=True)
class Action(Node):
    """Interpolation or declaration: {{ pipeline }}, {{ $x := pipeline }}"""

    pipe: Pipe
