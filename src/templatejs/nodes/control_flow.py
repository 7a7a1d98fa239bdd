"""Control flow nodes for the template AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from templatejs.nodes.base import Node
from templatejs.nodes.expressions import Pipe


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {{if pipeline}}...{{else if pipeline}}...{{else}}...{{end}}

    An ``else if`` chain is stored as a single nested If in ``else_``.
    """

    pipe: Pipe
    body: Sequence[Node]
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Range(Node):
    """Iteration: {{range $i, $e := pipeline}}...{{else}}...{{end}}

    ``else_`` renders when the collection has no elements.
    """

    pipe: Pipe
    body: Sequence[Node]
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class With(Node):
    """Scope narrowing: {{with pipeline}}...{{else with pipeline}}...{{end}}"""

    pipe: Pipe
    body: Sequence[Node]
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Break(Node):
    """Leave the innermost range: {{break}}"""


@dataclass(frozen=True, slots=True)
class Continue(Node):
    """Skip to the next range iteration: {{continue}}"""
