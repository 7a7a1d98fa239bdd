"""Template structure nodes for the template AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from templatejs.nodes.base import Node
from templatejs.nodes.expressions import Pipe
from templatejs.nodes.output import Text


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Invocation of a named template: {{template "name" pipeline}}"""

    name: str
    pipe: Pipe | None = None


@dataclass(frozen=True, slots=True)
class Tree:
    """One parsed template.

    Attributes:
        name: Template name (the emitted function's name)
        root: Top-level nodes in emission order
        parse_name: Name of the top-level template this one was defined in
        source: Source text the tree was parsed from (for error snippets)
    """

    name: str
    root: Sequence[Node]
    parse_name: str = ""
    source: str | None = None

    @property
    def is_empty(self) -> bool:
        """True if the tree holds nothing but whitespace text."""
        return is_empty_tree(self.root)


def is_empty_tree(nodes: Sequence[Node]) -> bool:
    return all(isinstance(node, Text) and not node.value.strip() for node in nodes)
