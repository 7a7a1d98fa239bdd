"""Template AST nodes.

Immutable, frozen dataclasses produced by the parser and consumed by the
compiler. The set of kinds is closed; the compiler treats an unknown kind as
a defect.
"""

from templatejs.nodes.base import Node
from templatejs.nodes.control_flow import Break, Continue, If, Range, With
from templatejs.nodes.expressions import (
    Bool,
    Chain,
    Command,
    Dot,
    Expr,
    Field,
    Identifier,
    Nil,
    Number,
    Pipe,
    String,
    Variable,
    describe,
)
from templatejs.nodes.output import Action, Text
from templatejs.nodes.structure import Template, Tree, is_empty_tree

__all__ = [
    "Action",
    "Bool",
    "Break",
    "Chain",
    "Command",
    "Continue",
    "Dot",
    "Expr",
    "Field",
    "Identifier",
    "If",
    "Nil",
    "Node",
    "Number",
    "Pipe",
    "Range",
    "String",
    "Template",
    "Text",
    "Tree",
    "Variable",
    "With",
    "describe",
    "is_empty_tree",
]
