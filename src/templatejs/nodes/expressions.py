"""Expression nodes for the template AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from templatejs.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for operands."""


@dataclass(frozen=True, slots=True)
class Dot(Expr):
    """The current context: {{.}}"""


@dataclass(frozen=True, slots=True)
class Nil(Expr):
    """The untyped nil constant."""


@dataclass(frozen=True, slots=True)
class Bool(Expr):
    """Boolean constant: true, false"""

    value: bool


@dataclass(frozen=True, slots=True)
class String(Expr):
    """String constant.

    Attributes:
        quoted: Literal as written, quotes included
        value: Unquoted value
    """

    quoted: str
    value: str


@dataclass(frozen=True, slots=True)
class Number(Expr):
    """Numeric constant, including character constants like 'a'.

    ``text`` keeps the literal as written; the parsed value lives in
    whichever of ``int_value``/``float_value``/``complex_value`` applies.
    """

    text: str
    int_value: int | None = None
    float_value: float | None = None
    complex_value: complex | None = None
    is_char: bool = False

    @property
    def is_int(self) -> bool:
        return self.int_value is not None

    @property
    def is_complex(self) -> bool:
        return self.complex_value is not None


@dataclass(frozen=True, slots=True)
class Identifier(Expr):
    """Function name: {{len .Items}}"""

    name: str


@dataclass(frozen=True, slots=True)
class Field(Expr):
    """Field chain on the current context: {{.User.Name}}"""

    ident: Sequence[str]


@dataclass(frozen=True, slots=True)
class Variable(Expr):
    """Variable reference with optional field chain: {{$user.Name}}

    ``ident[0]`` is the variable name including the leading ``$``.
    """

    ident: Sequence[str]

    @property
    def name(self) -> str:
        return self.ident[0]


@dataclass(frozen=True, slots=True)
class Chain(Expr):
    """Field chain on a parenthesized pipeline: {{(index .Rows 0).Name}}"""

    node: Expr
    field: Sequence[str]


@dataclass(frozen=True, slots=True)
class Command(Node):
    """One pipeline stage: operator followed by its arguments."""

    args: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Pipe(Expr):
    """Pipeline with optional declaration: $x := cmd1 | cmd2

    Attributes:
        decl: Variables declared or assigned by the pipeline
        cmds: Stages in evaluation order
        is_assign: True for ``=`` (assignment), False for ``:=``
    """

    decl: Sequence[Variable]
    cmds: Sequence[Command]
    is_assign: bool = False


def describe(node: Expr) -> str:
    """Short source-like rendering of an operand for error messages."""
    if isinstance(node, String):
        return node.quoted
    if isinstance(node, Number):
        return node.text
    if isinstance(node, Bool):
        return "true" if node.value else "false"
    if isinstance(node, Dot):
        return "."
    if isinstance(node, Nil):
        return "nil"
    if isinstance(node, Variable):
        return ".".join(node.ident)
    if isinstance(node, Pipe):
        return "(pipeline)"
    return type(node).__name__
