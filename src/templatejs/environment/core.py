"""Core Environment class for templatejs.

The Environment is the central configuration object: it holds the action
delimiters, the function table and the names the generated JavaScript uses
for its runtime, and runs the lexer, parser and compiler with them.

Thread-Safety:
    - Configuration is read-only after construction, except the function
      table, which is replaced copy-on-write on every change
    - Each compile call uses its own JSCompiler, Emitter and accumulator
      stack, so one Environment may be shared between threads
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from templatejs.compiler import JSCompiler
from templatejs.environment.functions import builtin_functions
from templatejs.environment.registry import FunctionRegistry
from templatejs.lexer import tokenize
from templatejs.parser import Parser

if TYPE_CHECKING:
    from templatejs.nodes import Tree

logger = logging.getLogger(__name__)


class Environment:
    """Configuration for compiling Go templates to JavaScript.

    Args:
        left_delim: Opening action delimiter
        right_delim: Closing action delimiter
        functions: Extra template functions, name → JavaScript callee
            expression; merged over the built-ins
        runtime: Name of the JavaScript object providing the runtime helpers
        string_builder: StringBuilder constructor expression; defaults to
            ``<runtime>.StringBuilder``
        output_var: Accumulator variable name in generated functions

    Example:
        >>> env = Environment(functions={"upper": "app.strings.upper"})
        >>> js = env.compile_to_js("title", "{{upper .Title}}", "app.views")
        >>> "app.strings.upper(opt_data.Title)" in js
        True
    """

    __slots__ = (
        "_functions",
        "left_delim",
        "output_var",
        "right_delim",
        "runtime",
        "string_builder",
    )

    def __init__(
        self,
        *,
        left_delim: str = "{{",
        right_delim: str = "}}",
        functions: Mapping[str, str] | None = None,
        runtime: str = "soy",
        string_builder: str | None = None,
        output_var: str = "output",
    ):
        if not left_delim or not right_delim:
            raise ValueError("action delimiters must not be empty")
        self.left_delim = left_delim
        self.right_delim = right_delim
        self.runtime = runtime
        self.string_builder = string_builder or f"{runtime}.StringBuilder"
        self.output_var = output_var
        table = builtin_functions(runtime)
        if functions:
            table.update(functions)
        self._functions: dict[str, str] = table

    @property
    def functions(self) -> FunctionRegistry:
        """Template functions, name → JavaScript callee expression."""
        return FunctionRegistry(self)

    def parse(self, name: str, source: str) -> dict[str, Tree]:
        """Parse ``source`` into its tree set.

        The result holds the template ``name`` plus every ``{{define}}`` and
        ``{{block}}`` found in it.

        Raises:
            TemplateSyntaxError: If the source is malformed
        """
        tokens = tokenize(source, name, self.left_delim, self.right_delim)
        trees = Parser(tokens, name, source, funcs=self._functions).parse()
        logger.debug("Parsed %r into trees %s", name, sorted(trees))
        return trees

    def compile(self, tree_set: Mapping[str, Tree], namespace: str = "") -> str:
        """Compile a tree set to JavaScript source.

        Raises:
            TemplateCompileError: If a node cannot be lowered
            InternalCompilerError: On a compiler defect
        """
        compiler = JSCompiler(
            self._functions,
            runtime=self.runtime,
            string_builder=self.string_builder,
            output_var=self.output_var,
        )
        return compiler.compile(tree_set, namespace)

    def compile_to_js(self, name: str, source: str, namespace: str = "") -> str:
        """Parse and compile one template source to JavaScript."""
        return self.compile(self.parse(name, source), namespace)

    def __repr__(self) -> str:
        return (
            f"<Environment delims={self.left_delim!r}/{self.right_delim!r} "
            f"runtime={self.runtime!r} functions={len(self._functions)}>"
        )
