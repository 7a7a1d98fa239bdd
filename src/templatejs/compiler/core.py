"""templatejs Compiler Core: the JSCompiler class.

The JSCompiler lowers a set of parsed template trees to one JavaScript
source file. Each tree becomes a function that renders into a
StringBuilder. Uses a mixin-based design for maintainability.

Design Principles:
1. **Source strings**: JavaScript is assembled as text through one Emitter
2. **StringBuilder**: Output via ``output.append(...)``, ``toString()`` at end
3. **Batching**: Adjacent output fragments share one ``append`` call
4. **O(1) dispatch**: Dict-based node type → handler lookup

Generated code for ``{{define "hello"}}Hello, {{.Name}}!{{end}}`` in the
``app.views`` namespace:

    ```javascript
    // Code generated by templatejs.
    // Please don't edit this file by hand.

    if (typeof app == 'undefined') { var app = {}; }
    if (typeof app.views == 'undefined') { app.views = {}; }

    app.views.hello = function(opt_data, opt_sb) {
      var output = opt_sb || new soy.StringBuilder();
      output.append('Hello, ', soy.$$print(opt_data.Name), '!');
      return opt_sb ? '' : output.toString();
    };
    ```

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from templatejs.compiler.accumulator import OutputAccumulator
from templatejs.compiler.emitter import Emitter
from templatejs.compiler.expressions import ExpressionCompilationMixin
from templatejs.compiler.statements import StatementCompilationMixin
from templatejs.compiler.utils import (
    is_generated_temp,
    is_js_variable_name,
    namespace_segments,
    property_access,
)
from templatejs.environment.exceptions import (
    ErrorCode,
    InternalCompilerError,
    TemplateCompileError,
    TemplateError,
)

if TYPE_CHECKING:
    from templatejs.nodes import Node, Tree, Variable

logger = logging.getLogger(__name__)

HEADER = (
    "// Code generated by templatejs.",
    "// Please don't edit this file by hand.",
)

DATA_ARG = "opt_data"
BUILDER_ARG = "opt_sb"


class JSCompiler(
    ExpressionCompilationMixin,
    StatementCompilationMixin,
):
    """Compile template trees to JavaScript source.

    A JSCompiler instance is single-use state for one compilation run; the
    Environment creates a fresh one per call.

    Attributes:
        _functions: Template function name → JavaScript callee expression
        _runtime: Name of the runtime helper object (``soy``)
        _builder: StringBuilder constructor expression
        _output_var: Accumulator variable of every template function
        _emitter: Output text buffer
        _acc: Accumulator frame stack writing through ``_emitter``
        _namespace: Dotted namespace prefix, "" for none
        _tree: Tree currently being compiled (for error locations)
        _dot_stack: JavaScript expression for ``.``, innermost last
        _var_scopes: Template variable → JavaScript name, innermost last
        _var_counts: Rebinding counter per variable name
        _temp_counter: Counter for loop and with temporaries

    Node Dispatch:
        Uses O(1) dict lookup for node type → handler:
            ```python
            dispatch = {
                "Text": self._compile_text,
                "Action": self._compile_action,
                "If": self._compile_if,
                ...
            }
            handler = dispatch[type(node).__name__]
            ```

    Example:
            >>> from templatejs.lexer import tokenize
            >>> from templatejs.parser import Parser
            >>> trees = Parser(tokenize("hello world"), "greeting").parse()
            >>> js = JSCompiler({}).compile(trees, "app")
            >>> "app.greeting = function(opt_data, opt_sb) {" in js
            True

    """

    __slots__ = (
        "_acc",
        "_builder",
        "_dot_stack",
        "_emitter",
        "_functions",
        "_namespace",
        "_node_dispatch",
        "_output_var",
        "_runtime",
        "_temp_counter",
        "_tree",
        "_var_counts",
        "_var_scopes",
    )

    def __init__(
        self,
        functions: Mapping[str, str],
        *,
        runtime: str = "soy",
        string_builder: str | None = None,
        output_var: str = "output",
    ):
        self._functions = functions
        self._runtime = runtime
        self._builder = string_builder or f"{runtime}.StringBuilder"
        self._output_var = output_var
        self._emitter = Emitter()
        self._acc = OutputAccumulator(self._emitter, self._builder)
        self._namespace = ""
        self._tree: Tree | None = None
        self._dot_stack: list[str] = []
        self._var_scopes: list[dict[str, str]] = []
        self._var_counts: dict[str, int] = {}
        self._temp_counter = 0
        self._node_dispatch: dict[str, Callable[[Any], None]] = {
            "Text": self._compile_text,
            "Action": self._compile_action,
            "If": self._compile_if,
            "Range": self._compile_range,
            "With": self._compile_with,
            "Break": self._compile_break,
            "Continue": self._compile_continue,
            "Template": self._compile_template,
        }

    def compile(self, tree_set: Mapping[str, Tree], namespace: str = "") -> str:
        """Compile every tree in ``tree_set`` and return the JavaScript source.

        Trees are emitted sorted by name so the output only depends on the
        input. Nothing is returned on failure: template problems raise
        TemplateError subclasses unchanged, and any other exception is
        reported as an InternalCompilerError chained to its cause.
        """
        try:
            return self._compile_tree_set(tree_set, namespace)
        except TemplateError:
            raise
        except Exception as exc:
            where = f" in template {self._tree.name!r}" if self._tree is not None else ""
            raise InternalCompilerError(
                f"{type(exc).__name__} while compiling{where}: {exc}"
            ) from exc

    def _compile_tree_set(self, tree_set: Mapping[str, Tree], namespace: str) -> str:
        emitter = self._emitter
        for line in HEADER:
            emitter.write_line(line)
        emitter.write_line()

        self._declare_namespace(namespace)

        for name in sorted(tree_set):
            self._compile_tree(tree_set[name])

        logger.debug(
            "Compiled %d template(s) into namespace %r", len(tree_set), self._namespace
        )
        return emitter.getvalue()

    def _declare_namespace(self, namespace: str) -> None:
        """Emit guarded declarations for each level of ``namespace``.

        Generates:
            if (typeof a == 'undefined') { var a = {}; }
            if (typeof a.b == 'undefined') { a.b = {}; }
        """
        segments = namespace_segments(namespace)
        path = ""
        for segment in segments:
            if not is_js_variable_name(segment):
                raise TemplateCompileError(
                    f"invalid namespace segment {segment!r} in {namespace!r}",
                    code=ErrorCode.INVALID_NAME,
                )
            if path:
                path += "." + segment
                self._emitter.write_line(f"if (typeof {path} == 'undefined') {{ {path} = {{}}; }}")
            else:
                if self._clashes(segment):
                    raise TemplateCompileError(
                        f"namespace {namespace!r} starts with {segment!r}, "
                        "a name the generated code uses",
                        code=ErrorCode.INVALID_NAME,
                    )
                path = segment
                self._emitter.write_line(
                    f"if (typeof {path} == 'undefined') {{ var {path} = {{}}; }}"
                )
        if segments:
            self._emitter.write_line()
        self._namespace = path

    def _compile_tree(self, tree: Tree) -> None:
        """Emit the function for one template.

        Generates:
            ns.name = function(opt_data, opt_sb) {
              var output = opt_sb || new soy.StringBuilder();
              ...
              return opt_sb ? '' : output.toString();
            };
        """
        self._tree = tree
        self._dot_stack = [DATA_ARG]
        self._var_scopes = [{"$": DATA_ARG}]
        self._var_counts = {}
        self._temp_counter = 0

        emitter = self._emitter
        output = self._output_var
        start = emitter.line_count

        self._acc.push_frame(output)
        target = self._qualified_name(tree.name)
        declare = "" if self._namespace else "var "
        emitter.write_line(f"{declare}{target} = function({DATA_ARG}, {BUILDER_ARG}) {{")
        with emitter.indented():
            emitter.write_line(f"var {output} = {BUILDER_ARG} || new {self._builder}();")
            self._acc.mark_initialized()
            for node in tree.root:
                self._compile_node(node)
            self._acc.flush_pending()
            emitter.write_line(f"return {BUILDER_ARG} ? '' : {output}.toString();")
        emitter.write_line("};")
        emitter.write_line()
        self._acc.pop_frame()

        logger.debug(
            "Compiled template %r (%d lines)",
            tree.name,
            emitter.line_count - start,
        )

    def _compile_node(self, node: Node) -> None:
        """Compile a single node using O(1) dict dispatch."""
        handler = self._node_dispatch.get(type(node).__name__)
        if handler is None:
            raise InternalCompilerError(
                f"unexpected node type {type(node).__name__}", code=ErrorCode.UNKNOWN_NODE
            )
        handler(node)

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _qualified_name(self, name: str, node: Node | None = None) -> str:
        """JavaScript expression naming the function of template ``name``."""
        if self._namespace:
            return property_access(self._namespace, name)
        if not is_js_variable_name(name):
            message = (
                f"template name {name!r} is not a valid JavaScript identifier; "
                "compile it into a namespace"
            )
        elif self._clashes(name):
            message = (
                f"template name {name!r} is a name the generated code uses; "
                "compile it into a namespace"
            )
        else:
            return name
        if node is not None:
            raise self._error(message, node, code=ErrorCode.INVALID_NAME)
        raise TemplateCompileError(message, name=name, code=ErrorCode.INVALID_NAME)

    def _clashes(self, name: str) -> bool:
        """True if a global ``name`` would collide with a name of the generated code.

        That is the function parameters, the accumulator, the roots of the
        runtime and builder expressions, and loop or branch temporaries.
        """
        reserved = {
            DATA_ARG,
            BUILDER_ARG,
            self._output_var,
            self._runtime.split(".")[0],
            self._builder.split(".")[0],
        }
        return name in reserved or is_generated_temp(name)

    def _new_temp(self) -> int:
        self._temp_counter += 1
        return self._temp_counter

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    @contextmanager
    def _variable_scope(self) -> Iterator[None]:
        """Variables declared inside the block go out of scope at its end."""
        self._var_scopes.append({})
        try:
            yield
        finally:
            self._var_scopes.pop()

    def _declare_var(self, node: Variable) -> str:
        """Bind a template variable in the innermost scope.

        A name that is still visible from an earlier declaration gets a
        fresh JavaScript name ($x$1, $x$2, ...) so the earlier binding keeps
        its value once the new one goes out of scope.
        """
        name = node.name
        if any(name in scope for scope in self._var_scopes):
            count = self._var_counts.get(name, 0) + 1
            self._var_counts[name] = count
            js_name = f"{name}${count}"
        else:
            js_name = name
        self._var_scopes[-1][name] = js_name
        return js_name

    def _resolve_var(self, node: Variable) -> str:
        name = node.name
        for scope in reversed(self._var_scopes):
            if name in scope:
                return scope[name]
        raise self._error(
            f"undefined variable {name!r}", node, code=ErrorCode.UNDEFINED_VARIABLE
        )

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _error(
        self,
        message: str,
        node: Node,
        code: ErrorCode = ErrorCode.UNSUPPORTED_CONSTRUCT,
    ) -> TemplateCompileError:
        tree = self._tree
        return TemplateCompileError(
            message,
            name=(tree.parse_name or tree.name) if tree is not None else None,
            lineno=getattr(node, "lineno", None),
            col_offset=getattr(node, "col_offset", None),
            source=tree.source if tree is not None else None,
            code=code,
        )
