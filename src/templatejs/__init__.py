"""templatejs: compile Go text/template templates to JavaScript.

Templates written in Go's text/template language are parsed and lowered
to JavaScript functions that render into a StringBuilder, so the same
template source can render on the server and in the browser.

Quickstart:
    >>> import templatejs
    >>> print(templatejs.to_js("hello", "hello {{.Name}}", "app"))
    // Code generated by templatejs.
    // Please don't edit this file by hand.
    <BLANKLINE>
    if (typeof app == 'undefined') { var app = {}; }
    <BLANKLINE>
    app.hello = function(opt_data, opt_sb) {
      var output = opt_sb || new soy.StringBuilder();
      output.append('hello ', soy.$$print(opt_data.Name));
      return opt_sb ? '' : output.toString();
    };
    <BLANKLINE>

Custom functions map a template function name to a JavaScript callee:
    >>> from templatejs import Environment
    >>> env = Environment(functions={"upper": "app.strings.upper"})
    >>> js = env.compile_to_js("title", "{{.Title | upper}}", "app.views")

Architecture:
Template Source → Lexer → Parser → Tree set → JSCompiler → JavaScript

Pipeline stages:
1. **Lexer**: Tokenizes template source into a token list
2. **Parser**: Builds one immutable Tree per template name
3. **Compiler**: Lowers each Tree to a ``function(opt_data, opt_sb)``

Runtime:
The generated code calls helpers on a runtime object (``soy`` by default):
``StringBuilder``, ``$$print``, ``$$truth``, ``$$items`` and one helper per
built-in function (``$$len``, ``$$sprintf``, ...). Go semantics that depend
on runtime values (truthiness, map ordering, printing) live there.

Thread-Safety:
Compilation only uses per-call state. An Environment may be shared between
threads; its function table is replaced copy-on-write.

"""

from templatejs._types import Token, TokenType
from templatejs.environment import (
    BUILTIN_FUNCTIONS,
    Environment,
    ErrorCode,
    FunctionRegistry,
    InternalCompilerError,
    SourceSnippet,
    TemplateCompileError,
    TemplateError,
    TemplateSyntaxError,
    build_source_snippet,
)
from templatejs.lexer import tokenize
from templatejs.nodes import Tree

__version__ = "0.1.0"

__all__ = [
    "BUILTIN_FUNCTIONS",
    "Environment",
    "ErrorCode",
    "FunctionRegistry",
    "InternalCompilerError",
    "SourceSnippet",
    "TemplateCompileError",
    "TemplateError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "Tree",
    "__version__",
    "build_source_snippet",
    "to_js",
    "tokenize",
]

_default_env: Environment | None = None


def to_js(name: str, source: str, namespace: str = "") -> str:
    """Compile one template source to JavaScript with the default settings.

    Raises:
        TemplateSyntaxError: If the source is malformed
        TemplateCompileError: If a node cannot be lowered
        InternalCompilerError: On a compiler defect
    """
    global _default_env
    if _default_env is None:
        _default_env = Environment()
    return _default_env.compile_to_js(name, source, namespace)
