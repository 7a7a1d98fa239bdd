"""Environment: configuration, function table and error types."""

from templatejs.environment.core import Environment
from templatejs.environment.exceptions import (
    ErrorCode,
    InternalCompilerError,
    SourceSnippet,
    TemplateCompileError,
    TemplateError,
    TemplateSyntaxError,
    build_source_snippet,
)
from templatejs.environment.functions import BUILTIN_FUNCTIONS, builtin_functions
from templatejs.environment.registry import FunctionRegistry

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
    "build_source_snippet",
    "builtin_functions",
]
