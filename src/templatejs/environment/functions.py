"""Built-in template functions.

Go's predefined template functions are implemented by the JavaScript
runtime. This module maps each template name to the runtime helper that
implements it; the runtime object name (``soy`` by default) is prefixed
when an Environment is created.
"""

from __future__ import annotations

# Template function → runtime helper
BUILTIN_FUNCTIONS: dict[str, str] = {
    "and": "$$and",
    "call": "$$call",
    "html": "$$escapeHtml",
    "index": "$$index",
    "js": "$$escapeJs",
    "len": "$$len",
    "not": "$$not",
    "or": "$$or",
    "print": "$$sprint",
    "printf": "$$sprintf",
    "println": "$$sprintln",
    "slice": "$$slice",
    "urlquery": "$$escapeUri",
    # Comparisons
    "eq": "$$eq",
    "ge": "$$ge",
    "gt": "$$gt",
    "le": "$$le",
    "lt": "$$lt",
    "ne": "$$ne",
}


def builtin_functions(runtime: str = "soy") -> dict[str, str]:
    """Return the built-in function table bound to ``runtime``.

    Example:
        >>> builtin_functions("rt")["len"]
        'rt.$$len'
    """
    return {name: f"{runtime}.{helper}" for name, helper in BUILTIN_FUNCTIONS.items()}
