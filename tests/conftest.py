"""Pytest configuration and fixtures for templatejs tests."""

import pytest

from templatejs import Environment


@pytest.fixture
def env():
    """Create a basic templatejs Environment."""
    return Environment()


@pytest.fixture
def env_custom_delims():
    """Create an Environment using <% %> action delimiters."""
    return Environment(left_delim="<%", right_delim="%>")


@pytest.fixture
def env_with_functions():
    """Create an Environment with application functions registered."""
    return Environment(
        functions={
            "upper": "app.strings.upper",
            "join": "app.strings.join",
        }
    )


@pytest.fixture
def body(env):
    """Compile a template into the ``ns`` namespace and return one function body.

    The body is the list of lines between the accumulator prologue and the
    return statement, with the function-level indentation removed.
    """

    def _body(source: str, name: str = "t", *, environment: Environment | None = None) -> list[str]:
        js = (environment or env).compile_to_js(name, source, "ns")
        return function_body(js, f"ns.{name}")

    return _body


def function_body(js: str, target: str) -> list[str]:
    """Extract the body lines of the function assigned to ``target``."""
    lines = js.splitlines()
    start = lines.index(f"{target} = function(opt_data, opt_sb) {{")
    end = lines.index("};", start)
    inner = lines[start + 1 : end]
    assert inner[0].startswith("  var output = opt_sb || new ")
    assert inner[-1] == "  return opt_sb ? '' : output.toString();"
    return [line[2:] for line in inner[1:-1]]
