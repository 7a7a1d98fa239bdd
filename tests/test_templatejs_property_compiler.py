"""Property-based tests for the templatejs compiler.

Uses hypothesis to check invariants of the generated JavaScript for
generated templates:

- Compiling the same source twice gives the same output
- Braces in the output are balanced
- Adjacent literal output is batched into a single append
- Indentation is always a whole number of levels
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings

from templatejs import Environment

from .strategies import literal_fragment, namespace, nested_template, simple_text


@pytest.fixture(scope="module")
def shared_env():
    return Environment()


def lines_of(js: str) -> list[str]:
    # Template text never contributes a raw newline, so split on "\n" only
    return js.split("\n")


class TestCompilerProperties:
    """Property-based compiler invariants."""

    @given(source=nested_template)
    @settings(max_examples=100)
    def test_deterministic(self, shared_env, source: str) -> None:
        assert shared_env.compile_to_js("t", source, "ns") == shared_env.compile_to_js(
            "t", source, "ns"
        )

    @given(source=nested_template)
    @settings(max_examples=150)
    def test_braces_balance(self, shared_env, source: str) -> None:
        """Generated code opens and closes every block it starts."""
        js = shared_env.compile_to_js("t", source, "ns")
        assert js.count("{") == js.count("}")

    @given(source=nested_template)
    @settings(max_examples=100)
    def test_indentation_is_whole_levels(self, shared_env, source: str) -> None:
        for line in lines_of(shared_env.compile_to_js("t", source, "ns")):
            indent = len(line) - len(line.lstrip(" "))
            assert indent % 2 == 0

    @given(source=nested_template)
    @settings(max_examples=100)
    def test_no_empty_appends(self, shared_env, source: str) -> None:
        js = shared_env.compile_to_js("t", source, "ns")
        assert "append()" not in js
        assert "new soy.StringBuilder()" in js

    @given(source=literal_fragment)
    @settings(max_examples=150)
    def test_literal_output_is_batched(self, shared_env, source: str) -> None:
        """Text and comments alone become exactly one append call."""
        js = shared_env.compile_to_js("t", source, "ns")
        appends = [line for line in lines_of(js) if line.startswith("  output.append(")]
        assert len(appends) == 1

    @given(text=simple_text)
    @settings(max_examples=100)
    def test_simple_text_is_copied_verbatim(self, shared_env, text: str) -> None:
        js = shared_env.compile_to_js("t", text, "ns")
        assert f"  output.append('{text}');\n" in js

    @given(ns=namespace)
    @settings(max_examples=100)
    def test_namespace_dots_are_normalized(self, shared_env, ns: str) -> None:
        assert shared_env.compile_to_js("t", "x", f".{ns}.") == shared_env.compile_to_js(
            "t", "x", ns
        )

    @given(ns=namespace)
    @settings(max_examples=50)
    def test_every_namespace_level_is_guarded(self, shared_env, ns: str) -> None:
        js = shared_env.compile_to_js("t", "x", ns)
        segments = ns.split(".")
        for depth in range(1, len(segments) + 1):
            path = ".".join(segments[:depth])
            assert f"if (typeof {path} == 'undefined')" in js
        assert f"{ns}.t = function(opt_data, opt_sb) {{" in js
