"""Tests for error formatting and terminal colour helpers."""

import pytest

from templatejs import (
    ErrorCode,
    InternalCompilerError,
    TemplateCompileError,
    TemplateError,
    TemplateSyntaxError,
    build_source_snippet,
)
from templatejs.environment import terminal


class TestHierarchy:
    def test_all_errors_share_a_base(self):
        for cls in (TemplateSyntaxError, TemplateCompileError, InternalCompilerError):
            assert issubclass(cls, TemplateError)

    def test_default_codes(self):
        assert TemplateSyntaxError("x").code == ErrorCode.UNEXPECTED_TOKEN
        assert TemplateCompileError("x").code == ErrorCode.UNSUPPORTED_CONSTRUCT
        assert InternalCompilerError("x").code == ErrorCode.UNEXPECTED_FAILURE

    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.BAD_NUMBER, "lexer"),
            (ErrorCode.DUPLICATE_TEMPLATE, "parser"),
            (ErrorCode.NOT_A_FUNCTION, "compiler"),
            (ErrorCode.UNKNOWN_NODE, "internal"),
        ],
    )
    def test_code_category(self, code, category):
        assert code.category == category


class TestLocatedErrors:
    def test_message_with_location(self):
        err = TemplateCompileError("boom", name="page", lineno=1, col_offset=2)
        assert str(err) == "Compile Error: boom\n  --> page:1:2"
        assert err.location == "page:1:2"

    def test_unnamed_template(self):
        err = TemplateSyntaxError("boom")
        assert err.location == "<template>"

    def test_snippet_points_at_column(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        err = TemplateCompileError(
            "boom", name="page", lineno=2, col_offset=4, source="a\n  {{x}}\nb"
        )
        text = str(err)
        assert ">  2 |   {{x}}" in text
        assert "       ^" in text
        assert "b" not in text.split("\n")[-1]

    def test_format_compact_includes_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        err = TemplateCompileError(
            "boom", name="page", lineno=1, col_offset=0, code=ErrorCode.INVALID_NAME
        )
        assert err.format_compact() == "TJ-CMP-003: boom\n  --> page:1:0"

    def test_compile_error_from_environment(self, env):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js("page", '{{"hello" 1}}')
        assert "page:1:2" in str(exc_info.value)
        assert "TJ-CMP-001" in exc_info.value.format_compact()


class TestInternalErrors:
    def test_message_prefix(self):
        err = InternalCompilerError("bad state", code=ErrorCode.STACK_UNDERFLOW)
        assert str(err) == "Internal Compiler Error: bad state"
        assert err.message == "bad state"

    def test_format_compact_adds_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        err = InternalCompilerError("bad state", code=ErrorCode.STACK_UNDERFLOW)
        assert err.format_compact() == "TJ-INT-002: Internal Compiler Error: bad state"


class TestSourceSnippet:
    def test_context_lines(self):
        snippet = build_source_snippet("one\ntwo\nthree\nfour", 3, context_lines=1)
        assert snippet.numbered() == [(2, "two"), (3, "three"), (4, "four")]
        assert snippet.error_line == 3

    def test_window_is_clipped_at_start(self):
        snippet = build_source_snippet("one\ntwo", 1, context_lines=2)
        assert snippet.first == 1
        assert snippet.text == ("one", "two")

    def test_out_of_range(self):
        assert build_source_snippet("one", 5) is None
        assert build_source_snippet("one", 0) is None


class TestTerminal:
    def test_plain_when_disabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.style("code", "Error") == "Error"
        assert not terminal.supports_color()

    def test_styled_when_enabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.style("code", "Error")
        assert result == "\033[91;1mError\033[0m"
        assert terminal.strip_colors(result) == "Error"

    def test_unknown_role_is_ignored(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.style("nope", "x") == "x"

    def test_no_color_environment(self, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setenv("NO_COLOR", "1")
        assert not terminal._detect()
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert terminal._detect()

    def test_source_line_marker(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.format_source_line(7, "abc", is_error=True) == ">  7 | abc"
        assert terminal.format_source_line(7, "abc") == "   7 | abc"

    def test_error_header(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.format_error_header("TJ-LEX-001", "oops") == "TJ-LEX-001: oops"
        assert terminal.format_error_header(None, "oops") == "oops"
