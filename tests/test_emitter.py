"""Tests for the JavaScript text emitter."""

import pytest

from templatejs.compiler.emitter import Emitter
from templatejs.environment.exceptions import ErrorCode, InternalCompilerError


class TestWrite:
    def test_write_concatenates_parts(self):
        emitter = Emitter()
        emitter.write("a", "b")
        emitter.write("c")
        assert emitter.getvalue() == "abc"

    def test_write_line_adds_indent_and_newline(self):
        emitter = Emitter()
        emitter.increase_indent()
        emitter.write_line("x = ", "1;")
        assert emitter.getvalue() == "  x = 1;\n"

    def test_write_line_without_parts_is_blank(self):
        """An empty line carries no indentation."""
        emitter = Emitter()
        emitter.increase_indent()
        emitter.write_line()
        assert emitter.getvalue() == "\n"

    def test_write_indent(self):
        emitter = Emitter()
        emitter.increase_indent()
        emitter.increase_indent()
        emitter.write_indent()
        assert emitter.getvalue() == "    "

    def test_line_count_tracks_newlines(self):
        emitter = Emitter()
        emitter.write_line("a;")
        emitter.write("b\nc\n")
        emitter.write_line()
        assert emitter.line_count == 4
        assert emitter.line_count == emitter.getvalue().count("\n")


class TestIndentation:
    def test_indent_level_tracks_changes(self):
        emitter = Emitter()
        assert emitter.indent_level == 0
        emitter.increase_indent()
        emitter.increase_indent()
        assert emitter.indent_level == 2
        emitter.decrease_indent()
        assert emitter.indent_level == 1

    def test_decrease_below_zero_raises(self):
        emitter = Emitter()
        with pytest.raises(InternalCompilerError) as exc_info:
            emitter.decrease_indent()
        assert exc_info.value.code == ErrorCode.INDENT_UNDERFLOW
        assert emitter.indent_level == 0

    def test_indented_context_manager(self):
        emitter = Emitter()
        emitter.write_line("if (x) {")
        with emitter.indented():
            emitter.write_line("y();")
            with emitter.indented():
                emitter.write_line("z();")
        emitter.write_line("}")
        assert emitter.getvalue() == "if (x) {\n  y();\n    z();\n}\n"
        assert emitter.indent_level == 0

    def test_indented_restores_level_on_error(self):
        emitter = Emitter()
        with pytest.raises(RuntimeError), emitter.indented():
            raise RuntimeError("boom")
        assert emitter.indent_level == 0
