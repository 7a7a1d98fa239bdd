"""Tests for output-accumulator frames and pending-literal batching."""

import pytest

from templatejs.compiler.accumulator import OutputAccumulator
from templatejs.compiler.emitter import Emitter
from templatejs.environment.exceptions import ErrorCode, InternalCompilerError


@pytest.fixture
def emitter():
    return Emitter()


@pytest.fixture
def acc(emitter):
    return OutputAccumulator(emitter)


class TestFrames:
    def test_push_sets_current_name(self, acc):
        acc.push_frame("output")
        assert acc.current_name == "output"
        assert not acc.is_initialized()

    def test_nested_frames(self, acc):
        acc.push_frame("output")
        acc.mark_initialized()
        acc.push_frame("param1")
        assert acc.current_name == "param1"
        assert not acc.is_initialized()
        acc.pop_frame()
        assert acc.current_name == "output"
        assert acc.is_initialized()

    def test_pop_without_frame_raises(self, acc):
        with pytest.raises(InternalCompilerError) as exc_info:
            acc.pop_frame()
        assert exc_info.value.code == ErrorCode.STACK_UNDERFLOW

    def test_current_name_without_frame_raises(self, acc):
        with pytest.raises(InternalCompilerError):
            acc.current_name  # noqa: B018

    def test_is_initialized_without_frame_raises(self, acc):
        with pytest.raises(InternalCompilerError):
            acc.is_initialized()

    def test_mark_initialized_without_frame_raises(self, acc):
        with pytest.raises(InternalCompilerError):
            acc.mark_initialized()

    def test_pop_with_pending_output_raises(self, acc):
        acc.push_frame("output")
        acc.enqueue("'x'")
        with pytest.raises(InternalCompilerError) as exc_info:
            acc.pop_frame()
        assert exc_info.value.code == ErrorCode.UNFLUSHED_OUTPUT


class TestInitialization:
    def test_ensure_initialized_emits_constructor_once(self, acc, emitter):
        acc.push_frame("output")
        acc.ensure_initialized()
        acc.ensure_initialized()
        assert emitter.getvalue() == "var output = new soy.StringBuilder();\n"
        assert acc.is_initialized()

    def test_ensure_initialized_after_mark_emits_nothing(self, acc, emitter):
        acc.push_frame("output")
        acc.mark_initialized()
        acc.ensure_initialized()
        assert emitter.getvalue() == ""

    def test_custom_builder(self, emitter):
        acc = OutputAccumulator(emitter, "goog.string.StringBuffer")
        acc.push_frame("out")
        acc.ensure_initialized()
        assert emitter.getvalue() == "var out = new goog.string.StringBuffer();\n"


class TestFlush:
    def test_flush_on_empty_queue_is_noop(self, acc, emitter):
        acc.push_frame("output")
        acc.flush_pending()
        assert emitter.getvalue() == ""
        assert not acc.is_initialized()

    def test_first_flush_seeds_constructor(self, acc, emitter):
        acc.push_frame("output")
        acc.enqueue("'a'")
        acc.enqueue("'b'")
        acc.flush_pending()
        assert emitter.getvalue() == "var output = new soy.StringBuilder('a', 'b');\n"
        assert acc.is_initialized()

    def test_flush_after_initialization_appends(self, acc, emitter):
        acc.push_frame("output")
        acc.mark_initialized()
        acc.enqueue("'a'")
        acc.enqueue("x")
        acc.flush_pending()
        assert emitter.getvalue() == "output.append('a', x);\n"

    def test_flush_clears_queue(self, acc, emitter):
        acc.push_frame("output")
        acc.mark_initialized()
        acc.enqueue("'a'")
        assert acc.has_pending()
        acc.flush_pending()
        assert not acc.has_pending()
        acc.flush_pending()
        assert emitter.getvalue() == "output.append('a');\n"
        acc.pop_frame()
        assert acc.depth == 0

    def test_flush_uses_emitter_indentation(self, acc, emitter):
        acc.push_frame("output")
        acc.mark_initialized()
        acc.enqueue("'a'")
        with emitter.indented():
            acc.flush_pending()
        assert emitter.getvalue() == "  output.append('a');\n"

    def test_queues_are_per_frame(self, acc, emitter):
        acc.push_frame("output")
        acc.mark_initialized()
        acc.enqueue("'outer'")
        acc.push_frame("inner")
        assert not acc.has_pending()
        acc.enqueue("'inner'")
        acc.flush_pending()
        acc.pop_frame()
        acc.flush_pending()
        assert emitter.getvalue() == (
            "var inner = new soy.StringBuilder('inner');\n"
            "output.append('outer');\n"
        )
