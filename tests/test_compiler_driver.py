"""Tests for the JSCompiler driver: file layout, namespaces and failures."""

from dataclasses import dataclass

import pytest

from templatejs.compiler import JSCompiler
from templatejs.environment.exceptions import (
    ErrorCode,
    InternalCompilerError,
    TemplateCompileError,
)
from templatejs.environment.functions import builtin_functions
from templatejs.nodes import Node, Text, Tree


def compile_trees(trees, namespace=""):
    return JSCompiler(builtin_functions()).compile({t.name: t for t in trees}, namespace)


class TestFileLayout:
    def test_complete_output(self, env):
        js = env.compile_to_js("hello", "Hello, {{.Name}}!", "app.views")
        assert js == (
            "// Code generated by templatejs.\n"
            "// Please don't edit this file by hand.\n"
            "\n"
            "if (typeof app == 'undefined') { var app = {}; }\n"
            "if (typeof app.views == 'undefined') { app.views = {}; }\n"
            "\n"
            "app.views.hello = function(opt_data, opt_sb) {\n"
            "  var output = opt_sb || new soy.StringBuilder();\n"
            "  output.append('Hello, ', soy.$$print(opt_data.Name), '!');\n"
            "  return opt_sb ? '' : output.toString();\n"
            "};\n"
            "\n"
        )

    def test_without_namespace(self, env):
        js = env.compile_to_js("hello", "hi")
        assert js == (
            "// Code generated by templatejs.\n"
            "// Please don't edit this file by hand.\n"
            "\n"
            "var hello = function(opt_data, opt_sb) {\n"
            "  var output = opt_sb || new soy.StringBuilder();\n"
            "  output.append('hi');\n"
            "  return opt_sb ? '' : output.toString();\n"
            "};\n"
            "\n"
        )

    def test_empty_tree_set_is_header_only(self):
        js = JSCompiler({}).compile({}, "")
        assert js == "// Code generated by templatejs.\n// Please don't edit this file by hand.\n\n"

    def test_empty_template_still_gets_a_function(self, env):
        js = env.compile_to_js("empty", "", "ns")
        assert "ns.empty = function(opt_data, opt_sb) {\n" in js
        assert "  return opt_sb ? '' : output.toString();\n};\n" in js

    def test_functions_sorted_by_name(self, env):
        js = env.compile_to_js("page", '{{define "zeta"}}z{{end}}{{define "alpha"}}a{{end}}', "ns")
        positions = [js.index(f"ns.{name} = function") for name in ("alpha", "page", "zeta")]
        assert positions == sorted(positions)

    def test_output_is_deterministic(self, env):
        source = '{{define "b"}}{{range .}}{{.}}{{end}}{{end}}{{template "b" .}}'
        assert env.compile_to_js("a", source, "ns") == env.compile_to_js("a", source, "ns")

    def test_temporaries_restart_per_function(self, env):
        js = env.compile_to_js(
            "page", '{{define "x"}}{{range .}}{{end}}{{end}}{{range .}}{{end}}', "ns"
        )
        assert js.count("var items1 = soy.$$items(opt_data);") == 2
        assert "items2" not in js

    def test_non_identifier_template_name(self, env):
        js = env.compile_to_js("page.html", "x", "ns")
        assert "ns['page.html'] = function(opt_data, opt_sb) {" in js


class TestNamespaces:
    def test_three_levels(self, env):
        js = env.compile_to_js("t", "", "a.b.c")
        assert (
            "if (typeof a == 'undefined') { var a = {}; }\n"
            "if (typeof a.b == 'undefined') { a.b = {}; }\n"
            "if (typeof a.b.c == 'undefined') { a.b.c = {}; }\n"
            "\n"
            "a.b.c.t = function"
        ) in js

    def test_surrounding_and_repeated_dots_are_ignored(self, env):
        assert env.compile_to_js("t", "x", ".a..b.") == env.compile_to_js("t", "x", "a.b")

    @pytest.mark.parametrize("namespace", ["a.1b", "a.b-c", "class", "app.new"])
    def test_invalid_segment(self, env, namespace):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js("t", "x", namespace)
        assert exc_info.value.code == ErrorCode.INVALID_NAME

    @pytest.mark.parametrize("name", ["page.html", "class", "2fast"])
    def test_invalid_global_name(self, env, name):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js(name, "x")
        assert exc_info.value.code == ErrorCode.INVALID_NAME
        assert "namespace" in exc_info.value.message


class TestGeneratedNameClashes:
    """Global names must not collide with names the generated code uses."""

    def test_template_named_like_the_runtime(self, env):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js("soy", "hi")
        assert exc_info.value.code == ErrorCode.INVALID_NAME
        assert "'soy'" in exc_info.value.message

    def test_namespace_named_like_the_accumulator(self, env):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js("a", '{{define "b"}}B{{end}}A{{template "b"}}', "output")
        assert exc_info.value.code == ErrorCode.INVALID_NAME

    @pytest.mark.parametrize(
        "name", ["output", "opt_data", "opt_sb", "items1", "i2", "dot1", "with3", "and1", "or1"]
    )
    def test_reserved_global_name(self, env, name):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js(name, "x")
        assert exc_info.value.code == ErrorCode.INVALID_NAME

    @pytest.mark.parametrize("namespace", ["soy", "opt_data", "items1", "soy.views"])
    def test_reserved_namespace_root(self, env, namespace):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js("t", "x", namespace)
        assert exc_info.value.code == ErrorCode.INVALID_NAME

    def test_nested_segments_and_lookalikes_are_allowed(self, env):
        assert "app.output.t = function(opt_data, opt_sb) {" in env.compile_to_js(
            "t", "x", "app.output"
        )
        assert "var items = function(opt_data, opt_sb) {" in env.compile_to_js("items", "x")
        assert "var dots1 = function(opt_data, opt_sb) {" in env.compile_to_js("dots1", "x")

    def test_configured_names_are_reserved(self):
        from templatejs import Environment

        with pytest.raises(TemplateCompileError):
            Environment(runtime="rt").compile_to_js("rt", "x")
        with pytest.raises(TemplateCompileError):
            Environment(string_builder="goog.string.StringBuffer").compile_to_js("goog", "x")
        with pytest.raises(TemplateCompileError):
            Environment(output_var="out").compile_to_js("out", "x")
        # The default names are free once reconfigured
        assert "var soy = function" in Environment(runtime="rt").compile_to_js("soy", "x")

    def test_invoked_name_is_located(self, env):
        with pytest.raises(TemplateCompileError) as exc_info:
            env.compile_to_js("page", 'x{{template "soy"}}')
        assert exc_info.value.code == ErrorCode.INVALID_NAME
        assert exc_info.value.lineno == 1


class TestConfiguration:
    def test_runtime_and_builder(self):
        compiler = JSCompiler(
            builtin_functions("rt"), runtime="rt", string_builder="goog.string.StringBuffer"
        )
        js = compiler.compile({"t": Tree("t", (Text(1, 0, "x"),))}, "ns")
        assert "  var output = opt_sb || new goog.string.StringBuffer();" in js

    def test_runtime_prefixes_helpers(self, env):
        from templatejs import Environment

        js = Environment(runtime="rt").compile_to_js("t", "{{if .A}}{{len .B}}{{end}}", "ns")
        assert "if (rt.$$truth(opt_data.A)) {" in js
        assert "rt.$$print(rt.$$len(opt_data.B))" in js
        assert "new rt.StringBuilder()" in js

    def test_output_var(self):
        compiler = JSCompiler({}, output_var="out")
        js = compiler.compile({"t": Tree("t", (Text(1, 0, "x"),))}, "ns")
        assert "  var out = opt_sb || new soy.StringBuilder();" in js
        assert "  out.append('x');" in js
        assert "  return opt_sb ? '' : out.toString();" in js


@dataclass(frozen=True, slots=True)
class Mystery(Node):
    """A node kind the compiler has no handler for."""


class TestInternalErrors:
    def test_unknown_node(self):
        with pytest.raises(InternalCompilerError) as exc_info:
            compile_trees([Tree("t", (Mystery(1, 0),))])
        assert exc_info.value.code == ErrorCode.UNKNOWN_NODE
        assert "Mystery" in str(exc_info.value)

    def test_unexpected_exception_is_wrapped(self):
        with pytest.raises(InternalCompilerError) as exc_info:
            compile_trees([Tree("t", (Text(1, 0, 123),))])
        err = exc_info.value
        assert err.code == ErrorCode.UNEXPECTED_FAILURE
        assert isinstance(err.__cause__, TypeError)
        assert "in template 't'" in str(err)

    def test_template_errors_pass_through(self):
        with pytest.raises(TemplateCompileError):
            compile_trees([Tree("class", (Text(1, 0, "x"),))])

    def test_internal_error_is_not_a_compile_error(self):
        assert not issubclass(InternalCompilerError, TemplateCompileError)
