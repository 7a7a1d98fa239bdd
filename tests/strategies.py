"""Shared hypothesis strategies for templatejs property-based testing.

Provides reusable strategies that generate structurally valid template
inputs at three abstraction levels:

- **Text**: Literal text that never opens an action
- **Actions**: Field outputs, literals and comments
- **Templates**: Nested if/range/with structures built from the above

These are building blocks -- individual test modules compose them into
property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

from templatejs.compiler.utils import is_generated_temp, is_js_variable_name

# ---------------------------------------------------------------------------
# Text strategies
# ---------------------------------------------------------------------------

# Plain text that does NOT contain braces, so it can never open an action
# and never adds a brace to the generated code.
plain_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),  # no surrogates
        blacklist_characters="{}",
    ),
    min_size=1,
    max_size=100,
)

# Text that needs no escaping in a JavaScript string literal
simple_text = st.from_regex(r"[A-Za-z0-9 .,!?-]{1,40}", fullmatch=True)

# Arbitrary input that might stress the lexer (fuzz-like)
arbitrary_template_source = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=0,
    max_size=300,
)

# ---------------------------------------------------------------------------
# Action strategies
# ---------------------------------------------------------------------------

field_name = st.from_regex(r"[A-Z][A-Za-z0-9]{0,8}", fullmatch=True)

field_action = st.lists(field_name, min_size=1, max_size=3).map(
    lambda names: "{{." + ".".join(names) + "}}"
)

literal_action = st.one_of(
    st.integers(min_value=0, max_value=10_000).map(lambda n: f"{{{{{n}}}}}"),
    st.sampled_from(["{{true}}", "{{false}}", '{{"x"}}', "{{`raw`}}"]),
)

comment = st.from_regex(r"[a-z ]{0,20}", fullmatch=True).map(lambda body: f"{{{{/* {body} */}}}}")

# Literal-only fragments: text interleaved with comments
literal_fragment = st.lists(
    st.one_of(plain_text, comment),
    min_size=1,
    max_size=6,
).map("".join)

# ---------------------------------------------------------------------------
# Template strategies
# ---------------------------------------------------------------------------

_leaf = st.one_of(plain_text, field_action, literal_action)


def _wrap(children: st.SearchStrategy[str]) -> st.SearchStrategy[str]:
    body = st.lists(children, min_size=0, max_size=3).map("".join)
    return st.one_of(
        st.tuples(field_name, body).map(lambda t: f"{{{{if .{t[0]}}}}}{t[1]}{{{{end}}}}"),
        st.tuples(field_name, body, body).map(
            lambda t: f"{{{{if .{t[0]}}}}}{t[1]}{{{{else}}}}{t[2]}{{{{end}}}}"
        ),
        st.tuples(field_name, body).map(lambda t: f"{{{{range .{t[0]}}}}}{t[1]}{{{{end}}}}"),
        st.tuples(field_name, body, body).map(
            lambda t: f"{{{{range .{t[0]}}}}}{t[1]}{{{{else}}}}{t[2]}{{{{end}}}}"
        ),
        st.tuples(field_name, body).map(lambda t: f"{{{{with .{t[0]}}}}}{t[1]}{{{{end}}}}"),
    )


# Well-formed templates with nested control flow
nested_template = st.recursive(_leaf, _wrap, max_leaves=12)

# Namespaces: one to three dot-separated identifier segments, none of them a
# name the generated code declares
_GENERATED_NAMES = frozenset({"soy", "output", "opt_data", "opt_sb"})

namespace = st.lists(
    st.from_regex(r"[a-z][a-z0-9_]{0,6}", fullmatch=True).filter(
        lambda s: is_js_variable_name(s) and not is_generated_temp(s) and s not in _GENERATED_NAMES
    ),
    min_size=1,
    max_size=3,
).map(".".join)
