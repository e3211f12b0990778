"""Property-based tests for htmp compilation.

Uses hypothesis to verify properties that must hold for all inputs:

- Markup without constructs passes through unchanged
- Compiling is idempotent
- A loop emits exactly one body per item
- Text expressions render every literal the same way
- Override keys resolve under their kebab-cased tag
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from htmp import Compiler
from htmp.rewriter import strict_equals
from htmp.utils.naming import to_kebab_case

from .strategies import camel_case_name, identifier, integer_list, literal_value, plain_fragment

# Shared compiler instance -- immutable options, safe to reuse
_compiler = Compiler(pretty=False)


class TestMarkupProperties:
    @given(source=plain_fragment)
    @settings(max_examples=100)
    def test_plain_markup_passes_through(self, source: str) -> None:
        assert _compiler.compile(source) == source

    @given(source=plain_fragment)
    @settings(max_examples=50)
    def test_compile_is_idempotent(self, source: str) -> None:
        once = _compiler.compile(source)
        assert _compiler.compile(once) == once


class TestConstructProperties:
    @given(items=integer_list, name=identifier)
    @settings(max_examples=100)
    def test_loop_cardinality(self, items: list[int], name: str) -> None:
        source = f'<for item="{name}" in="items"><i>%% {name} %%</i></for>'
        result = _compiler.compile(source, items=items)
        assert result == "".join(f"<i>{item}</i>" for item in items)

    @given(value=literal_value)
    @settings(max_examples=100)
    def test_text_expression_rendering(self, value: object) -> None:
        result = _compiler.compile("<p>%% value %%</p>", value=value)
        expected = "" if value is None or value is False else str(value)
        assert result == f"<p>{expected}</p>"

    @given(flag=st.booleans())
    def test_exactly_one_branch(self, flag: bool) -> None:
        result = _compiler.compile('<if condition="flag">yes</if><else>no</else>', flag=flag)
        assert result == ("yes" if flag else "no")

    @given(left=literal_value, right=literal_value)
    def test_strict_equals_is_symmetric(self, left: object, right: object) -> None:
        assert strict_equals(left, right) == strict_equals(right, left)


class TestNamingProperties:
    @given(name=camel_case_name)
    def test_kebab_case_is_lowercase_and_stable(self, name: str) -> None:
        kebab = to_kebab_case(name)
        assert kebab == kebab.lower()
        assert to_kebab_case(kebab) == kebab

    @given(name=camel_case_name)
    @settings(max_examples=50)
    def test_camel_case_override_resolves(self, name: str) -> None:
        compiler = Compiler(components={name: "<b>ok</b>"}, pretty=False)
        assert compiler.compile(f"<x-{to_kebab_case(name)} />") == "<b>ok</b>"
