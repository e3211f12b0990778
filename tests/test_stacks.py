"""Tests for push/stack resolution and title relocation."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from htmp import Compiler, CompileOptions, MissingAttributeError
from htmp.nodes import Element
from htmp.parser import parse_html, render_html
from htmp.rewriter import StackBucket, StackProcessor


def process(source: str, **options: object) -> str:
    tree = parse_html(source)
    StackProcessor(CompileOptions(**options)).process(tree)
    return render_html(tree)


class TestStacks:
    def test_push_moves_to_stack(self) -> None:
        source = '<head><stack name="css" /></head><push stack="css"><link href="a.css"></push>'
        assert process(source) == '<head><link href="a.css"></head>'

    def test_push_order_is_document_order(self) -> None:
        source = (
            '<stack name="js" />'
            '<push stack="js"><i>1</i></push><div><push stack="js"><i>2</i></push></div>'
        )
        assert process(source) == "<i>1</i><i>2</i><div></div>"

    def test_duplicate_ids_keep_first_push(self) -> None:
        source = (
            '<stack name="js" />'
            '<push stack="js"><script id="lib">first</script></push>'
            '<push stack="js"><script id="lib">second</script><script>other</script></push>'
        )
        assert process(source) == '<script id="lib">first</script><script>other</script>'

    def test_ids_are_per_stack(self) -> None:
        source = (
            '<stack name="a" /><stack name="b" />'
            '<push stack="a"><i id="x">a</i></push><push stack="b"><i id="x">b</i></push>'
        )
        assert process(source) == '<i id="x">a</i><i id="x">b</i>'

    def test_every_placeholder_gets_a_copy(self) -> None:
        source = '<stack name="s" /><hr><stack name="s" /><push stack="s"><b>x</b></push>'
        assert process(source) == "<b>x</b><hr><b>x</b>"

    def test_unknown_stack_is_emptied(self) -> None:
        assert process('<p><stack name="nothing" /></p>') == "<p></p>"

    def test_push_without_stack_disappears(self) -> None:
        assert process('<p><push stack="orphan">x</push></p>') == "<p></p>"

    def test_custom_tags(self) -> None:
        source = '<slot-out name="s" /><slot-in stack="s">x</slot-in>'
        assert process(source, stack_tag="slot-out", push_tag="slot-in") == "x"

    def test_push_requires_stack(self) -> None:
        with pytest.raises(MissingAttributeError, match="<push> requires the 'stack'"):
            process("<push>x</push>")

    def test_stack_requires_name(self) -> None:
        with pytest.raises(MissingAttributeError, match="<stack> requires the 'name'"):
            process("<stack />")

    def test_buckets_are_returned(self) -> None:
        tree = parse_html('<push stack="s">a<b id="1"></b></push>')
        buckets = StackProcessor(CompileOptions()).process(tree)
        assert list(buckets) == ["s"]
        assert buckets["s"].ids == {"1"}
        assert len(buckets["s"].content) == 2

    def test_bucket_add(self) -> None:
        bucket = StackBucket()
        assert bucket.add(Element("i", {"id": "a"}))
        assert not bucket.add(Element("i", {"id": "a"}))
        assert bucket.add(Element("i"))
        assert len(bucket.content) == 2


class TestTitles:
    def test_deepest_body_title_moves_to_head(self) -> None:
        source = (
            "<html><head><title>Site</title></head><body>"
            "<title>Shallow</title><div><section><title>Deep</title></section></div>"
            "</body></html>"
        )
        assert process(source) == (
            "<html><head><title>Deep</title></head>"
            "<body><div><section></section></div></body></html>"
        )

    def test_ties_go_to_the_last(self) -> None:
        source = "<html><head></head><body><title>A</title><title>B</title></body></html>"
        assert process(source) == "<html><head><title>B</title></head><body></body></html>"

    def test_head_is_created(self) -> None:
        source = "<html><body><p><title>T</title></p></body></html>"
        assert process(source) == "<html><head><title>T</title></head><body><p></p></body></html>"

    def test_head_title_kept_without_body_title(self) -> None:
        source = "<html><head><title>Site</title></head><body><p></p></body></html>"
        assert process(source) == source

    def test_partial_preserves_titles(self) -> None:
        assert process("<div><title>T</title></div>") == "<div><title>T</title></div>"

    def test_partial_removes_titles(self) -> None:
        result = process(
            "<div><title>T</title></div><title>U</title>", title_behavior_in_partial="remove"
        )
        assert result == "<div></div>"


class TestThroughCompiler:
    def test_pushes_from_components(self, make_compiler: Callable[..., Compiler]) -> None:
        compiler = make_compiler(
            {
                "chart": (
                    '<push stack="scripts"><script id="chart-lib" src="chart.js"></script></push>'
                    "<canvas></canvas>"
                ),
            }
        )
        source = "<main><x-chart /><x-chart /></main><stack name=\"scripts\" />"
        assert compiler.compile(source) == (
            '<main><canvas></canvas><canvas></canvas></main>'
            '<script id="chart-lib" src="chart.js"></script>'
        )

    def test_pushes_inside_loops(self, compiler: Compiler) -> None:
        source = (
            '<ul><for item="n" in="[1, 2]"><li>%% n %%</li>'
            '<push stack="notes"><p>note %% n %%</p></push></for></ul><stack name="notes" />'
        )
        assert compiler.compile(source) == (
            "<ul><li>1</li><li>2</li></ul><p>note 1</p><p>note 2</p>"
        )

    def test_pushes_in_false_branches_are_dropped(self, compiler: Compiler) -> None:
        source = '<if condition="false"><push stack="s">x</push></if><stack name="s" />'
        assert compiler.compile(source) == ""

    def test_component_title_moves_to_head(self, make_compiler: Callable[..., Compiler]) -> None:
        compiler = make_compiler(
            {"page-title": "<script server>text = props.text</script><title>%% text %%</title>"}
        )
        source = '<html><head></head><body><x-page-title text="Docs" /></body></html>'
        assert compiler.compile(source) == (
            "<html><head><title>Docs</title></head><body></body></html>"
        )
