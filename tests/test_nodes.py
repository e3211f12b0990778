"""Tests for the mutable node tree and query helpers."""

from __future__ import annotations

import pytest

from htmp.nodes import (
    Comment,
    Element,
    Fragment,
    Text,
    element_depth,
    find_element,
    find_elements,
    inner_text,
    iter_nodes,
)


def _tree() -> Fragment:
    return Fragment(
        [
            Element("div", {"id": "a"}, [Text("one"), Element("span", children=[Text("two")])]),
            Comment(" note "),
            Element("p", children=[Text("three")]),
        ]
    )


class TestParentLinks:
    """Parent references stay consistent with children lists."""

    def test_children_know_their_parent(self) -> None:
        root = _tree()
        div = root.children[0]
        assert div.parent is root
        assert div.children[1].parent is div

    def test_index_and_siblings(self) -> None:
        root = _tree()
        div, comment, p = root.children
        assert comment.index == 1
        assert div.next_sibling is comment
        assert p.previous_sibling is comment
        assert div.next_element_sibling is p
        assert p.next_sibling is None

    def test_detached_node(self) -> None:
        node = Text("x")
        assert node.parent is None
        assert node.index == -1
        assert node.next_sibling is None
        node.remove()  # no-op

    def test_append_moves_node(self) -> None:
        """Inserting an attached node detaches it from its old parent first."""
        root = _tree()
        div, _, p = root.children
        span = div.children[1]
        p.append_child(span)
        assert span.parent is p
        assert span not in div.children
        assert p.children[-1] is span


class TestMutation:
    """remove / replace_with / unwrap keep the tree consistent."""

    def test_remove(self) -> None:
        root = _tree()
        comment = root.children[1]
        comment.remove()
        assert comment.parent is None
        assert len(root.children) == 2

    def test_replace_with_returns_count(self) -> None:
        root = _tree()
        comment = root.children[1]
        count = comment.replace_with(Text("x"), Text("y"), Text("z"))
        assert count == 3
        assert [type(n).__name__ for n in root.children] == [
            "Element",
            "Text",
            "Text",
            "Text",
            "Element",
        ]
        assert all(n.parent is root for n in root.children)
        assert comment.parent is None

    def test_replace_with_nothing_removes(self) -> None:
        root = _tree()
        assert root.children[1].replace_with() == 0
        assert len(root.children) == 2

    def test_replace_with_later_sibling(self) -> None:
        """A replacement taken from later in the same list is moved, not duplicated."""
        root = _tree()
        div, _, p = root.children
        div.replace_with(p)
        assert root.children[0] is p
        assert len(root.children) == 2

    def test_replace_detached_raises(self) -> None:
        with pytest.raises(ValueError):
            Text("x").replace_with(Text("y"))

    def test_unwrap(self) -> None:
        root = _tree()
        div = root.children[0]
        count = div.unwrap()
        assert count == 2
        assert isinstance(root.children[0], Text)
        assert root.children[1].tag == "span"
        assert root.children[1].parent is root
        assert div.children == []

    def test_prepend_and_insert(self) -> None:
        el = Element("ul", children=[Element("li")])
        el.prepend_child(Text("first"))
        el.insert_child(1, Comment("c"))
        assert [type(n).__name__ for n in el.children] == ["Text", "Comment", "Element"]


class TestClone:
    """clone() produces a detached deep copy."""

    def test_clone_is_independent(self) -> None:
        root = _tree()
        div = root.children[0]
        copy = div.clone()
        assert copy.parent is None
        assert copy is not div
        assert copy.attrs == div.attrs
        copy.attrs["id"] = "b"
        copy.children[0].data = "changed"
        assert div.attrs["id"] == "a"
        assert div.children[0].data == "one"

    def test_clone_children_point_to_clone(self) -> None:
        copy = _tree().children[0].clone()
        assert all(child.parent is copy for child in copy.children)

    def test_fragment_clone(self) -> None:
        root = _tree()
        copy = root.clone()
        assert isinstance(copy, Fragment)
        assert len(copy.children) == 3


class TestQuery:
    """Query helpers walk in document order."""

    def test_iter_nodes_preorder(self) -> None:
        kinds = [
            n.tag if isinstance(n, Element) else type(n).__name__ for n in iter_nodes(_tree().children)
        ]
        assert kinds == ["div", "Text", "span", "Text", "Comment", "p", "Text"]

    def test_find_element_by_tag(self) -> None:
        span = find_element(_tree().children, "span")
        assert span is not None and inner_text(span) == "two"

    def test_find_elements_by_predicate(self) -> None:
        found = find_elements(_tree().children, lambda el: "id" in el.attrs)
        assert [el.tag for el in found] == ["div"]

    def test_find_elements_all(self) -> None:
        assert [el.tag for el in find_elements(_tree().children)] == ["div", "span", "p"]

    def test_find_elements_is_snapshot(self) -> None:
        root = _tree()
        for el in find_elements(root.children):
            el.remove()
        assert all(not isinstance(n, Element) for n in root.children)

    def test_element_depth(self) -> None:
        root = _tree()
        div = root.children[0]
        span = div.children[1]
        assert element_depth(div, root) == 0
        assert element_depth(span, root) == 1
        assert element_depth(span.children[0], root) == 2

    def test_inner_text(self) -> None:
        assert inner_text(_tree()) == "onetwothree"
