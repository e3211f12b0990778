"""Tree search helpers.

All helpers walk in document order (pre-order) and return list snapshots,
so callers may remove or replace the matched nodes while iterating.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from htmp.nodes.base import Element, Node, ParentNode


def iter_nodes(nodes: Iterable[Node]) -> Iterator[Node]:
    """Yield ``nodes`` and all their descendants in document order."""
    for node in nodes:
        yield node
        if isinstance(node, ParentNode) and node.children:
            yield from iter_nodes(node.children)


def find_node(nodes: Iterable[Node], test: Callable[[Node], bool]) -> Node | None:
    for node in iter_nodes(nodes):
        if test(node):
            return node
    return None


def find_nodes(nodes: Iterable[Node], test: Callable[[Node], bool]) -> list[Node]:
    return [node for node in iter_nodes(nodes) if test(node)]


def _element_test(tag_or_test: str | Callable[[Element], bool] | None) -> Callable[[Node], bool]:
    if tag_or_test is None:
        return lambda node: isinstance(node, Element)
    if isinstance(tag_or_test, str):
        return lambda node: isinstance(node, Element) and node.tag == tag_or_test
    return lambda node: isinstance(node, Element) and tag_or_test(node)


def find_element(
    nodes: Iterable[Node],
    tag_or_test: str | Callable[[Element], bool],
) -> Element | None:
    """Return the first element matching a tag name or predicate."""
    return find_node(nodes, _element_test(tag_or_test))  # type: ignore[return-value]


def find_elements(
    nodes: Iterable[Node],
    tag_or_test: str | Callable[[Element], bool] | None = None,
) -> list[Element]:
    """Return every element matching a tag name or predicate (all elements if omitted)."""
    return find_nodes(nodes, _element_test(tag_or_test))  # type: ignore[return-value]


def element_depth(element: Node, ancestor: ParentNode) -> int:
    """Number of elements between ``element`` and ``ancestor`` (0 for a direct child)."""
    depth = 0
    current = element.parent
    while current is not None and current is not ancestor:
        depth += 1
        current = current.parent
    return depth
