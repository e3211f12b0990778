"""Stack processing and title relocation.

Runs once over the fully expanded tree, after the rewriter is done: pushes
can come from deep inside components that only exist after expansion.

Stacks:
    <push stack="scripts"><script id="chart" src="chart.js"></script></push>
    ...
    <stack name="scripts" />

    Every ``<push>`` is collected in document order into a bucket per stack
    name; an element whose ``id`` was already pushed to that stack is
    dropped (first push wins). Each ``<stack>`` placeholder is then replaced
    by its own clone of the bucket.

Titles:
    In a full document (one with ``<html>``), the deepest ``<title>`` inside
    ``<body>`` wins, ties going to the last one in document order. Every
    body title is removed and the winner is moved into ``<head>``, created
    if missing. Without an ``<html>`` element, titles are kept or removed
    according to ``title_behavior_in_partial``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from htmp.environment.exceptions import MissingAttributeError
from htmp.nodes import Element, element_depth, find_elements

if TYPE_CHECKING:
    from htmp.environment.options import CompileOptions
    from htmp.nodes import Fragment, Node


@dataclass
class StackBucket:
    """Content pushed to one stack name, in push order."""

    content: list[Node] = field(default_factory=list)
    ids: set[str] = field(default_factory=set)

    def add(self, node: Node) -> bool:
        """Append ``node`` unless an element with the same id was already pushed."""
        if isinstance(node, Element) and "id" in node.attrs:
            if node.attrs["id"] in self.ids:
                return False
            self.ids.add(node.attrs["id"])
        self.content.append(node)
        return True


class StackProcessor:
    """Resolve push/stack pairs and relocate titles in an expanded tree."""

    __slots__ = ("options",)

    def __init__(self, options: CompileOptions):
        self.options = options

    def process(self, root: Fragment) -> dict[str, StackBucket]:
        """Rewrite ``root`` in place; return the collected buckets."""
        buckets = self.collect(root)
        self.replay(root, buckets)
        self.relocate_titles(root)
        return buckets

    def collect(self, root: Fragment) -> dict[str, StackBucket]:
        push_tag = self.options.push_tag
        buckets: dict[str, StackBucket] = {}
        for push in find_elements(root.children, push_tag):
            if "stack" not in push.attrs:
                raise MissingAttributeError(push_tag, "stack")
            bucket = buckets.setdefault(push.attrs["stack"], StackBucket())
            for child in push.take_children():
                bucket.add(child)
            push.remove()
        return buckets

    def replay(self, root: Fragment, buckets: dict[str, StackBucket]) -> None:
        stack_tag = self.options.stack_tag
        for placeholder in find_elements(root.children, stack_tag):
            if "name" not in placeholder.attrs:
                raise MissingAttributeError(stack_tag, "name")
            bucket = buckets.get(placeholder.attrs["name"])
            content = [node.clone() for node in bucket.content] if bucket else []
            placeholder.replace_with(*content)

    def relocate_titles(self, root: Fragment) -> None:
        documents = find_elements(root.children, "html")
        if not documents:
            if self.options.title_behavior_in_partial == "remove":
                for title in find_elements(root.children, "title"):
                    title.remove()
            return

        for document in documents:
            body = _child_element(document, "body")
            if body is None:
                continue

            winner: Element | None = None
            deepest = -1
            for title in find_elements(body.children, "title"):
                depth = element_depth(title, body)
                if depth >= deepest:
                    winner, deepest = title, depth
                title.remove()

            if winner is None:
                continue

            head = _child_element(document, "head")
            if head is None:
                document.prepend_child(Element("head", children=[winner.clone()]))
                continue
            for title in find_elements(head.children, "title"):
                title.remove()
            head.append_child(winner.clone())


def _child_element(parent: Element, tag: str) -> Element | None:
    for child in parent.children:
        if isinstance(child, Element) and child.tag == tag:
            return child
    return None
