"""Mutable, parent-linked HTML node tree.

The rewriter mutates this tree in place: conditionals vanish, loops and
components expand into many siblings, stacks are spliced in at the end.
Every node keeps a weak reference to its parent so it can remove or replace
itself without the caller threading the owning list around.

Node Types:
    - `Text`: character data
    - `Comment`: ``<!-- ... -->``
    - `Directive`: doctype, processing instructions, CDATA
    - `Element`: tag with ordered attributes and children
    - `Fragment`: parentless root holding the top-level node list

Invariants:
    - A node appears in at most one ``children`` list.
    - ``node.parent.children[node.index] is node`` for every attached node.
    - ``clone()`` returns a detached deep copy sharing no mutable state.

"""

from __future__ import annotations

import weakref
from collections.abc import Iterable


class Node:
    """Base class for all tree nodes."""

    __slots__ = ("__weakref__", "_parent_ref")

    def __init__(self) -> None:
        self._parent_ref: weakref.ref[ParentNode] | None = None

    @property
    def parent(self) -> ParentNode | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _attach(self, parent: ParentNode | None) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    @property
    def index(self) -> int:
        """Position of this node in its parent's children (-1 if detached)."""
        parent = self.parent
        if parent is None:
            return -1
        for i, child in enumerate(parent.children):
            if child is self:
                return i
        return -1

    @property
    def next_sibling(self) -> Node | None:
        parent = self.parent
        if parent is None:
            return None
        i = self.index + 1
        return parent.children[i] if i < len(parent.children) else None

    @property
    def previous_sibling(self) -> Node | None:
        parent = self.parent
        if parent is None:
            return None
        i = self.index - 1
        return parent.children[i] if i >= 0 else None

    @property
    def next_element_sibling(self) -> Element | None:
        sibling = self.next_sibling
        while sibling is not None and not isinstance(sibling, Element):
            sibling = sibling.next_sibling
        return sibling

    def remove(self) -> None:
        """Detach this node from its parent. No-op when already detached."""
        parent = self.parent
        if parent is None:
            return
        del parent.children[self.index]
        self._attach(None)

    def replace_with(self, *nodes: Node) -> int:
        """Replace this node with ``nodes`` (in order) and return how many were inserted."""
        parent = self.parent
        if parent is None:
            raise ValueError("Cannot replace a detached node")
        # Detach replacements first; one of them may be a later sibling
        for node in nodes:
            node.remove()
        position = self.index
        parent.children[position : position + 1] = list(nodes)
        for node in nodes:
            node._attach(parent)
        self._attach(None)
        return len(nodes)

    def clone(self) -> Node:
        raise NotImplementedError


class Text(Node):
    """Character data."""

    __slots__ = ("data",)

    def __init__(self, data: str = "") -> None:
        super().__init__()
        self.data = data

    def clone(self) -> Text:
        return Text(self.data)

    def __repr__(self) -> str:
        return f"Text({self.data!r})"


class Comment(Node):
    """An HTML comment; ``data`` excludes the ``<!--``/``-->`` markers."""

    __slots__ = ("data",)

    def __init__(self, data: str = "") -> None:
        super().__init__()
        self.data = data

    def clone(self) -> Comment:
        return Comment(self.data)

    def __repr__(self) -> str:
        return f"Comment({self.data!r})"


class Directive(Node):
    """Markup declaration rendered verbatim as ``<{data}>``.

    Covers ``!DOCTYPE html``, processing instructions (``?xml ...?``) and
    CDATA sections (``![CDATA[...]]``).
    """

    __slots__ = ("data",)

    def __init__(self, data: str) -> None:
        super().__init__()
        self.data = data

    def clone(self) -> Directive:
        return Directive(self.data)

    def __repr__(self) -> str:
        return f"Directive({self.data!r})"


class ParentNode(Node):
    """Node owning an ordered list of children."""

    __slots__ = ("children",)

    def __init__(self, children: Iterable[Node] | None = None) -> None:
        super().__init__()
        self.children: list[Node] = []
        if children is not None:
            self.extend(children)

    def append_child(self, node: Node) -> None:
        node.remove()
        self.children.append(node)
        node._attach(self)

    def prepend_child(self, node: Node) -> None:
        self.insert_child(0, node)

    def insert_child(self, position: int, node: Node) -> None:
        node.remove()
        self.children.insert(position, node)
        node._attach(self)

    def extend(self, nodes: Iterable[Node]) -> None:
        for node in list(nodes):
            self.append_child(node)

    def clear(self) -> None:
        for child in self.children:
            child._attach(None)
        self.children.clear()

    def take_children(self) -> list[Node]:
        """Detach and return all children."""
        children = list(self.children)
        self.clear()
        return children

    def unwrap(self) -> int:
        """Replace this node with its own children; return how many took its place."""
        return self.replace_with(*self.take_children())

    def _clone_children(self) -> list[Node]:
        return [child.clone() for child in self.children]


class Element(ParentNode):
    """An element with a tag name, ordered attributes and children.

    Attributes:
        tag: Lowercase tag name
        attrs: Insertion-ordered attribute mapping (valueless attributes hold ``""``)

    """

    __slots__ = ("attrs", "tag")

    def __init__(
        self,
        tag: str,
        attrs: dict[str, str] | None = None,
        children: Iterable[Node] | None = None,
    ) -> None:
        super().__init__(children)
        self.tag = tag
        self.attrs: dict[str, str] = dict(attrs) if attrs else {}

    def clone(self) -> Element:
        return Element(self.tag, self.attrs, self._clone_children())

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, {self.attrs!r}, children={len(self.children)})"


class Fragment(ParentNode):
    """Parentless root container; ``children`` is the top-level node list."""

    __slots__ = ()

    def clone(self) -> Fragment:
        return Fragment(self._clone_children())

    def __repr__(self) -> str:
        return f"Fragment(children={len(self.children)})"


def inner_text(node: Node) -> str:
    """Concatenate the text content of ``node`` and its descendants."""
    if isinstance(node, Text):
        return node.data
    if isinstance(node, ParentNode):
        return "".join(inner_text(child) for child in node.children)
    return ""
