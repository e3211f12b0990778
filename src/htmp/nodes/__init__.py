"""Node tree used by the parser, rewriter and serializer."""

from htmp.nodes.base import (
    Comment,
    Directive,
    Element,
    Fragment,
    Node,
    ParentNode,
    Text,
    inner_text,
)
from htmp.nodes.query import (
    element_depth,
    find_element,
    find_elements,
    find_node,
    find_nodes,
    iter_nodes,
)

__all__ = [
    "Comment",
    "Directive",
    "Element",
    "Fragment",
    "Node",
    "ParentNode",
    "Text",
    "element_depth",
    "find_element",
    "find_elements",
    "find_node",
    "find_nodes",
    "inner_text",
    "iter_nodes",
]
