"""Node tree → HTML string, plus an optional pretty printer.

Serialization Rules:
    - Attributes always render as ``name="value"``; valueless attributes
      therefore come out as ``name=""``.
    - Void elements render without a closing tag (``<br>``).
    - Every other element gets an explicit closing tag, even when empty
      (``<div></div>``, never ``<div/>``).
    - Text is entity-escaped except inside ``script``/``style``.

Formatting:
    `format_html` is purely cosmetic. It re-parses the serialized output and
    lays out block-level elements on their own indented lines. It never
    raises: on failure the input is returned unchanged and a warning is
    logged.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable

from htmp.nodes import Comment, Directive, Element, Node, ParentNode, Text
from htmp.parser.html import parse_html
from htmp.utils.constants import (
    INLINE_ELEMENTS,
    RAW_TEXT_ELEMENTS,
    VOID_ELEMENTS,
    WHITESPACE_SENSITIVE_ELEMENTS,
)

logger = logging.getLogger(__name__)

_INDENT = "  "


def _escape_text(data: str) -> str:
    return html.escape(data, quote=False)


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def _start_tag(element: Element) -> str:
    if not element.attrs:
        return f"<{element.tag}>"
    attrs = " ".join(f'{name}="{_escape_attr(value)}"' for name, value in element.attrs.items())
    return f"<{element.tag} {attrs}>"


def _render_node(node: Node, buf: list[str], raw: bool = False) -> None:
    if isinstance(node, Text):
        buf.append(node.data if raw else _escape_text(node.data))
    elif isinstance(node, Element):
        buf.append(_start_tag(node))
        if node.tag in VOID_ELEMENTS and not node.children:
            return
        child_raw = node.tag in RAW_TEXT_ELEMENTS
        for child in node.children:
            _render_node(child, buf, child_raw)
        buf.append(f"</{node.tag}>")
    elif isinstance(node, Comment):
        buf.append(f"<!--{node.data}-->")
    elif isinstance(node, Directive):
        buf.append(f"<{node.data}>")
    elif isinstance(node, ParentNode):
        for child in node.children:
            _render_node(child, buf, raw)


def render_html(nodes: Node | Iterable[Node]) -> str:
    """Serialize a node, a `Fragment`, or a sequence of nodes."""
    buf: list[str] = []
    if isinstance(nodes, Node):
        _render_node(nodes, buf)
    else:
        for node in nodes:
            _render_node(node, buf)
    return "".join(buf)


# ---------------------------------------------------------------------------
# Pretty printing
# ---------------------------------------------------------------------------


def _collapse(data: str) -> str:
    """Collapse whitespace runs to single spaces, keeping edge spaces as one space."""
    if not data:
        return ""
    body = " ".join(data.split())
    if not body:
        return " "
    lead = " " if data[0].isspace() else ""
    trail = " " if data[-1].isspace() else ""
    return f"{lead}{body}{trail}"


def _is_inline(node: Node) -> bool:
    if isinstance(node, Text):
        return True
    if isinstance(node, Element):
        return node.tag in INLINE_ELEMENTS and all(_is_inline(c) for c in node.children)
    return False


def _render_inline(node: Node) -> str:
    if isinstance(node, Text):
        return _escape_text(_collapse(node.data))
    if isinstance(node, Element):
        if node.tag in VOID_ELEMENTS and not node.children:
            return _start_tag(node)
        inner = "".join(_render_inline(child) for child in node.children)
        return f"{_start_tag(node)}{inner}</{node.tag}>"
    return render_html(node)


def _format_nodes(nodes: list[Node], depth: int, lines: list[str]) -> None:
    pad = _INDENT * depth
    for node in nodes:
        if isinstance(node, Text):
            text = " ".join(node.data.split())
            if text:
                lines.append(pad + _escape_text(text))
        elif isinstance(node, Element):
            if node.tag in WHITESPACE_SENSITIVE_ELEMENTS or (
                node.tag in VOID_ELEMENTS and not node.children
            ):
                lines.append(pad + render_html(node))
            elif all(_is_inline(child) for child in node.children):
                inner = "".join(_render_inline(child) for child in node.children).strip()
                lines.append(f"{pad}{_start_tag(node)}{inner}</{node.tag}>")
            else:
                lines.append(pad + _start_tag(node))
                _format_nodes(node.children, depth + 1, lines)
                lines.append(f"{pad}</{node.tag}>")
        else:
            lines.append(pad + render_html(node))


def format_html(source: str) -> str:
    """Pretty-print serialized HTML. Never raises; returns ``source`` on failure."""
    try:
        fragment = parse_html(source)
        lines: list[str] = []
        _format_nodes(fragment.children, 0, lines)
    except Exception as exc:  # formatting is cosmetic; keep the compiled output
        logger.warning("HTML formatting failed, returning unformatted output: %s", exc)
        return source
    return "\n".join(lines) + "\n" if lines else ""
