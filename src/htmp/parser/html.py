"""HTML source → node tree.

Built on the standard library ``html.parser.HTMLParser`` tokenizer. The
tokenizer only reports start/end tags, data and markup declarations; this
module turns that event stream into a `Fragment` with the leniency the
template language needs:

- ``<anything />`` is self-closing for every tag, not only void elements
  (``<x-card />``, ``<slot name="a" />``, ``<stack name="js" />``).
- Void elements (``br``, ``img``, ...) never take children.
- A stray end tag closes the nearest matching open element, or is dropped.
- Elements still open at end of input are closed implicitly.
- Tag and attribute names arrive lowercased; valueless attributes become
  ``""``; repeated attributes keep their first value.

No HTML5 tree-construction rules are applied (no implied ``<tbody>``, no
auto-closed ``<p>``): construct tags such as ``<if>`` or ``<for>`` must be
able to wrap any content.
"""

from __future__ import annotations

from html.parser import HTMLParser

from htmp.nodes import Comment, Directive, Element, Fragment, ParentNode, Text
from htmp.utils.constants import VOID_ELEMENTS


class TreeBuilder(HTMLParser):
    """Feed-driven builder producing a `Fragment`.

    Example:
            >>> builder = TreeBuilder()
            >>> builder.feed("<p>Hi</p>")
            >>> fragment = builder.finish()
            >>> fragment.children[0].tag
            'p'

    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Fragment()
        self._open: list[ParentNode] = [self.root]

    @property
    def _current(self) -> ParentNode:
        return self._open[-1]

    @staticmethod
    def _make_element(tag: str, attrs: list[tuple[str, str | None]]) -> Element:
        attributes: dict[str, str] = {}
        for name, value in attrs:
            attributes.setdefault(name, "" if value is None else value)
        return Element(tag, attributes)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = self._make_element(tag, attrs)
        self._current.append_child(element)
        if tag not in VOID_ELEMENTS:
            self._open.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._current.append_child(self._make_element(tag, attrs))

    def handle_endtag(self, tag: str) -> None:
        for depth in range(len(self._open) - 1, 0, -1):
            node = self._open[depth]
            if isinstance(node, Element) and node.tag == tag:
                del self._open[depth:]
                return

    def handle_data(self, data: str) -> None:
        children = self._current.children
        if children and isinstance(children[-1], Text):
            children[-1].data += data
        else:
            self._current.append_child(Text(data))

    def handle_comment(self, data: str) -> None:
        self._current.append_child(Comment(data))

    def handle_decl(self, decl: str) -> None:
        self._current.append_child(Directive(f"!{decl}"))

    def handle_pi(self, data: str) -> None:
        self._current.append_child(Directive(f"?{data}"))

    def unknown_decl(self, data: str) -> None:
        # data is "CDATA[content" without the closing brackets
        self._current.append_child(Directive(f"![{data}]]"))

    def finish(self) -> Fragment:
        self.close()
        self._open = [self.root]
        return self.root


def parse_html(source: str) -> Fragment:
    """Parse ``source`` into a fresh `Fragment`."""
    builder = TreeBuilder()
    builder.feed(source)
    return builder.finish()
