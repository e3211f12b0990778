"""Expression evaluation in text, attributes and dynamic tags.

Provides mixin for the rewrite steps that evaluate expressions in place:

    Hello %% user.name %%!            → Hello Ada!
    <a eval:href="url">               → <a href="/docs">
    <input eval:checked="done">       → <input checked="">  (or dropped)
    <dynamic tag="'h' + str(level)">  → <h2>

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from htmp.environment.exceptions import InvalidValueError, MissingAttributeError
from htmp.utils.naming import colon_match, has_whitespace

if TYPE_CHECKING:
    from htmp.environment.options import CompileOptions
    from htmp.evaluator import Evaluator
    from htmp.nodes import Element, ParentNode, Text
    from htmp.scope import Scope


def stringify(value: Any) -> str | None:
    """Render an evaluated value as text; ``None`` means "omit"."""
    if value is None or value is False:
        return None
    return str(value)


class EvaluationMixin:
    """Mixin for evaluating expressions embedded in the tree.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        # Host attributes (from TreeRewriter.__init__)
        options: CompileOptions
        evaluator: Evaluator
        _content_pattern: re.Pattern[str]

        # From TreeRewriter core
        def process(self, container: ParentNode, scope: Scope) -> None: ...

    def _evaluate_text(self, node: Text, scope: Scope) -> int:
        """Substitute every content expression in a text node."""
        if not self._content_pattern.search(node.data):
            return 1

        def substitute(match: re.Match[str]) -> str:
            return stringify(self.evaluator.evaluate(match.group(1), scope)) or ""

        node.data = self._content_pattern.sub(substitute, node.data)
        return 1

    def _evaluate_attributes(self, element: Element, scope: Scope) -> None:
        """Replace ``eval:<name>`` attributes with their evaluated values.

        ``True`` keeps the target as a boolean attribute, ``False``/``None``
        omit it, anything else is stringified.
        """
        prefix = self.options.evaluate_attribute_prefix
        for name in list(element.attrs):
            segments = colon_match(2, name)
            if segments is None or segments[0] != prefix:
                continue
            source = element.attrs.pop(name)
            result = self.evaluator.evaluate(source, scope)
            if result is True:
                element.attrs[segments[1]] = ""
                continue
            value = stringify(result)
            if value is not None:
                element.attrs[segments[1]] = value

    def _rewrite_dynamic(self, element: Element, scope: Scope) -> int:
        """Resolve ``<dynamic tag="...">`` to a concrete tag or unwrap it."""
        if "tag" not in element.attrs:
            raise MissingAttributeError(element.tag, "tag")

        source = element.attrs["tag"]
        tag = self.evaluator.evaluate(source, scope)

        self.process(element, scope)

        if tag is None or tag is False:
            return element.unwrap()

        if isinstance(tag, str) and tag and not has_whitespace(tag):
            element.tag = tag
            del element.attrs["tag"]
            return 1

        raise InvalidValueError(
            f"<{element.tag}> 'tag' must evaluate to a tag name without whitespace, "
            "None or False",
            expression=source,
            value=tag,
        )
