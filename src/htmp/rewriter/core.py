"""Tree rewriter: expands template constructs in place.

The rewriter walks a sibling list with a cursor. Each dispatch step returns
how many sibling slots the node now occupies (0 when removed, N when
expanded into N nodes) and the cursor advances by that count, so it always
points at the next unprocessed node however the list changed.

Dispatch Order (per node):
    1. Text: substitute content expressions
    2. Other non-elements: pass through
    3. Elements: evaluate ``eval:`` attributes, then by tag
        - dynamic tag
        - ``if`` chain; a lone ``elseif``/``else`` is an error
        - ``switch``, ``for``
        - component (explicit tag or prefix)
        - anything else: recurse into children

Scope Discipline:
    Every element gets a fresh child scope, so bindings made while
    expanding one node are never visible to its siblings.

Expansion is exhaustive: bodies of loops, branches and components are
processed before they are spliced in, and running the rewriter over its own
output changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from htmp.nodes import Element, Text
from htmp.parser import format_html, render_html
from htmp.render_context import get_render_context, render_context
from htmp.rewriter.statements import StatementRewriteMixin

if TYPE_CHECKING:
    from htmp.environment.merge import MergeStrategyRegistry
    from htmp.environment.options import CompileOptions
    from htmp.environment.registry import ComponentRegistry
    from htmp.evaluator import Evaluator
    from htmp.nodes import Node, ParentNode
    from htmp.scope import Scope

logger = logging.getLogger(__name__)

RewriteHandler = Callable[[Element, "Scope"], int]


class TreeRewriter(StatementRewriteMixin):
    """Expand every template construct in a node tree.

    Attributes:
        options: Construct names and behaviour flags
        registry: Component source lookup
        evaluator: Expression evaluation capability
        merge_strategies: Attribute merge strategies for component attributes

    Example:
            >>> rewriter = TreeRewriter(options, registry, PythonEvaluator(), MergeStrategyRegistry())
            >>> tree = parse_html('<for item="n" in="[1, 2]"><b>%% n %%</b></for>')
            >>> rewriter.rewrite(tree, Scope())
            >>> render_html(tree)
            '<b>1</b><b>2</b>'

    """

    __slots__ = (
        "_content_pattern",
        "_tag_dispatch",
        "evaluator",
        "merge_strategies",
        "options",
        "registry",
    )

    def __init__(
        self,
        options: CompileOptions,
        registry: ComponentRegistry,
        evaluator: Evaluator,
        merge_strategies: MergeStrategyRegistry,
    ):
        self.options = options
        self.registry = registry
        self.evaluator = evaluator
        self.merge_strategies = merge_strategies
        self._content_pattern = options.content_pattern
        self._tag_dispatch: dict[str, RewriteHandler] = {
            options.dynamic_tag: self._rewrite_dynamic,
            "if": self._rewrite_conditional,
            "elseif": self._rewrite_dangling_branch,
            "else": self._rewrite_dangling_branch,
            "switch": self._rewrite_switch,
            "for": self._rewrite_for,
            options.component_tag: self._rewrite_component,
        }

    def rewrite(self, root: ParentNode, scope: Scope) -> None:
        """Expand ``root``'s children, opening a render context if none is active."""
        if get_render_context() is not None:
            self.process(root, scope)
            return
        with render_context(max_component_depth=self.options.max_component_depth):
            self.process(root, scope)

    def process(self, container: ParentNode, scope: Scope) -> None:
        """Rewrite ``container.children`` in place until no construct remains."""
        children = container.children
        cursor = 0
        while cursor < len(children):
            cursor += self._rewrite_node(children[cursor], scope)
            if self.options.debug:
                self._log_step(container)

    def _rewrite_node(self, node: Node, scope: Scope) -> int:
        if isinstance(node, Text):
            return self._evaluate_text(node, scope)
        if not isinstance(node, Element):
            return 1

        scope = scope.child()
        self._evaluate_attributes(node, scope)

        handler = self._tag_dispatch.get(node.tag)
        if handler is not None:
            return handler(node, scope)
        if self._is_component(node):
            return self._rewrite_component(node, scope)

        self.process(node, scope)
        return 1

    def _log_step(self, container: ParentNode) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        ctx = get_render_context()
        step = ctx.next_step() if ctx is not None else 0
        root: ParentNode = container
        while root.parent is not None:
            root = root.parent
        logger.debug("Rewrite step %d:\n%s", step, format_html(render_html(root)))
