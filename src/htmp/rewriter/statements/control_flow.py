"""Control flow rewriting: if/elseif/else chains, switch/case and for loops.

Provides mixin for expanding control flow tags in place.

Conditional Chains:
    An ``<if>`` binds the ``<elseif>``/``<else>`` siblings that follow it.
    Whitespace-only text and comments may sit between branches; any other
    node ends the chain. Exactly one branch (or none) survives, unwrapped
    into its processed children. The gap nodes between branches stay in
    place.

        <if condition="n > 10">big</if>
        <elseif condition="n > 0">small</elseif>
        <else>none</else>

Switch:
    ``<case case="...">`` children are compared to the switch value with
    strict equality; ``<case default>`` is the fallback.

Loops:
    Every item gets a fresh clone of the loop body processed under its own
    child scope, so the loop variable never leaks out of the loop.

        <for item="user" in="users"><li>%% user.name %%</li></for>

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import keyword
from collections.abc import Sequence
from numbers import Number
from typing import TYPE_CHECKING, Any

from htmp.environment.exceptions import (
    DanglingBranchError,
    InvalidValueError,
    MissingAttributeError,
    TemplateRuntimeError,
)
from htmp.nodes import Comment, Element, Fragment, Node, Text

if TYPE_CHECKING:
    from htmp.evaluator import Evaluator
    from htmp.nodes import ParentNode
    from htmp.scope import Scope

BRANCH_TAGS = frozenset({"elseif", "else"})


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion.

    Numbers compare by value (``1`` equals ``1.0``) but ``bool`` never
    equals a number; every other pair must share a type.
    """
    if left is right:
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return False
    if isinstance(left, Number) and isinstance(right, Number):
        return left == right
    return type(left) is type(right) and left == right


def _is_chain_gap(node: Node) -> bool:
    return isinstance(node, Comment) or (isinstance(node, Text) and not node.data.strip())


class ControlFlowMixin:
    """Mixin for rewriting control flow tags.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        evaluator: Evaluator

        # From TreeRewriter core
        def process(self, container: ParentNode, scope: Scope) -> None: ...

    def _collect_chain(self, first: Element) -> tuple[list[Element], int]:
        """Return the branches bound to ``first`` and the number of gap nodes between them."""
        branches = [first]
        gaps = 0
        pending = 0
        sibling = first.next_sibling
        while sibling is not None and branches[-1].tag != "else":
            if _is_chain_gap(sibling):
                pending += 1
            elif isinstance(sibling, Element) and sibling.tag in BRANCH_TAGS:
                branches.append(sibling)
                gaps += pending
                pending = 0
            else:
                break
            sibling = sibling.next_sibling
        return branches, gaps

    def _rewrite_conditional(self, element: Element, scope: Scope) -> int:
        """Expand an if/elseif/else chain starting at ``element``."""
        branches, gaps = self._collect_chain(element)
        for branch in branches:
            if branch.tag != "else" and "condition" not in branch.attrs:
                raise MissingAttributeError(branch.tag, "condition")

        winner: Element | None = None
        for branch in branches:
            if branch.tag == "else" or self.evaluator.evaluate(branch.attrs["condition"], scope):
                winner = branch
                break

        for branch in branches:
            if branch is not winner:
                branch.remove()

        if winner is None:
            return gaps
        self.process(winner, scope.child())
        return winner.unwrap() + gaps

    def _rewrite_dangling_branch(self, element: Element, scope: Scope) -> int:
        raise DanglingBranchError(element.tag)

    def _rewrite_switch(self, element: Element, scope: Scope) -> int:
        """Replace ``<switch>`` with the children of its matching ``<case>``."""
        if "value" not in element.attrs:
            raise MissingAttributeError(element.tag, "value")

        value = self.evaluator.evaluate(element.attrs["value"], scope)
        cases = [
            child for child in element.children if isinstance(child, Element) and child.tag == "case"
        ]

        winner: Element | None = None
        for case in cases:
            if "case" in case.attrs and "default" not in case.attrs:
                if strict_equals(self.evaluator.evaluate(case.attrs["case"], scope), value):
                    winner = case
                    break
        if winner is None:
            winner = next(
                (c for c in cases if "default" in c.attrs and "case" not in c.attrs),
                None,
            )

        if winner is None:
            element.remove()
            return 0

        self.process(winner, scope)
        return element.replace_with(*winner.take_children())

    def _rewrite_for(self, element: Element, scope: Scope) -> int:
        """Expand ``<for item="x" in="items">`` into one processed body clone per item."""
        missing = [name for name in ("item", "in") if name not in element.attrs]
        if missing:
            raise MissingAttributeError(element.tag, missing)

        name = element.attrs["item"]
        if not name.isidentifier() or keyword.iskeyword(name):
            raise TemplateRuntimeError(
                f"<{element.tag}> 'item' must be a valid identifier, got {name!r}"
            )

        source = element.attrs["in"]
        items = self.evaluator.evaluate(source, scope)
        if not isinstance(items, Sequence) or isinstance(items, (str, bytes, bytearray)):
            raise InvalidValueError(
                f"<{element.tag}> 'in' must evaluate to a sequence",
                expression=source,
                value=items,
                hint="Wrap other iterables in list(...)",
            )

        expanded: list[Node] = []
        for item in items:
            body = Fragment(child.clone() for child in element.children)
            self.process(body, scope.child({name: item}))
            expanded.extend(body.take_children())
        return element.replace_with(*expanded)
