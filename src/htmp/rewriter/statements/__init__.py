"""Rewrite steps for the htmp tree rewriter.

The statements package is organized into logical modules:
- evaluation: Text expressions, ``eval:`` attributes, dynamic tags
- control_flow: if/elseif/else chains, switch/case, for loops
- components: Component expansion, props, attribute and content projection

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from htmp.rewriter.statements.components import ComponentMixin, Props
from htmp.rewriter.statements.control_flow import ControlFlowMixin, strict_equals
from htmp.rewriter.statements.evaluation import EvaluationMixin, stringify


class StatementRewriteMixin(
    EvaluationMixin,
    ControlFlowMixin,
    ComponentMixin,
):
    """Combined mixin for every rewrite step.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks in each individual mixin.

    """


__all__ = [
    "ComponentMixin",
    "ControlFlowMixin",
    "EvaluationMixin",
    "Props",
    "StatementRewriteMixin",
    "strict_equals",
    "stringify",
]
