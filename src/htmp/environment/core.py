"""Compiler: the htmp entry point.

The Compiler holds configuration, the component registry (whose cache is
shared by every compile) and the merge strategies, and runs the pipeline:

    parse → rewrite → stacks → serialize → format (optional)

Thread-Safety:
    A Compiler may be shared across threads and asyncio tasks. Per-compile
    state lives in a ContextVar (`render_context`) and in locals; the
    component cache only ever receives idempotent writes.

Example:
        >>> compiler = Compiler(
        ...     components={"greeting": "<p>Hello, <yield /></p>"},
        ...     pretty=False,
        ... )
        >>> compiler.compile('<x-greeting>%% name %%</x-greeting>', name="World")
        '<p>Hello, World</p>'

"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from htmp.environment.loaders import FileSystemLoader, Loader
from htmp.environment.merge import MergeStrategyRegistry
from htmp.environment.options import CompileOptions
from htmp.environment.registry import ComponentRegistry
from htmp.evaluator import Evaluator, PythonEvaluator
from htmp.parser import format_html, parse_html, render_html
from htmp.render_context import render_context
from htmp.rewriter import StackProcessor, TreeRewriter
from htmp.scope import Scope

logger = logging.getLogger(__name__)


class Compiler:
    """Compile templates with control flow, components and stacks to static HTML.

    Attributes:
        options: Immutable `CompileOptions`
        registry: Component source registry (overrides, cache, loader)
        evaluator: Expression evaluator (default: `PythonEvaluator`)
        merge_strategies: Attribute merge strategy registry

    Configuration:
        Pass a `CompileOptions`, keyword overrides, or both (overrides win):
            ```python
            compiler = Compiler(CompileOptions(components_root="ui"), pretty=False)
            ```

    Loading:
        Components load from ``options.components_root`` through a
        `FileSystemLoader` unless another ``loader`` is given:
            ```python
            compiler = Compiler(loader=DictLoader({"card": "<div><yield /></div>"}))
            ```

    Raises:
        ConfigurationError: If the options are inconsistent

    """

    __slots__ = (
        "_rewriter",
        "_stacks",
        "evaluator",
        "merge_strategies",
        "options",
        "registry",
    )

    def __init__(
        self,
        options: CompileOptions | None = None,
        *,
        loader: Loader | None = None,
        evaluator: Evaluator | None = None,
        **option_overrides: Any,
    ):
        if options is None:
            options = CompileOptions(**option_overrides)
        elif option_overrides:
            options = options.replace(**option_overrides)
        self.options = options

        if loader is None:
            loader = FileSystemLoader(options.components_root, encoding=options.encoding)
        self.registry = ComponentRegistry(
            options.components,
            loader=loader,
            cache_enabled=options.cache_components,
        )
        self.evaluator: Evaluator = evaluator if evaluator is not None else PythonEvaluator()
        self.merge_strategies = MergeStrategyRegistry(options.attribute_merge_strategies)

        self._rewriter = TreeRewriter(options, self.registry, self.evaluator, self.merge_strategies)
        self._stacks = StackProcessor(options)

    def compile(
        self,
        source: str,
        context: Mapping[str, Any] | None = None,
        **bindings: Any,
    ) -> str:
        """Compile ``source`` to HTML.

        Args:
            source: Template source
            context: Extra scope bindings layered over ``eval_context``
            **bindings: More bindings, layered over ``context``

        Returns:
            Expanded HTML (formatted when ``pretty`` is enabled)

        Raises:
            TemplateError: On the first construct, component or evaluation failure
        """
        scope = Scope({**self.options.eval_context, **(context or {}), **bindings})
        tree = parse_html(source)

        with render_context(max_component_depth=self.options.max_component_depth):
            self._rewriter.rewrite(tree, scope)
            self._stacks.process(tree)

        html = render_html(tree)

        if self.options.debug:
            logger.debug("Compiled output:\n%s", format_html(html))

        if self.options.pretty:
            html = format_html(html)
        return html

    async def compile_async(
        self,
        source: str,
        context: Mapping[str, Any] | None = None,
        **bindings: Any,
    ) -> str:
        """Compile in a worker thread without blocking the event loop."""
        return await asyncio.to_thread(self.compile, source, context, **bindings)

    def preload_components(self) -> int:
        """Load every component under the loader into the cache; return the count."""
        return self.registry.preload()

    async def preload_components_async(self) -> int:
        return await asyncio.to_thread(self.preload_components)

    def clear_cache(self) -> None:
        """Forget cached component sources (overrides are kept)."""
        self.registry.clear()

    def __repr__(self) -> str:
        return (
            f"<Compiler components_root={self.options.components_root!r} "
            f"cached={len(self.registry.cached_names())}>"
        )


def compile(source: str, context: Mapping[str, Any] | None = None, **options: Any) -> str:
    """Compile ``source`` with a one-shot `Compiler` built from ``options``.

        >>> compile("<if condition='1 < 2'>yes</if>", pretty=False)
        'yes'

    """
    return Compiler(**options).compile(source, context)
