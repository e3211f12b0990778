"""htmp RenderContext: per-compile state kept out of the template scope.

One `RenderContext` lives in a ContextVar for the duration of a
`Compiler.compile()` call. It records which components are being expanded
(for error traces and the nesting limit) and counts rewrite steps for debug
logging. Nothing here is visible to template expressions.

Thread Safety:
    ContextVars are per thread and per asyncio task, so concurrent compiles
    on a shared `Compiler` each see their own context.

Example:
        >>> with render_context(max_component_depth=10) as ctx:
        ...     with ctx.component("card"):
        ...         ctx.component_stack
        ['card']

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field


@dataclass
class RenderContext:
    """Per-compile state isolated from the template scope.

    Attributes:
        component_stack: Names of components being expanded, outermost first
        step: Number of rewrite steps taken (debug logging)
        max_component_depth: Nesting limit for component expansion
    """

    component_stack: list[str] = field(default_factory=list)
    step: int = 0

    # Deep enough for any real component hierarchy while turning runaway
    # self-reference into an error instead of a RecursionError
    max_component_depth: int = 100

    def check_component_depth(self, name: str) -> None:
        """Raise if expanding ``name`` would exceed the nesting limit.

        Raises:
            ComponentDepthError: If depth >= max_component_depth
        """
        if len(self.component_stack) >= self.max_component_depth:
            from htmp.environment.exceptions import ComponentDepthError

            raise ComponentDepthError(
                f"Maximum component depth exceeded ({self.max_component_depth}) "
                f"when expanding '{name}'",
                component_stack=self.component_stack,
                hint="Check for a component that references itself: A → B → A",
            )

    @contextmanager
    def component(self, name: str) -> Iterator[None]:
        """Track ``name`` on the component stack while it is being expanded."""
        self.check_component_depth(name)
        self.component_stack.append(name)
        try:
            yield
        finally:
            self.component_stack.pop()

    def next_step(self) -> int:
        self.step += 1
        return self.step


# Module-level ContextVar
_render_context: ContextVar[RenderContext | None] = ContextVar(
    "htmp_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None outside a compile)."""
    return _render_context.get()


def get_render_context_required() -> RenderContext:
    """Get current render context, raise outside a compile.

    Raises:
        RuntimeError: If not in a render context
    """
    ctx = _render_context.get()
    if ctx is None:
        raise RuntimeError("Not in a render context")
    return ctx


@contextmanager
def render_context(max_component_depth: int = 100) -> Iterator[RenderContext]:
    """Context manager for compile-scoped state.

    Creates a new RenderContext and sets it as the current context for the
    duration of the with block, restoring the previous one on exit.
    """
    ctx = RenderContext(max_component_depth=max_component_depth)
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
