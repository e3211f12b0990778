"""Expression evaluation for templates.

The rewriter never interprets expressions itself. It hands source strings to
an `Evaluator`:

    evaluate(source, scope) -> Any   # attribute values, %% text %%, conditions
    execute(source, scope) -> None   # <script server> bodies

`PythonEvaluator` is the default. Expressions are Python, evaluated against
the flattened scope chain plus a restricted builtins table. The literals
``true``, ``false``, ``null`` and ``undefined`` are bound as well, so
templates written for JavaScript-flavoured engines keep working:

    <if condition="user is not null and user.admin">...</if>
    <p>%% ", ".join(tags) %%</p>

Error Handling:
    - An unbound name raises `UndefinedError` with a "did you mean" hint
    - Every other exception (``SyntaxError``, ``ZeroDivisionError``, ...)
      propagates unchanged

The evaluator is not a security boundary. Restricting builtins keeps
templates honest (no ``open``, no ``__import__``); it does not sandbox
untrusted template authors.
"""

from __future__ import annotations

import builtins
import textwrap
from collections.abc import Mapping, MutableMapping
from functools import lru_cache
from types import CodeType
from typing import Any, Literal, Protocol, runtime_checkable

from htmp.environment.exceptions import UndefinedError
from htmp.scope import Scope

# Builtins visible to template expressions
SAFE_BUILTINS: dict[str, Any] = {
    name: getattr(builtins, name)
    for name in (
        # Type constructors
        "bool",
        "int",
        "float",
        "str",
        "list",
        "dict",
        "tuple",
        "set",
        "frozenset",
        # Functions
        "abs",
        "all",
        "any",
        "callable",
        "chr",
        "divmod",
        "enumerate",
        "filter",
        "format",
        "getattr",
        "hasattr",
        "isinstance",
        "iter",
        "len",
        "map",
        "max",
        "min",
        "next",
        "ord",
        "pow",
        "range",
        "repr",
        "reversed",
        "round",
        "slice",
        "sorted",
        "sum",
        "zip",
        # Exceptions server scripts may catch or raise
        "Exception",
        "KeyError",
        "IndexError",
        "TypeError",
        "ValueError",
    )
}

LITERAL_ALIASES: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}


@runtime_checkable
class Evaluator(Protocol):
    """Capability the rewriter uses to run template expressions."""

    def evaluate(self, source: str, scope: Mapping[str, Any]) -> Any: ...

    def execute(self, source: str, scope: MutableMapping[str, Any]) -> None: ...


class PythonEvaluator:
    """Evaluate template expressions as Python.

    Compiled code objects are memoized per source string, so a loop body
    evaluating the same expression for every item compiles it once.

    Example:
            >>> ev = PythonEvaluator()
            >>> ev.evaluate("1 + 2", Scope())
            3
            >>> scope = Scope({"items": [1, 2]})
            >>> ev.execute("total = sum(items)", scope)
            >>> scope["total"]
            3

    Args:
        builtins: Replacement builtins table (default: `SAFE_BUILTINS`)
        cache_size: Maximum number of memoized code objects

    """

    __slots__ = ("_builtins", "_compile")

    def __init__(
        self,
        builtins: Mapping[str, Any] | None = None,
        cache_size: int = 1024,
    ):
        self._builtins = dict(SAFE_BUILTINS if builtins is None else builtins)
        self._compile = lru_cache(maxsize=cache_size)(_compile_source)

    def _namespace(self, scope: Mapping[str, Any]) -> dict[str, Any]:
        namespace = dict(LITERAL_ALIASES)
        namespace.update(scope.flatten() if isinstance(scope, Scope) else scope)
        namespace["__builtins__"] = self._builtins
        return namespace

    def evaluate(self, source: str, scope: Mapping[str, Any]) -> Any:
        """Evaluate ``source`` as an expression and return its value."""
        code = self._compile(source.strip(), "eval")
        namespace = self._namespace(scope)
        try:
            return eval(code, namespace)
        except NameError as exc:
            raise self._undefined(exc, source, namespace) from exc

    def execute(self, source: str, scope: MutableMapping[str, Any]) -> None:
        """Run ``source`` as statements; new or rebound names land in ``scope``."""
        code = self._compile(textwrap.dedent(source).strip("\n"), "exec")
        namespace = self._namespace(scope)
        before = dict(namespace)
        try:
            exec(code, namespace)
        except NameError as exc:
            raise self._undefined(exc, source, namespace) from exc
        for name, value in namespace.items():
            if name == "__builtins__":
                continue
            if name not in before or before[name] is not value:
                scope[name] = value

    def cache_info(self) -> Any:
        return self._compile.cache_info()

    @staticmethod
    def _undefined(exc: NameError, source: str, namespace: dict[str, Any]) -> UndefinedError:
        name = getattr(exc, "name", None) or str(exc)
        available = [key for key in namespace if key != "__builtins__"]
        return UndefinedError(name, expression=source.strip(), available_names=available)


def _compile_source(source: str, mode: Literal["eval", "exec"]) -> CodeType:
    return compile(source, f"<template {mode}>", mode)
