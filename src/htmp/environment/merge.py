"""Attribute merge strategies.

When a component receives caller attributes (directly or through an
``attr`` marker), each incoming attribute is combined with the value already
on the target element by a merge function:

    merge(existing: str | None, incoming: str) -> str | bool | None

Result handling:
    - ``str``: becomes the attribute value
    - ``True``: attribute kept as a boolean attribute (``""``)
    - ``False`` / ``None``: attribute removed

Resolution order for an attribute name:
    1. Strategy registered for that exact name
    2. First strategy whose pattern matches (``re.search``)
    3. Overwrite with the incoming value

Built-in strategies for ``class`` and ``style`` are appended after the user
strategies unless the user already registered one under that exact name.

Example:
        >>> registry = MergeStrategyRegistry([
        ...     MergeStrategy(lambda old, new: f"{old or ''} {new}".strip(), pattern=r"^aria-"),
        ... ])
        >>> el = Element("p", {"class": "a"})
        >>> registry.assign(el, {"class": "b", "id": "x"})
        >>> el.attrs
        {'class': 'a b', 'id': 'x'}

"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from htmp.nodes import Element

MergeResult = str | bool | None
MergeFunction = Callable[[str | None, str], MergeResult]


@dataclass(frozen=True, slots=True)
class MergeStrategy:
    """A merge function bound to an exact attribute name or a name pattern."""

    merge: MergeFunction
    name: str | None = None
    pattern: re.Pattern[str] | str | None = None

    def __post_init__(self) -> None:
        if (self.name is None) == (self.pattern is None):
            raise ValueError("MergeStrategy needs exactly one of 'name' or 'pattern'")
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))

    def matches(self, attribute: str) -> bool:
        if self.name is not None:
            return self.name == attribute
        return self.pattern.search(attribute) is not None  # type: ignore[union-attr]


def merge_class(existing: str | None, incoming: str) -> str:
    return f"{existing or ''} {incoming}".strip()


def merge_style(existing: str | None, incoming: str) -> str:
    declarations = []
    for value in (existing, incoming):
        value = (value or "").strip()
        if not value:
            continue
        declarations.append(value if value.endswith(";") else value + ";")
    return " ".join(declarations)


def overwrite(existing: str | None, incoming: str) -> str:
    return incoming


BUILTIN_STRATEGIES: tuple[MergeStrategy, ...] = (
    MergeStrategy(merge_class, name="class"),
    MergeStrategy(merge_style, name="style"),
)


class MergeStrategyRegistry:
    """Ordered set of merge strategies with the built-ins appended."""

    __slots__ = ("_by_name", "_patterns", "_strategies")

    def __init__(self, strategies: Iterable[MergeStrategy] = ()):
        self._strategies: list[MergeStrategy] = list(strategies)
        named = {s.name for s in self._strategies if s.name is not None}
        for builtin in BUILTIN_STRATEGIES:
            if builtin.name not in named:
                self._strategies.append(builtin)

        # First registration wins for a name, matching list order
        self._by_name: dict[str, MergeFunction] = {}
        for strategy in self._strategies:
            if strategy.name is not None:
                self._by_name.setdefault(strategy.name, strategy.merge)
        self._patterns = [s for s in self._strategies if s.pattern is not None]

    @property
    def strategies(self) -> tuple[MergeStrategy, ...]:
        return tuple(self._strategies)

    def resolve(self, attribute: str) -> MergeFunction:
        """Return the merge function for ``attribute``."""
        merge = self._by_name.get(attribute)
        if merge is not None:
            return merge
        for strategy in self._patterns:
            if strategy.matches(attribute):
                return strategy.merge
        return overwrite

    def assign(self, element: Element, attributes: Mapping[str, str]) -> None:
        """Merge ``attributes`` into ``element.attrs`` in order."""
        for name, value in attributes.items():
            result = self.resolve(name)(element.attrs.get(name), value)
            if isinstance(result, str):
                element.attrs[name] = result
            elif result is True:
                element.attrs[name] = ""
            else:
                element.attrs.pop(name, None)
