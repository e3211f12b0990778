"""Lexically nested variable scopes.

A `Scope` is one frame in a parent-pointing chain. Reads fall through to
ancestor frames; writes and deletes only ever touch the local frame, so a
binding made for a loop iteration or a component body is visible to
everything nested below it and invisible to siblings and ancestors.

Example:
        >>> root = Scope({"site": "Docs", "title": "Home"})
        >>> page = root.child({"title": "About"})
        >>> page["title"], page["site"]
        ('About', 'Docs')
        >>> page["extra"] = 1
        >>> "extra" in root
        False

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from types import MappingProxyType
from typing import Any


class Scope(MutableMapping[str, Any]):
    """One frame of a scope chain.

    Attributes:
        parent: Enclosing frame, or None for the root frame

    """

    __slots__ = ("_vars", "parent")

    def __init__(
        self,
        bindings: Mapping[str, Any] | None = None,
        parent: Scope | None = None,
    ) -> None:
        self._vars: dict[str, Any] = dict(bindings) if bindings else {}
        self.parent = parent

    def child(self, bindings: Mapping[str, Any] | None = None) -> Scope:
        """Create a nested frame whose lookups fall back to this one."""
        return Scope(bindings, parent=self)

    @property
    def local(self) -> Mapping[str, Any]:
        """Read-only view of this frame's own bindings."""
        return MappingProxyType(self._vars)

    @property
    def depth(self) -> int:
        depth = 0
        frame = self.parent
        while frame is not None:
            depth += 1
            frame = frame.parent
        return depth

    def _frames(self) -> Iterator[Scope]:
        frame: Scope | None = self
        while frame is not None:
            yield frame
            frame = frame.parent

    def __getitem__(self, key: str) -> Any:
        for frame in self._frames():
            if key in frame._vars:
                return frame._vars[key]
        raise KeyError(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._vars[key] = value

    def __delitem__(self, key: str) -> None:
        del self._vars[key]

    def __contains__(self, key: object) -> bool:
        return any(key in frame._vars for frame in self._frames())

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for frame in self._frames():
            for key in frame._vars:
                if key not in seen:
                    seen.add(key)
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def flatten(self) -> dict[str, Any]:
        """Collapse the chain into one dict; the nearest binding wins."""
        frames = [frame._vars for frame in self._frames() if frame._vars]
        result: dict[str, Any] = {}
        for bindings in reversed(frames):
            result.update(bindings)
        return result

    def __repr__(self) -> str:
        return f"Scope({self._vars!r}, depth={self.depth})"
