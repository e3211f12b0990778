"""Name helpers: kebab-casing component keys and splitting colon attributes."""

from __future__ import annotations

import re
from functools import lru_cache

_WORD_RE = re.compile(r"[a-z]+|[A-Z][a-z]+|[A-Z]+|\d+")


def to_kebab_case(name: str) -> str:
    """Convert ``helloWorld`` / ``HelloWorld`` / ``test2`` to ``hello-world`` / ``test-2``.

    Dots separate component path segments and are kept, each segment is
    converted on its own:

        >>> to_kebab_case("layouts.PageHeader")
        'layouts.page-header'

    A segment without any word characters is returned lowercased unchanged.
    """
    segments = []
    for segment in name.split("."):
        words = _WORD_RE.findall(segment)
        segments.append("-".join(words).lower() if words else segment.lower())
    return ".".join(segments)


@lru_cache(maxsize=32)
def _colon_pattern(count: int) -> re.Pattern[str]:
    return re.compile("^" + "(.+?):" * (count - 1) + "(.+)$", re.DOTALL)


def colon_match(count: int, name: str) -> tuple[str, ...] | None:
    """Split an attribute name into ``count`` colon-separated segments.

    Leading segments are matched lazily, so colons in the last segment
    survive:

        >>> colon_match(2, "eval:data-test")
        ('eval', 'data-test')
        >>> colon_match(3, "attr:inner::class")
        ('attr', 'inner', ':class')
        >>> colon_match(2, "class") is None
        True
    """
    match = _colon_pattern(count).match(name)
    if match is None:
        return None
    return match.groups()


def has_whitespace(value: str) -> bool:
    return any(ch.isspace() for ch in value)
