"""Shared HTML constants for htmp.

Kept in one place so the parser, serializer and formatter agree on which
elements are void, raw-text or whitespace-sensitive.
"""

from __future__ import annotations

# Elements that never have children or a closing tag
# Source: WHATWG HTML Living Standard, "void elements"
VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose text content is serialized without entity escaping
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})

# Elements whose content the formatter must keep byte-for-byte
WHITESPACE_SENSITIVE_ELEMENTS: frozenset[str] = frozenset(
    {"pre", "textarea", "script", "style"}
)

# Phrasing content the formatter keeps on the surrounding line
INLINE_ELEMENTS: frozenset[str] = frozenset(
    {
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "br",
        "cite",
        "code",
        "data",
        "dfn",
        "em",
        "i",
        "img",
        "input",
        "kbd",
        "label",
        "mark",
        "q",
        "s",
        "samp",
        "select",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "time",
        "u",
        "var",
        "wbr",
    }
)

# Control-flow tags handled by the rewriter; component/slot/stack tag names
# are configurable and must not collide with these
RESERVED_TAGS: frozenset[str] = frozenset({"if", "elseif", "else", "switch", "case", "for"})
