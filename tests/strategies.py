"""Shared hypothesis strategies for htmp property-based testing.

Provides reusable strategies that generate structurally valid inputs:

- **Markup**: plain HTML fragments without template constructs
- **Values**: Python literals the evaluator can round-trip through ``repr``
- **Names**: identifiers and component names

These are building blocks -- individual test modules compose them into
property-specific strategies.
"""

from __future__ import annotations

import keyword

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Markup strategies
# ---------------------------------------------------------------------------

# Text without markup, entity or expression delimiters
plain_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("Lu", "Ll", "Nd", "Zs"),
        whitelist_characters=".,!?-_",
    ),
    min_size=1,
    max_size=40,
)

# Plain element names that are not construct tags or void elements
plain_tag = st.sampled_from(["div", "p", "span", "section", "article", "ul", "li", "em"])

attribute_name = st.from_regex(r"[a-z][a-z0-9]{0,6}(-[a-z0-9]{1,4})?", fullmatch=True).filter(
    lambda name: name not in ("attr", "eval", "tag", "name", "slot", "stack")
)

attribute_value = st.from_regex(r"[A-Za-z0-9 _./-]{0,20}", fullmatch=True)


@st.composite
def plain_element(draw: st.DrawFn, depth: int = 2) -> str:
    """Serialized element with unique attributes and nested plain content."""
    tag = draw(plain_tag)
    names = draw(st.lists(attribute_name, max_size=3, unique=True))
    attrs = "".join(f' {name}="{draw(attribute_value)}"' for name in names)
    if depth <= 0:
        children = draw(st.lists(plain_text, max_size=2))
    else:
        children = draw(
            st.lists(st.one_of(plain_text, plain_element(depth=depth - 1)), max_size=3)
        )
    return f"<{tag}{attrs}>{''.join(children)}</{tag}>"


plain_fragment = st.lists(st.one_of(plain_text, plain_element()), min_size=1, max_size=4).map(
    "".join
)

# ---------------------------------------------------------------------------
# Value strategies
# ---------------------------------------------------------------------------

safe_integer = st.integers(min_value=-10_000, max_value=10_000)

literal_value = st.one_of(
    safe_integer,
    st.booleans(),
    st.none(),
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz ", max_size=10),
)

integer_list = st.lists(safe_integer, max_size=8)

# ---------------------------------------------------------------------------
# Name strategies
# ---------------------------------------------------------------------------

identifier = st.from_regex(r"[a-z][a-z0-9_]{0,10}", fullmatch=True).filter(
    lambda name: name not in ("true", "false", "null", "undefined", "props")
    and not keyword.iskeyword(name)
)

camel_case_name = st.from_regex(r"[a-z]{1,6}([A-Z][a-z]{1,6}){0,3}", fullmatch=True)
