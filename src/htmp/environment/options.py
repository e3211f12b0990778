"""Compiler configuration.

`CompileOptions` is an immutable value object fixed for the lifetime of a
`Compiler`. Every construct tag and attribute name the rewriter recognizes is
configurable, so the names are validated up front: two constructs sharing a
tag name could not be told apart during expansion.

Example:
        >>> opts = CompileOptions(component_tag_prefix="c-", pretty=False)
        >>> opts.yield_tag
        'yield'
        >>> CompileOptions(yield_tag="slot")
        Traceback (most recent call last):
        ...
        htmp.environment.exceptions.ConfigurationError: Construct tag names must be distinct: ...

"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from htmp.environment.exceptions import ConfigurationError
from htmp.utils.constants import RESERVED_TAGS

if TYPE_CHECKING:
    from htmp.environment.merge import MergeStrategy

TitleBehavior = Literal["preserve", "remove"]

DEFAULT_CONTENT_PATTERN = r"%%(.+?)%%"


@dataclass(frozen=True, slots=True)
class CompileOptions:
    """Configuration for one `Compiler`.

    Attributes:
        components: Component sources by name, taking precedence over the loader
        components_root: Directory searched for ``<name>.html`` / ``<name>/index.html``
        component_tag_prefix: Tag prefix marking a component reference (``<x-card>``)
        component_tag: Explicit component tag (``<component name="card">``)
        cache_components: Remember loaded component sources across compiles
        yield_tag: Default content projection point inside a component
        pretty: Run the formatter over the serialized output
        attr_attribute: Marker attribute receiving caller attributes
        define_slot_tag: Named projection point inside a component
        fill_slot_tag: Caller-side content for a named slot
        stack_tag: Placeholder replaced by pushed content
        push_tag: Content collected into a named stack
        evaluate_attribute_prefix: Prefix for evaluated attributes (``eval:href``)
        evaluate_content_pattern: Delimiters for text expressions, group 1 is the source
        dynamic_tag: Element whose tag name is computed
        eval_context: Bindings visible to every expression
        debug: Log the tree after every rewrite step
        attribute_merge_strategies: Custom merge strategies, tried before the built-ins
        title_behavior_in_partial: ``"preserve"`` or ``"remove"`` top-level titles
            when the output has no ``<html>`` element
        max_component_depth: Nesting limit for component expansion
        encoding: Encoding of component files

    """

    components: Mapping[str, str] = field(default_factory=dict)
    components_root: str = "./components"
    component_tag_prefix: str = "x-"
    component_tag: str = "component"
    cache_components: bool = True
    yield_tag: str = "yield"
    pretty: bool = True
    attr_attribute: str = "attr"
    define_slot_tag: str = "slot"
    fill_slot_tag: str = "fill"
    stack_tag: str = "stack"
    push_tag: str = "push"
    evaluate_attribute_prefix: str = "eval"
    evaluate_content_pattern: re.Pattern[str] | str = DEFAULT_CONTENT_PATTERN
    dynamic_tag: str = "dynamic"
    eval_context: Mapping[str, Any] = field(default_factory=dict)
    debug: bool = False
    attribute_merge_strategies: tuple[MergeStrategy, ...] = ()
    title_behavior_in_partial: TitleBehavior = "preserve"
    max_component_depth: int = 100
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if isinstance(self.evaluate_content_pattern, str):
            object.__setattr__(
                self,
                "evaluate_content_pattern",
                re.compile(self.evaluate_content_pattern),
            )
        if not isinstance(self.attribute_merge_strategies, tuple):
            object.__setattr__(
                self, "attribute_merge_strategies", tuple(self.attribute_merge_strategies)
            )
        self.validate()

    @property
    def content_pattern(self) -> re.Pattern[str]:
        """The compiled text expression pattern."""
        return self.evaluate_content_pattern  # type: ignore[return-value]

    @property
    def construct_tags(self) -> dict[str, str]:
        """Option name → tag name for every configurable construct tag."""
        return {
            "component_tag": self.component_tag,
            "yield_tag": self.yield_tag,
            "define_slot_tag": self.define_slot_tag,
            "fill_slot_tag": self.fill_slot_tag,
            "stack_tag": self.stack_tag,
            "push_tag": self.push_tag,
            "dynamic_tag": self.dynamic_tag,
        }

    def validate(self) -> None:
        """Raise `ConfigurationError` if construct names are unusable."""
        names = {
            **self.construct_tags,
            "component_tag_prefix": self.component_tag_prefix,
            "attr_attribute": self.attr_attribute,
            "evaluate_attribute_prefix": self.evaluate_attribute_prefix,
        }
        for option, value in names.items():
            if not value:
                raise ConfigurationError(f"{option} must not be empty")
            if value != value.lower() or any(ch.isspace() for ch in value):
                raise ConfigurationError(
                    f"{option} must be lowercase without whitespace, got {value!r}",
                    hint="The HTML parser lowercases every tag and attribute name",
                )

        tags = self.construct_tags
        seen: dict[str, str] = {}
        for option, tag in tags.items():
            if tag in seen:
                raise ConfigurationError(
                    f"Construct tag names must be distinct: {seen[tag]} and {option} "
                    f"are both {tag!r}"
                )
            if tag in RESERVED_TAGS:
                raise ConfigurationError(
                    f"{option} {tag!r} collides with the control-flow tag <{tag}>"
                )
            if tag.startswith(self.component_tag_prefix):
                raise ConfigurationError(
                    f"{option} {tag!r} starts with the component prefix "
                    f"{self.component_tag_prefix!r} and would be loaded as a component"
                )
            seen[tag] = option

        if self.attr_attribute == self.evaluate_attribute_prefix:
            raise ConfigurationError(
                "attr_attribute and evaluate_attribute_prefix must differ, "
                f"both are {self.attr_attribute!r}"
            )

        if self.content_pattern.groups < 1:
            raise ConfigurationError(
                "evaluate_content_pattern must contain a capturing group for the expression",
                hint=f"The default pattern is {DEFAULT_CONTENT_PATTERN!r}",
            )

        if self.title_behavior_in_partial not in ("preserve", "remove"):
            raise ConfigurationError(
                "title_behavior_in_partial must be 'preserve' or 'remove', "
                f"got {self.title_behavior_in_partial!r}"
            )

        if self.max_component_depth < 1:
            raise ConfigurationError(
                f"max_component_depth must be at least 1, got {self.max_component_depth}"
            )

    def replace(self, **changes: Any) -> CompileOptions:
        """Return a copy with ``changes`` applied (validated again)."""
        return dataclasses.replace(self, **changes)
