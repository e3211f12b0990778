"""Exceptions for the htmp template compiler.

Exception Hierarchy:
TemplateError (base)
├── ConfigurationError         # Invalid CompileOptions
├── ComponentNotFoundError     # No override, cache entry or file for a component
├── TemplateStructureError     # Construct tag used incorrectly
│   ├── MissingAttributeError  # Required attribute absent (<if> without condition)
│   └── DanglingBranchError    # <elseif>/<else> not chained after <if>
├── TemplateRuntimeError       # Failure while expanding the tree
│   ├── InvalidValueError      # Expression produced an unusable value
│   └── ComponentDepthError    # Component nesting exceeded the configured limit
└── UndefinedError             # Expression referenced an unbound name

Every compile failure is fatal: the first error aborts the compile and no
partial output is produced. Errors raised while expanding a component carry
the chain of components being expanded at that moment:

    ```
    H-STR-001: <for> requires the 'in' attribute
      Component stack:
        • page-layout
        • nav-menu
    ```

Exceptions raised by the expression evaluator itself (``SyntaxError``,
``ZeroDivisionError``, ...) and non-"not found" I/O errors are not wrapped;
they reach the caller unchanged.

"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from htmp.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes.

    Format: H-{CATEGORY}-{NUMBER}
    Categories: CFG (configuration), CMP (component loading), STR (template
    structure), RUN (expansion runtime), EVL (expression evaluation)
    """

    INVALID_OPTION = "H-CFG-001"

    COMPONENT_NOT_FOUND = "H-CMP-001"

    MISSING_ATTRIBUTE = "H-STR-001"
    DANGLING_BRANCH = "H-STR-002"

    RUNTIME_ERROR = "H-RUN-001"
    INVALID_VALUE = "H-RUN-002"
    COMPONENT_DEPTH = "H-RUN-003"

    UNDEFINED_VARIABLE = "H-EVL-001"

    @property
    def category(self) -> str:
        prefix = self.value.split("-")[1]
        return {
            "CFG": "configuration",
            "CMP": "component",
            "STR": "structure",
            "RUN": "runtime",
            "EVL": "evaluation",
        }.get(prefix, "unknown")


def format_component_stack(stack: Sequence[str] | None) -> str:
    """Render the component expansion chain, outermost first.

    Example:
        >>> print(format_component_stack(["layout", "nav"]))
        Component stack:
          • layout
          • nav
    """
    if not stack:
        return ""
    lines = [terminal.dim_text("Component stack:")]
    lines.extend(f"  • {terminal.location(name)}" for name in stack)
    return "\n".join(lines)


class TemplateError(Exception):
    """Base exception for all htmp errors.

        >>> try:
        ...     compiler.compile(source)
        ... except TemplateError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: ErrorCode identifying the failure class
        message: Undecorated description
        component_stack: Components being expanded when the error was raised
        hint: Optional fix suggestion
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        component_stack: Iterable[str] | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.component_stack: list[str] = list(component_stack or [])
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.component_stack:
            parts.append(format_component_stack(self.component_stack))
        if self.hint:
            parts.append(f"  {terminal.hint('Hint:')} {self.hint}")
        return "\n".join(parts)

    def attach_component_stack(self, stack: Iterable[str]) -> TemplateError:
        """Record where the error happened unless a deeper frame already did."""
        if not self.component_stack:
            self.component_stack = list(stack)
            self.args = (self._format_message(),)
        return self

    def format_compact(self) -> str:
        """Format as a terminal diagnostic: code, message, component stack, hint."""
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message)
        ]
        if self.component_stack:
            parts.append(format_component_stack(self.component_stack))
        if self.hint:
            parts.append(f"  {terminal.hint('Hint:')} {self.hint}")
        return "\n".join(parts)


class ConfigurationError(TemplateError):
    """Invalid compiler configuration (colliding tag names, bad pattern, ...)."""

    code: ErrorCode | None = ErrorCode.INVALID_OPTION


class ComponentNotFoundError(TemplateError):
    """No override, cache entry or file exists for a component.

    Example:
            >>> compiler.compile("<x-not-real />")
        ComponentNotFoundError: Component not found: 'not-real' (referenced as <x-not-real>)

    """

    code: ErrorCode | None = ErrorCode.COMPONENT_NOT_FOUND

    def __init__(
        self,
        name: str,
        *,
        tag: str | None = None,
        searched: Sequence[str] = (),
        hint: str | None = None,
        component_stack: Iterable[str] | None = None,
    ):
        self.name = name
        self.tag = tag
        self.searched = tuple(searched)
        message = f"Component not found: '{name}'"
        if tag:
            message += f" (referenced as <{tag}>)"
        if self.searched:
            message += "\n  Searched: " + ", ".join(self.searched)
        super().__init__(message, component_stack=component_stack, hint=hint)


class TemplateStructureError(TemplateError):
    """A construct tag is used in a way the rewriter cannot expand."""

    code: ErrorCode | None = ErrorCode.MISSING_ATTRIBUTE


class MissingAttributeError(TemplateStructureError):
    """A construct tag lacks a required attribute.

    Example:
            >>> compiler.compile("<if>yes</if>")
        MissingAttributeError: <if> requires the 'condition' attribute

    """

    code: ErrorCode | None = ErrorCode.MISSING_ATTRIBUTE

    def __init__(
        self,
        tag: str,
        attributes: str | Sequence[str],
        *,
        component_stack: Iterable[str] | None = None,
    ):
        self.tag = tag
        self.attributes = (attributes,) if isinstance(attributes, str) else tuple(attributes)
        names = " and ".join(f"'{name}'" for name in self.attributes)
        noun = "attribute" if len(self.attributes) == 1 else "attributes"
        super().__init__(
            f"<{tag}> requires the {names} {noun}",
            component_stack=component_stack,
        )


class DanglingBranchError(TemplateStructureError):
    """An ``<elseif>``/``<else>`` that does not directly follow ``<if>``/``<elseif>``."""

    code: ErrorCode | None = ErrorCode.DANGLING_BRANCH

    def __init__(self, tag: str, *, component_stack: Iterable[str] | None = None):
        self.tag = tag
        super().__init__(
            f"Unexpected <{tag}>",
            component_stack=component_stack,
            hint=f"<{tag}> must directly follow an <if> or <elseif> "
            "(only whitespace and comments may sit between them)",
        )


class TemplateRuntimeError(TemplateError):
    """Failure while expanding the tree.

    Attributes:
        expression: Source of the expression involved, if any
        values: Name → value pairs shown in the message for context
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        values: dict[str, Any] | None = None,
        component_stack: Iterable[str] | None = None,
        hint: str | None = None,
    ):
        self.expression = expression
        self.values = values or {}
        parts = [message]
        if expression:
            parts.append(f"  Expression: {expression}")
        for name, value in self.values.items():
            value_repr = repr(value)
            if len(value_repr) > 80:
                value_repr = value_repr[:77] + "..."
            parts.append(f"    {name} = {value_repr} ({type(value).__name__})")
        super().__init__("\n".join(parts), component_stack=component_stack, hint=hint)


class InvalidValueError(TemplateRuntimeError):
    """An expression evaluated to a value the construct cannot use.

    Example:
            >>> compiler.compile('<for item="x" in="42"></for>')
        InvalidValueError: <for> 'in' must evaluate to a sequence
          Expression: 42
            value = 42 (int)

    """

    code: ErrorCode | None = ErrorCode.INVALID_VALUE

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        value: Any = None,
        component_stack: Iterable[str] | None = None,
        hint: str | None = None,
    ):
        self.value = value
        super().__init__(
            message,
            expression=expression,
            values={"value": value},
            component_stack=component_stack,
            hint=hint,
        )


class ComponentDepthError(TemplateRuntimeError):
    """Component nesting went past ``max_component_depth``."""

    code: ErrorCode | None = ErrorCode.COMPONENT_DEPTH


class UndefinedError(TemplateError):
    """An expression referenced a name bound in no scope frame.

    If ``available_names`` is given, a "Did you mean?" suggestion is added
    when a close match exists.

    Example:
            >>> compiler.compile("<p>%% titl %%</p>", title="Home")
        UndefinedError: Undefined variable 'titl'. Did you mean 'title'?

    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        *,
        expression: str | None = None,
        available_names: Iterable[str] | None = None,
        component_stack: Iterable[str] | None = None,
    ):
        self.name = name
        self.expression = expression
        message = f"Undefined variable '{name}'"
        if available_names:
            from difflib import get_close_matches

            matches = get_close_matches(name, list(available_names), n=1, cutoff=0.6)
            if matches:
                message += f". Did you mean '{terminal.suggestion(matches[0])}'?"
        if expression:
            message += f"\n  Expression: {expression}"
        super().__init__(
            message,
            component_stack=component_stack,
            hint="Pass the variable to compile() or add it to eval_context",
        )
