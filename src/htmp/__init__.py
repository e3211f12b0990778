"""htmp: HTML-first template compiler with components, slots and stacks.

Templates are plain HTML. Control flow, components and expressions are
tags and attributes, expanded at compile time into static HTML.

Quickstart:
    >>> from htmp import Compiler
    >>> compiler = Compiler(pretty=False)
    >>> compiler.compile('<for item="n" in="[1, 2, 3]"><li>%% n * 2 %%</li></for>')
    '<li>2</li><li>4</li><li>6</li>'

Components:
    >>> compiler = Compiler(
    ...     components={"card": '<div class="card" attr><yield /></div>'},
    ...     pretty=False,
    ... )
    >>> compiler.compile('<x-card class="wide">Hi</x-card>')
    '<div class="card wide">Hi</div>'

File-based components load from ``./components`` (``<x-nav.menu>`` reads
``components/nav/menu.html`` or ``components/nav/menu/index.html``).

Architecture:
Template Source → HTML parser → node tree → TreeRewriter → StackProcessor → serializer

Pipeline stages:
1. **Parser**: Builds a mutable, parent-linked node tree (stdlib html.parser)
2. **Rewriter**: Expands conditionals, loops, dynamic tags and components in place
3. **Stacks**: Moves pushed content to its placeholders and titles into <head>
4. **Serializer**: Renders the tree, optionally pretty-printed

Constructs:
- ``<if condition>`` / ``<elseif condition>`` / ``<else>``
- ``<switch value>`` with ``<case case>`` / ``<case default>``
- ``<for item in>``
- ``<dynamic tag>``
- ``eval:<attr>="expr"`` and ``%% expr %%`` in text
- ``<x-name>`` / ``<component name>`` with ``<yield>``, ``<slot name>``, ``<fill slot>``
- ``<push stack>`` / ``<stack name>``

Thread-Safety:
A Compiler may be shared across threads. Per-compile state lives in a
ContextVar; the component cache only receives idempotent writes.

Strict Mode:
Undefined variables raise `UndefinedError` with a "did you mean" hint.

"""

from htmp.environment import (
    ChoiceLoader,
    CompileOptions,
    Compiler,
    ComponentDepthError,
    ComponentNotFoundError,
    ComponentRegistry,
    ConfigurationError,
    DanglingBranchError,
    DictLoader,
    ErrorCode,
    FileSystemLoader,
    InvalidValueError,
    Loader,
    MergeStrategy,
    MergeStrategyRegistry,
    MissingAttributeError,
    TemplateError,
    TemplateRuntimeError,
    TemplateStructureError,
    UndefinedError,
    compile,
)
from htmp.evaluator import Evaluator, PythonEvaluator
from htmp.render_context import RenderContext, get_render_context, render_context
from htmp.scope import Scope

__version__ = "0.1.0"

__all__ = [
    "ChoiceLoader",
    "CompileOptions",
    "Compiler",
    "ComponentDepthError",
    "ComponentNotFoundError",
    "ComponentRegistry",
    "ConfigurationError",
    "DanglingBranchError",
    "DictLoader",
    "ErrorCode",
    "Evaluator",
    "FileSystemLoader",
    "InvalidValueError",
    "Loader",
    "MergeStrategy",
    "MergeStrategyRegistry",
    "MissingAttributeError",
    "PythonEvaluator",
    "RenderContext",
    "Scope",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateStructureError",
    "UndefinedError",
    "__version__",
    "compile",
    "get_render_context",
    "render_context",
]
