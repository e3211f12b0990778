"""Component expansion.

Provides mixin for replacing a component reference with the component's
expanded template.

Referencing:
    <x-card title="Hi">Body</x-card>               # prefix form
    <component name="card">Body</component>         # explicit form
    <component eval:name="kind + '-card'" />        # computed name

Inside the component:
    <script server>
        heading = props.title.upper()
        count = props["$count"]          # evaluate the caller's count="..."
    </script>
    <article attr class="card">          # receives the caller's attributes
        <h2>%% heading %%</h2>
        <yield>Default body</yield>      # caller's children
        <slot name="footer" />           # caller's <fill slot="footer">
    </article>

Expansion order:
    1. Resolve the name and load its source
    2. Parse a fresh tree for this use
    3. Run top-level ``<script server>`` elements with ``props`` bound
    4. Process the component tree in a child of the caller scope
    5. Route the caller's remaining attributes to ``attr`` markers
       (``attr:<slot>:<name>`` targets ``attr="<slot>"``; the rest go to
       ``attr=""`` or, failing that, the first top-level element)
    6. Process the caller's children in the caller scope and project them
       into ``<yield>`` and ``<slot>`` points
    7. Splice the component tree in place of the reference

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from htmp.environment.exceptions import (
    ComponentNotFoundError,
    MissingAttributeError,
    TemplateError,
    TemplateRuntimeError,
)
from htmp.nodes import Element, Node, Text, find_elements
from htmp.parser import parse_html
from htmp.render_context import get_render_context_required
from htmp.utils.naming import colon_match

if TYPE_CHECKING:
    from htmp.environment.merge import MergeStrategyRegistry
    from htmp.environment.options import CompileOptions
    from htmp.environment.registry import ComponentRegistry
    from htmp.evaluator import Evaluator
    from htmp.nodes import Fragment, ParentNode
    from htmp.scope import Scope


class Props:
    """Lazy, memoizing view of a component caller's attributes.

    Reading a prop consumes the caller attribute of the same name so it is
    not passed through to the component's ``attr`` targets. A ``$`` prefix
    evaluates the attribute value as an expression in the caller scope.

        >>> caller = Element("x-card", {"title": "Hi", "count": "1 + 1"})
        >>> props = Props(caller, Scope(), PythonEvaluator())
        >>> props.title, props["$count"], props.missing
        ('Hi', 2, None)
        >>> caller.attrs
        {}

    Props are only readable while the component's server scripts run;
    afterwards the accessor is closed.

    Attribute access covers every prop except ``get``, which is the
    ``dict``-style lookup method; read that one as ``props["get"]``.
    """

    __slots__ = ("_caller", "_closed", "_evaluator", "_resolved", "_scope")

    def __init__(self, caller: Element, scope: Scope, evaluator: Evaluator):
        self._caller = caller
        self._scope = scope
        self._evaluator = evaluator
        self._resolved: dict[str, Any] = {}
        self._closed = False

    def _resolve(self, key: str) -> Any:
        if self._closed:
            raise TemplateRuntimeError(
                f"props[{key!r}] read after the server scripts finished",
                hint="Copy props into variables inside <script server>",
            )
        if key in self._resolved:
            return self._resolved[key]

        evaluate = key.startswith("$")
        attribute = key[1:] if evaluate else key
        if attribute not in self._caller.attrs:
            return None

        raw = self._caller.attrs.pop(attribute)
        value = self._evaluator.evaluate(raw, self._scope.child()) if evaluate else raw
        self._resolved[key] = value
        return value

    def __getitem__(self, key: str) -> Any:
        return self._resolve(key)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._resolve(name)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        attribute = key[1:] if key.startswith("$") else key
        return key in self._resolved or attribute in self._caller.attrs

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self:
            return default
        return self._resolve(key)

    def _close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Props {state} resolved={sorted(self._resolved)}>"


def _within(node: Node, root: Fragment) -> bool:
    current = node.parent
    while current is not None:
        if current is root:
            return True
        current = current.parent
    return False


class ComponentMixin:
    """Mixin for expanding component references.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        options: CompileOptions
        registry: ComponentRegistry
        evaluator: Evaluator
        merge_strategies: MergeStrategyRegistry

        # From TreeRewriter core
        def process(self, container: ParentNode, scope: Scope) -> None: ...

    def _is_component(self, element: Element) -> bool:
        return element.tag.startswith(self.options.component_tag_prefix)

    def _component_name(self, element: Element) -> str:
        if element.tag == self.options.component_tag:
            if "name" not in element.attrs:
                raise MissingAttributeError(element.tag, "name")
            return element.attrs.pop("name")
        return element.tag[len(self.options.component_tag_prefix) :]

    def _rewrite_component(self, element: Element, scope: Scope) -> int:
        """Expand a component reference in place and return the inserted count."""
        ctx = get_render_context_required()
        name = self._component_name(element)
        ctx.check_component_depth(name)
        try:
            source = self.registry.get_source(name)
        except ComponentNotFoundError as exc:
            raise ComponentNotFoundError(
                name,
                tag=element.tag,
                searched=exc.searched,
                hint=exc.hint,
                component_stack=ctx.component_stack,
            ) from exc

        with ctx.component(name):
            try:
                tree = parse_html(source)
                component_scope = self._run_server_scripts(tree, element, scope)
                self.process(tree, component_scope)
                self._distribute_attributes(tree, element)
            except TemplateError as exc:
                exc.attach_component_stack(ctx.component_stack)
                raise
            stack = list(ctx.component_stack)

        self.process(element, scope)
        yield_content, fills = self._partition_content(element)

        for point in self._projection_points(tree, self.options.yield_tag):
            if yield_content is None:
                point.unwrap()
            else:
                point.replace_with(*(node.clone() for node in yield_content))

        for point in self._projection_points(tree, self.options.define_slot_tag):
            if "name" not in point.attrs:
                raise MissingAttributeError(point.tag, "name", component_stack=stack)
            content = fills.get(point.attrs["name"])
            if content is None:
                point.unwrap()
            else:
                point.replace_with(*(node.clone() for node in content))

        return element.replace_with(*tree.take_children())

    def _run_server_scripts(self, tree: Fragment, caller: Element, scope: Scope) -> Scope:
        """Execute top-level ``<script server>`` elements and drop them."""
        props = Props(caller, scope, self.evaluator)
        component_scope = scope.child({"props": props})
        scripts = [
            node
            for node in tree.children
            if isinstance(node, Element) and node.tag == "script" and "server" in node.attrs
        ]
        for script in scripts:
            body = "".join(
                child.data for child in script.children if isinstance(child, Text)
            )
            self.evaluator.execute(body, component_scope)
            script.remove()
        if "props" in component_scope.local:
            del component_scope["props"]
        props._close()
        return component_scope

    def _distribute_attributes(self, tree: Fragment, caller: Element) -> None:
        """Merge the caller's leftover attributes into the component's ``attr`` targets."""
        marker = self.options.attr_attribute
        buckets: dict[str, dict[str, str]] = {}
        for attribute, value in caller.attrs.items():
            segments = colon_match(3, attribute)
            if segments is not None and segments[0] == marker:
                buckets.setdefault(segments[1], {})[segments[2]] = value
            else:
                buckets.setdefault("", {})[attribute] = value

        claimed_default = False
        for target in find_elements(tree.children, lambda el: marker in el.attrs):
            bucket = target.attrs.pop(marker)
            if bucket == "":
                claimed_default = True
            if bucket in buckets:
                self.merge_strategies.assign(target, buckets[bucket])

        if not claimed_default and "" in buckets:
            first = next(
                (
                    node
                    for node in tree.children
                    if isinstance(node, Element) and node.tag not in ("script", "style")
                ),
                None,
            )
            if first is not None:
                self.merge_strategies.assign(first, buckets[""])

    def _partition_content(
        self, caller: Element
    ) -> tuple[list[Node] | None, dict[str, list[Node]]]:
        """Split processed caller children into yield content and slot fills."""
        fill_tag = self.options.fill_slot_tag
        yield_content: list[Node] = []
        fills: dict[str, list[Node]] = {}
        for child in caller.take_children():
            if isinstance(child, Element) and child.tag == fill_tag:
                if "slot" not in child.attrs:
                    raise MissingAttributeError(fill_tag, "slot")
                fills.setdefault(child.attrs["slot"], []).extend(child.take_children())
                continue
            yield_content.append(child)
        return (yield_content or None), fills

    def _projection_points(self, tree: Fragment, tag: str) -> Iterator[Element]:
        # Snapshot first; points nested in another point's default content
        # are moved along with it and stay inside the tree
        for point in find_elements(tree.children, tag):
            if _within(point, tree):
                yield point
