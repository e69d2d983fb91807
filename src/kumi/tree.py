"""Markup trees built in Python.

For callers that compose components without template-side tags:

    page = element(
        Layout,
        element(Card, slot("header", "<h2>Hi</h2>"), "Body", title="Welcome"),
        lang="en",
    )
    html = render_tree(page, host)

Strings in a tree are raw markup and are trusted as-is. Traversal is
depth-first: a component's children are walked inside its capture step,
so they are processed before the component's own template is rendered.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from markupsafe import Markup

from kumi.components.node import Component, ComponentNode, slot_marker
from kumi.components.pipeline import run, run_async
from kumi.exceptions import UnknownComponentError
from kumi.render_pass import RenderPass, async_render_pass, render_pass

if TYPE_CHECKING:
    from kumi.host.adapter import RenderingHost
    from kumi.host.registry import ComponentRegistry

Child = Union[str, "Element"]


@dataclass
class Element:
    """One component usage (or slot marker) in a markup tree.

    Attributes:
        component: Component class or registered tag name; None for slots
        props: Usage-site attributes
        children: Raw markup strings and nested elements
        slot_name: Target slot for slot markers
    """

    component: type[Component] | str | None
    props: dict[str, Any] = field(default_factory=dict)
    children: list[Child] = field(default_factory=list)
    slot_name: str | None = None

    @property
    def is_slot(self) -> bool:
        return self.slot_name is not None


def element(component: type[Component] | str, /, *children: Child, **props: Any) -> Element:
    return Element(component, dict(props), list(children))


def slot(name: str, /, *children: Child) -> Element:
    """Slot marker routing ``children`` into the enclosing component's slot."""
    return Element(None, {}, list(children), slot_name=name)


def _registry_of(host: RenderingHost | None) -> ComponentRegistry | None:
    return getattr(host, "registry", None)


def _build(item: Element, registry: ComponentRegistry | None) -> ComponentNode:
    if item.slot_name is not None:
        return slot_marker(item.slot_name)
    component = item.component
    if isinstance(component, str):
        if registry is None:
            raise UnknownComponentError(component)
        component = registry.get_component(component)
    if not (isinstance(component, type) and issubclass(component, Component)):
        raise UnknownComponentError(repr(component))
    return component(**item.props)


def walk(
    tree: Child | Sequence[Child],
    rp: RenderPass,
    registry: ComponentRegistry | None = None,
) -> Markup:
    """Process ``tree`` within an existing pass and return its markup."""
    if isinstance(tree, str):
        return Markup(tree)
    if not isinstance(tree, Element):
        return Markup("").join(walk(child, rp, registry) for child in tree)

    children = tree.children
    node = _build(tree, registry)
    return run(node, rp, lambda: Markup("").join(walk(c, rp, registry) for c in children))


async def walk_async(
    tree: Child | Sequence[Child],
    rp: RenderPass,
    registry: ComponentRegistry | None = None,
) -> Markup:
    if isinstance(tree, str):
        return Markup(tree)
    if not isinstance(tree, Element):
        return Markup("").join([await walk_async(child, rp, registry) for child in tree])

    children = tree.children

    async def capture() -> Markup:
        # One child at a time: the pass has a single ancestor stack.
        return Markup("").join([await walk_async(c, rp, registry) for c in children])

    node = _build(tree, registry)
    return await run_async(node, rp, capture)


def render_tree(
    tree: Child | Sequence[Child],
    host: RenderingHost,
    /,
    *,
    registry: ComponentRegistry | None = None,
    request: Any = None,
    max_depth: int | None = None,
    **items: object,
) -> Markup:
    """Render ``tree`` in a fresh render pass."""
    with render_pass(host, request=request, max_depth=max_depth, **items) as rp:
        return walk(tree, rp, registry if registry is not None else _registry_of(host))


async def render_tree_async(
    tree: Child | Sequence[Child],
    host: RenderingHost,
    /,
    *,
    registry: ComponentRegistry | None = None,
    request: Any = None,
    max_depth: int | None = None,
    **items: object,
) -> Markup:
    async with async_render_pass(host, request=request, max_depth=max_depth, **items) as rp:
        return await walk_async(
            tree, rp, registry if registry is not None else _registry_of(host)
        )
