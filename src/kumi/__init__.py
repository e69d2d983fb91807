"""kumi: server-rendered UI components with default content and named slots.

A component is a Python class (behavior and view-model) backed by a host
template. Components nest arbitrarily; each receives the markup nested
inside its usage as default content, and named fragments through slot
markers. Template evaluation is delegated to a rendering host; the
bundled host is Jinja2.

Quickstart:
    >>> from jinja2 import DictLoader
    >>> from kumi import Component, JinjaHost
    >>> host = JinjaHost(loader=DictLoader({
    ...     "card.html": "<div class=card><h2>{{ model.get_slot('header') }}</h2>"
    ...                  "{{ model.default_content }}</div>",
    ...     "page.html": "{% component 'card' %}{% slot 'header' %}Hi{% endslot %}"
    ...                  "Body{% endcomponent %}",
    ... }))
    >>> @host.registry.component("card")
    ... class Card(Component):
    ...     template = "card.html"
    >>> host.render_page("page.html")
    Markup('<div class=card><h2>Hi</h2>Body</div>')

Architecture:
    markup traversal (Jinja2 tags or kumi.tree)
        -> initialize(node)   parent = stack top; push unless slot marker
        -> process(node)      capture children; fill slot or host.render; pop

Render passes:
    All mutable composition state (ancestor stack, node table, request
    items) lives on a RenderPass opened per top-level render, never in
    module globals. Concurrent renders on different threads or asyncio
    tasks each get their own pass.

"""

from kumi.components import (
    Component,
    ComponentNode,
    NodeKind,
    NodeState,
    default_route,
    initialize,
    process,
    process_async,
    run,
    run_async,
    slot_marker,
)
from kumi.exceptions import (
    ComponentDepthError,
    ComponentError,
    ComponentLifecycleError,
    ErrorCode,
    MissingRenderContext,
    RenderError,
    ReservedPropError,
    SlotNotFound,
    SlotTargetError,
    StackConsistencyError,
    TemplateNotFound,
    UnknownComponentError,
    UnknownPropError,
)
from kumi.host import ComponentExtension, ComponentRegistry, JinjaHost, RenderingHost
from kumi.render_pass import (
    RenderPass,
    async_render_pass,
    get_render_pass,
    get_render_pass_required,
    render_pass,
)
from kumi.slots import SlotStore, is_blank
from kumi.stack import AncestorStack, current_top, get_stack, pop, push
from kumi.tree import Element, element, render_tree, render_tree_async, slot, walk, walk_async

__version__ = "0.1.0"

__all__ = [
    "AncestorStack",
    "Component",
    "ComponentDepthError",
    "ComponentError",
    "ComponentExtension",
    "ComponentLifecycleError",
    "ComponentNode",
    "ComponentRegistry",
    "Element",
    "ErrorCode",
    "JinjaHost",
    "MissingRenderContext",
    "NodeKind",
    "NodeState",
    "RenderError",
    "RenderPass",
    "ReservedPropError",
    "RenderingHost",
    "SlotNotFound",
    "SlotStore",
    "SlotTargetError",
    "StackConsistencyError",
    "TemplateNotFound",
    "UnknownComponentError",
    "UnknownPropError",
    "__version__",
    "async_render_pass",
    "current_top",
    "default_route",
    "element",
    "get_render_pass",
    "get_render_pass_required",
    "get_stack",
    "initialize",
    "is_blank",
    "pop",
    "process",
    "process_async",
    "push",
    "render_pass",
    "render_tree",
    "render_tree_async",
    "run",
    "run_async",
    "slot",
    "slot_marker",
    "walk",
    "walk_async",
]
