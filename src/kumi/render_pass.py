"""Per-pass state for one top-level render.

A render pass is one top-to-bottom traversal of a markup tree. Everything
mutable that component composition needs (the ancestor stack, the node
table that parent links point into, framework items such as the current
request) lives on the RenderPass object, never in module globals.

The pass is threaded explicitly through the pipeline functions. For the
Jinja2 extension, which is called from inside compiled template code and
cannot receive extra arguments, the current pass is also bound to a
ContextVar for the duration of the render:

    - Thread-safe: each thread sees its own binding
    - Async-safe: each asyncio task runs in a copied context, so two
      concurrent requests never observe each other's pass

Example:
    with render_pass(host, request=request) as rp:
        html = host.render_page("index.html", user=user)

"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from kumi.exceptions import MissingRenderContext
from kumi.utils.constants import COMPONENT_DEPTH_LIMIT

if TYPE_CHECKING:
    from kumi.components.node import ComponentNode
    from kumi.host.adapter import RenderingHost


@dataclass
class RenderPass:
    """Per-pass state isolated from every other render.

    Attributes:
        host: Rendering host that turns a route + view-model into markup
        request: Framework request object, if the caller has one
        max_depth: Maximum component nesting depth (DoS protection)
        pass_id: Unique id, useful for correlating log lines
        nodes: Node table; parent links are indexes into it
    """

    host: RenderingHost | None = None
    request: Any = None
    max_depth: int = COMPONENT_DEPTH_LIMIT
    pass_id: str = field(default_factory=lambda: uuid4().hex[:12])
    nodes: list[ComponentNode] = field(default_factory=list)

    # Opaque item bag. The ancestor stack is stored here lazily.
    _items: dict[str, object] = field(default_factory=dict)

    def get_item(self, key: str, default: object = None) -> object:
        """Get a pass-scoped item.

        Frameworks use items to hand request-level data to component
        classes without threading it through props:

            with render_pass(host) as rp:
                rp.set_item("csrf_token", session.csrf_token())
                html = host.render_page("form.html")

            # In a component:
            token = get_render_pass_required().get_item("csrf_token")
        """
        return self._items.get(key, default)

    def set_item(self, key: str, value: object) -> None:
        self._items[key] = value

    def has_item(self, key: str) -> bool:
        return key in self._items

    def register(self, node: ComponentNode) -> int:
        """Add ``node`` to the node table and return its id."""
        self.nodes.append(node)
        return len(self.nodes) - 1

    def node(self, node_id: int) -> ComponentNode:
        return self.nodes[node_id]

    def require_host(self) -> RenderingHost:
        """Return the pass's host.

        Raises:
            MissingRenderContext: If the pass was opened without a host
        """
        if self.host is None:
            raise MissingRenderContext("rendering host")
        return self.host


_render_pass: ContextVar[RenderPass | None] = ContextVar(
    "kumi_render_pass",
    default=None,
)


def get_render_pass() -> RenderPass | None:
    """Current render pass, or None outside a render."""
    return _render_pass.get()


def get_render_pass_required() -> RenderPass:
    """Current render pass.

    Raises:
        MissingRenderContext: If called outside a render pass
    """
    rp = _render_pass.get()
    if rp is None:
        raise MissingRenderContext()
    return rp


def _new_pass(
    host: RenderingHost | None,
    request: Any,
    max_depth: int | None,
    items: dict[str, object],
) -> RenderPass:
    rp = RenderPass(
        host=host,
        request=request,
        max_depth=max_depth if max_depth is not None else COMPONENT_DEPTH_LIMIT,
    )
    for key, value in items.items():
        rp.set_item(key, value)
    return rp


@contextmanager
def render_pass(
    host: RenderingHost | None = None,
    /,
    *,
    request: Any = None,
    max_depth: int | None = None,
    **items: object,
) -> Iterator[RenderPass]:
    """Open a fresh render pass and bind it for the with block.

    Always creates a new pass, even inside another one; the previous
    binding is restored on exit.

    Args:
        host: Rendering host for component templates
        request: Optional framework request object
        max_depth: Override for the component nesting limit
        **items: Initial pass-scoped items

    Yields:
        The new RenderPass
    """
    rp = _new_pass(host, request, max_depth, items)
    token: Token[RenderPass | None] = _render_pass.set(rp)
    try:
        yield rp
    finally:
        _render_pass.reset(token)


@asynccontextmanager
async def async_render_pass(
    host: RenderingHost | None = None,
    /,
    *,
    request: Any = None,
    max_depth: int | None = None,
    **items: object,
) -> AsyncIterator[RenderPass]:
    """Async twin of render_pass() for use with ``async with``.

    ContextVar reset is synchronous; the async wrapper is structural only.
    """
    rp = _new_pass(host, request, max_depth, items)
    token: Token[RenderPass | None] = _render_pass.set(rp)
    try:
        yield rp
    finally:
        _render_pass.reset(token)
