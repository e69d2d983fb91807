"""Render pipeline: the two-phase lifecycle every node goes through.

initialize(node, rp)
    Record the nearest enclosing component (the stack top) as the
    node's parent and, unless the node is a slot marker, push it. The
    first node of a pass creates the pass's stack and becomes its root.

process(node, rp, capture)
    1. Capture child markup by calling ``capture``. The traversal's
       capture renders the nested subtree, so every descendant is fully
       processed, and every slot marker has written into this node's
       slot store, before step 2.
    2. Slot marker: write the captured content into the slot store of
       the current stack top and produce no markup.
       Regular node: ask the rendering host to render node.render_route()
       with the node's view-model and return the host's markup.
    3. Pop the node if it pushed itself.

Failure handling:
    Any error aborts the node. It still pops itself before the error
    propagates, so ancestors find the stack exactly as they left it.
    On the success path the pop is strict: if the node is not on top,
    StackConsistencyError is raised. On the failure path a mismatch is
    only logged so the original error reaches the caller.

process_async() is the same algorithm with awaitable capture and host
calls. Pushes and pops are bracketed around the awaits, so suspension
does not disturb nesting as long as one pass is traversed sequentially.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from markupsafe import Markup

from kumi.components.node import ComponentNode, NodeState
from kumi.exceptions import ComponentLifecycleError, MissingRenderContext, SlotTargetError
from kumi.render_pass import RenderPass
from kumi.slots import to_fragment
from kumi.stack import current_top, get_stack, pop, push

logger = logging.getLogger(__name__)


def initialize(node: ComponentNode, rp: RenderPass | None) -> None:
    """Run the init step. Must run exactly once per node, before process."""
    if rp is None:
        raise MissingRenderContext(component=node.component_name)
    # get_stack creates the stack on first use; top is None for the root.
    parent = get_stack(rp).top
    node.attach(rp, parent)
    if not node.is_slot_marker:
        push(rp, node)
        node.pushed = True
    node.state = NodeState.INITIALIZED
    logger.debug(
        "pass %s: init %s (parent %s)",
        rp.pass_id,
        node.component_name,
        parent.component_name if parent is not None else None,
    )


def process(
    node: ComponentNode,
    rp: RenderPass | None,
    capture: Callable[[], object],
) -> Markup:
    """Run the process step and return the node's markup."""
    rp = _check_ready(node, rp)
    try:
        node.capture_children(capture)
        if node.is_slot_marker:
            _commit_slot(node, rp)
            output = Markup("")
        else:
            host = rp.require_host()
            route = node.render_route()
            logger.debug("pass %s: render %s -> %s", rp.pass_id, node.component_name, route)
            output = to_fragment(host.render(route, node.view_model()))
    except BaseException:
        _abort(node, rp)
        raise
    _finish(node, rp)
    return output


async def process_async(
    node: ComponentNode,
    rp: RenderPass | None,
    capture: Callable[[], Awaitable[object] | object],
) -> Markup:
    """Async process step. ``capture`` may return an awaitable."""
    rp = _check_ready(node, rp)
    try:
        await node.capture_children_async(capture)
        if node.is_slot_marker:
            _commit_slot(node, rp)
            output = Markup("")
        else:
            host = rp.require_host()
            route = node.render_route()
            logger.debug("pass %s: render %s -> %s", rp.pass_id, node.component_name, route)
            output = to_fragment(
                await host.render_async(route, node.view_model())
            )
    except BaseException:
        _abort(node, rp)
        raise
    _finish(node, rp)
    return output


def run(node: ComponentNode, rp: RenderPass | None, capture: Callable[[], object]) -> Markup:
    """initialize() then process()."""
    initialize(node, rp)
    return process(node, rp, capture)


async def run_async(
    node: ComponentNode,
    rp: RenderPass | None,
    capture: Callable[[], Awaitable[object] | object],
) -> Markup:
    initialize(node, rp)
    return await process_async(node, rp, capture)


def _check_ready(node: ComponentNode, rp: RenderPass | None) -> RenderPass:
    if rp is None:
        raise MissingRenderContext(component=node.component_name)
    if node.state is not NodeState.INITIALIZED:
        raise ComponentLifecycleError(
            f"Component '{node.component_name}' cannot be processed in state "
            f"'{node.state.value}'",
            component=node.component_name,
            suggestion="Call initialize() exactly once before process()",
        )
    return rp


def _commit_slot(node: ComponentNode, rp: RenderPass) -> None:
    slot_name = node.slot_name
    if not slot_name:
        raise ComponentLifecycleError(
            f"Slot marker '{node.component_name}' has no slot name",
            component=node.component_name,
            suggestion="Create slot markers with slot_marker(name)",
        )
    target = current_top(rp)
    if target is None:
        raise SlotTargetError(slot_name, component=node.component_name)
    target.slots.fill(slot_name, node.default_content)
    logger.debug("pass %s: slot '%s' -> %s", rp.pass_id, slot_name, target.component_name)


def _finish(node: ComponentNode, rp: RenderPass) -> None:
    if node.pushed:
        try:
            pop(rp, expected=node)
        except BaseException:
            node.state = NodeState.FAILED
            raise
        node.pushed = False
    node.state = NodeState.PROCESSED


def _abort(node: ComponentNode, rp: RenderPass) -> None:
    node.state = NodeState.FAILED
    if not node.pushed:
        return
    if get_stack(rp).top is node:
        pop(rp, expected=node)
        node.pushed = False
    else:
        logger.warning(
            "pass %s: %s failed but is not on top of the ancestor stack (%r); "
            "leaving the stack unchanged",
            rp.pass_id,
            node.component_name,
            get_stack(rp),
        )
