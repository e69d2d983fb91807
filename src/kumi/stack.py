"""Ancestor stack: the chain of components currently being processed.

One stack per render pass, stored in the pass's item bag and created on
first use. At any point during traversal the top is the nearest
enclosing regular component that has not finished processing, or the
stack is empty.

Discipline:
    - Slot markers are never pushed.
    - A node pops itself, and only itself, when it finishes processing.
    - Popping anything other than the top is a bug and raises
      StackConsistencyError without touching the stack.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kumi.exceptions import ComponentDepthError, StackConsistencyError
from kumi.utils.constants import STACK_KEY

if TYPE_CHECKING:
    from kumi.components.node import ComponentNode
    from kumi.render_pass import RenderPass

logger = logging.getLogger(__name__)


class AncestorStack:
    """LIFO of active component nodes with push/pop accounting.

    ``pushes`` and ``pops`` count every successful operation so callers
    can assert balance once a pass completes.
    """

    __slots__ = ("_nodes", "pops", "pushes")

    def __init__(self) -> None:
        self._nodes: list[ComponentNode] = []
        self.pushes = 0
        self.pops = 0

    @property
    def top(self) -> ComponentNode | None:
        return self._nodes[-1] if self._nodes else None

    @property
    def depth(self) -> int:
        return len(self._nodes)

    @property
    def balanced(self) -> bool:
        return not self._nodes and self.pushes == self.pops

    def push(self, node: ComponentNode, max_depth: int | None = None) -> None:
        if node.is_slot_marker:
            raise StackConsistencyError(
                f"Slot marker '{node.slot_name}' cannot be pushed onto the ancestor stack"
            )
        if max_depth is not None and len(self._nodes) >= max_depth:
            raise ComponentDepthError(max_depth, component=node.component_name)
        self._nodes.append(node)
        self.pushes += 1

    def pop(self, expected: ComponentNode | None = None) -> ComponentNode:
        """Remove and return the top node.

        Args:
            expected: If given, the node the caller believes is on top

        Raises:
            StackConsistencyError: If the stack is empty or ``expected``
                is not the top. The stack is left unchanged.
        """
        if not self._nodes:
            raise StackConsistencyError(
                "Cannot pop from an empty ancestor stack",
                component=expected.component_name if expected is not None else None,
            )
        top = self._nodes[-1]
        if expected is not None and top is not expected:
            raise StackConsistencyError(
                f"Component '{expected.component_name}' tried to pop itself, "
                f"but '{top.component_name}' is on top of the ancestor stack",
                component=expected.component_name,
                suggestion="A child component finished without popping itself, "
                "or sibling subtrees of one pass were processed concurrently",
            )
        self._nodes.pop()
        self.pops += 1
        return top

    def snapshot(self) -> tuple[ComponentNode, ...]:
        """Bottom-to-top copy of the current contents."""
        return tuple(self._nodes)

    def __contains__(self, node: object) -> bool:
        return any(n is node for n in self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        chain = " > ".join(n.component_name for n in self._nodes)
        return f"AncestorStack([{chain}])"


def has_stack(rp: RenderPass) -> bool:
    """Whether any node has initialized in this pass yet."""
    return rp.has_item(STACK_KEY)


def get_stack(rp: RenderPass) -> AncestorStack:
    """Return the pass's stack, creating it on first use."""
    stack = rp.get_item(STACK_KEY)
    if stack is None:
        stack = AncestorStack()
        rp.set_item(STACK_KEY, stack)
        logger.debug("pass %s: ancestor stack created", rp.pass_id)
    if not isinstance(stack, AncestorStack):
        raise StackConsistencyError(
            f"Render pass item '{STACK_KEY}' holds {type(stack).__name__}, "
            "not an AncestorStack",
            suggestion=f"Do not store other values under '{STACK_KEY}'",
        )
    return stack


def current_top(rp: RenderPass) -> ComponentNode | None:
    """Nearest enclosing regular component, or None."""
    if not has_stack(rp):
        return None
    return get_stack(rp).top


def push(rp: RenderPass, node: ComponentNode) -> None:
    stack = get_stack(rp)
    stack.push(node, rp.max_depth)
    logger.debug(
        "pass %s: push %s (depth %d)", rp.pass_id, node.component_name, stack.depth
    )


def pop(rp: RenderPass, expected: ComponentNode | None = None) -> ComponentNode:
    node = get_stack(rp).pop(expected)
    logger.debug("pass %s: pop %s", rp.pass_id, node.component_name)
    return node
