"""Component nodes, the naming convention, and the render pipeline."""

from kumi.components.node import (
    Component,
    ComponentNode,
    NodeKind,
    NodeState,
    slot_marker,
)
from kumi.components.pipeline import (
    initialize,
    process,
    process_async,
    run,
    run_async,
)
from kumi.components.routes import default_route, qualified_name, template_name

__all__ = [
    "Component",
    "ComponentNode",
    "NodeKind",
    "NodeState",
    "default_route",
    "initialize",
    "process",
    "process_async",
    "qualified_name",
    "run",
    "run_async",
    "slot_marker",
    "template_name",
]
