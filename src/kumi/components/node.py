"""Component nodes: the unit of composition.

One ComponentNode exists per occurrence of a component in a markup tree.
It owns its template route, its slot store and its captured default
content, and links to its nearest enclosing component.

Node kinds:
    REGULAR      renders its own template through the rendering host
    SLOT_MARKER  renders nothing; routes its child markup into the slot
                 store of the nearest enclosing regular component

The kind is a tag on the node, checked by the pipeline, so composition
logic does not depend on which Python class a node happens to be.

Parent links:
    A node never holds its parent. It stores the parent's id in the
    render pass's node table plus a weak reference to the pass, so the
    link resolves only while the pass is alive.

Authoring components:
    ```python
    class Card(Component):
        title: str = ""
        elevated: bool = False

    # Template (~/ui/card/Card.html when Card lives in myapp.ui.card):
    # <div class="card{% if model.elevated %} raised{% endif %}">
    #   <h2>{{ title }}</h2>
    #   {% if not model.is_slot_empty("footer") %}
    #     <footer>{{ model.get_slot("footer") }}</footer>
    #   {% endif %}
    #   {{ model.default_content }}
    # </div>
    ```
"""

from __future__ import annotations

import inspect
import weakref
from collections.abc import Awaitable, Callable, Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, get_origin

from markupsafe import Markup

from kumi.components.routes import default_route
from kumi.exceptions import ComponentLifecycleError, ReservedPropError, UnknownPropError
from kumi.slots import SlotStore, is_blank, to_fragment
from kumi.utils.constants import ROOT_MARKER, TEMPLATE_SUFFIX

if TYPE_CHECKING:
    from kumi.render_pass import RenderPass

_NodeT = TypeVar("_NodeT", bound="ComponentNode")


class NodeKind(Enum):
    REGULAR = "regular"
    SLOT_MARKER = "slot_marker"


class NodeState(Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    PROCESSED = "processed"
    FAILED = "failed"


class ComponentNode:
    """Lifecycle state, slot store and ancestor link for one node.

    Attributes:
        kind: REGULAR or SLOT_MARKER
        slot_name: Target slot name (slot markers only)
        component_name: Display name used in logs and errors
        default_content: Un-named child markup, captured at most once
        slots: Named child fragments written by descendant slot markers
        state: Lifecycle state (CREATED -> INITIALIZED -> PROCESSED|FAILED)
        node_id: Index in the pass's node table, set at initialization
        parent_id: Parent's index in the same table, or None
        pushed: Whether this node is currently on the ancestor stack
    """

    def __init__(
        self,
        *,
        route: str = "",
        kind: NodeKind = NodeKind.REGULAR,
        slot_name: str | None = None,
        name: str | None = None,
    ):
        if kind is NodeKind.SLOT_MARKER and not slot_name:
            raise ValueError("Slot markers require a slot name")
        self.kind = kind
        self.slot_name = slot_name
        if name is None:
            name = f"slot:{slot_name}" if kind is NodeKind.SLOT_MARKER else type(self).__name__
        self.component_name = name
        self._template_route = route
        self.default_content: Markup | None = None
        self._captured = False
        self.slots = SlotStore(owner=name)
        self.state = NodeState.CREATED
        self.node_id: int | None = None
        self.parent_id: int | None = None
        self.pushed = False
        self._pass_ref: weakref.ReferenceType[RenderPass] | None = None

    @property
    def template_route(self) -> str:
        return self._template_route

    @property
    def is_slot_marker(self) -> bool:
        return self.kind is NodeKind.SLOT_MARKER

    # -- ancestry ---------------------------------------------------------

    def attach(self, rp: RenderPass, parent: ComponentNode | None) -> None:
        """Register in ``rp``'s node table and record ``parent``.

        Raises:
            ComponentLifecycleError: If already attached to a pass
        """
        if self.state is not NodeState.CREATED:
            raise ComponentLifecycleError(
                f"Component '{self.component_name}' was already initialized",
                component=self.component_name,
                suggestion="Create a new node for every occurrence in the markup",
            )
        self.node_id = rp.register(self)
        self.parent_id = parent.node_id if parent is not None else None
        self._pass_ref = weakref.ref(rp)

    @property
    def parent(self) -> ComponentNode | None:
        """Nearest enclosing component at initialization time.

        None for a pass root, or once the owning pass has been released.
        """
        if self.parent_id is None or self._pass_ref is None:
            return None
        rp = self._pass_ref()
        if rp is None:
            return None
        return rp.node(self.parent_id)

    def ancestors(self) -> Iterator[ComponentNode]:
        """Walk parent links outward, nearest first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def closest(self, component_type: type[_NodeT]) -> _NodeT | None:
        """Nearest ancestor that is an instance of ``component_type``."""
        for node in self.ancestors():
            if isinstance(node, component_type):
                return node
        return None

    # -- child content ----------------------------------------------------

    def capture_children(self, capture: Callable[[], object]) -> Markup:
        """Run ``capture`` once and keep its output as default content."""
        if not self._captured:
            self.default_content = to_fragment(capture())
            self._captured = True
        return self.default_content or Markup("")

    async def capture_children_async(
        self, capture: Callable[[], Awaitable[object] | object]
    ) -> Markup:
        if not self._captured:
            content = capture()
            if inspect.isawaitable(content):
                content = await content
            self.default_content = to_fragment(content)
            self._captured = True
        return self.default_content or Markup("")

    # -- template query surface -------------------------------------------

    @property
    def is_default_content_empty(self) -> bool:
        """True when there is no default content worth rendering.

        Use it to decide on fallback content:

            {% if model.is_default_content_empty %}Nothing here{% else %}...
        """
        return is_blank(self.default_content)

    def is_slot_empty(self, name: str) -> bool:
        """True when slot ``name`` is undeclared, empty or whitespace-only."""
        return self.slots.is_empty(name)

    def get_slot(self, name: str) -> Markup:
        """Content of slot ``name``.

        Raises:
            SlotNotFound: If no slot marker at the usage site declared it
        """
        return self.slots.get(name)

    render_slot = get_slot

    def view_model(self) -> object:
        """Object handed to the rendering host. Defaults to the node itself."""
        return self

    def render_route(self) -> str:
        """Route handed to the rendering host at process time.

        Defaults to ``template_route``. Override it to pick another view
        once default content and slots are known:

            def render_route(self):
                if self.is_default_content_empty:
                    return "~/ui/EmptyCard.html"
                return self.template_route
        """
        return self._template_route

    def __repr__(self) -> str:
        return f"<{self.component_name} #{self.node_id} {self.state.value}>"


def slot_marker(name: str) -> ComponentNode:
    """Create a slot marker node targeting slot ``name``."""
    return ComponentNode(kind=NodeKind.SLOT_MARKER, slot_name=name)


# Class attributes that configure routing rather than declare props.
_SETTINGS = frozenset({"template", "template_root", "template_suffix", "root_marker"})


def _is_classvar(annotation: object) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


class Component(ComponentNode):
    """Base class for authored components.

    Public annotated class attributes (and public non-callable class
    attributes) are props. Usage-site attributes bind to them by name,
    with dashes mapped to underscores.

    Names the node itself uses (``kind``, ``state``, ``slots``, ``parent``,
    ``default_content``, ``get_slot`` and the rest of its public surface)
    cannot be props. Declaring one raises ReservedPropError when the class
    is defined.

    Routing:
        template: Explicit route, used verbatim (overrides the convention)
        template_root: Dotted package prefix replaced by the root marker
        template_suffix: Extension appended to convention routes
        root_marker: Marker standing for the template root

    ``template_route=`` at construction overrides all of the above for one
    instance.
    """

    template: ClassVar[str | None] = None
    template_root: ClassVar[str | None] = None
    template_suffix: ClassVar[str] = TEMPLATE_SUFFIX
    root_marker: ClassVar[str] = ROOT_MARKER

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        clashes = cls.prop_names() & _RESERVED
        if clashes:
            raise ReservedPropError(clashes, component=cls.__name__)

    def __init__(self, *, template_route: str | None = None, **attributes: Any):
        cls = type(self)
        route = template_route
        if route is None:
            route = cls.template or default_route(
                cls,
                root_package=cls.template_root,
                root_marker=cls.root_marker,
                suffix=cls.template_suffix,
            )
        super().__init__(route=route, kind=NodeKind.REGULAR)
        for name in cls.prop_names():
            if not hasattr(self, name):
                setattr(self, name, None)
        self.bind(attributes)

    @classmethod
    def prop_names(cls) -> frozenset[str]:
        authored = [k for k in cls.__mro__ if k not in (Component, ComponentNode, object)]
        class_vars = {
            name
            for klass in authored
            for name, annotation in inspect.get_annotations(klass).items()
            if _is_classvar(annotation)
        }
        names: set[str] = set()
        for klass in authored:
            for name in inspect.get_annotations(klass):
                if not name.startswith("_") and name not in class_vars:
                    names.add(name)
            for name, value in vars(klass).items():
                if name.startswith("_") or name in _SETTINGS or name in class_vars:
                    continue
                if callable(value) or isinstance(value, (property, classmethod, staticmethod)):
                    continue
                names.add(name)
        return frozenset(names - _SETTINGS)

    def bind(self, attributes: dict[str, Any]) -> None:
        """Assign usage-site attributes to props.

        Raises:
            UnknownPropError: For an attribute with no matching prop
        """
        props = type(self).prop_names()
        for key, value in attributes.items():
            name = key.replace("-", "_")
            if name not in props:
                raise UnknownPropError(key, props, component=self.component_name)
            setattr(self, name, value)

    def props(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in type(self).prop_names()}


# Instance attributes assigned in ComponentNode.__init__.
_NODE_ATTRIBUTES = frozenset(
    {
        "kind",
        "slot_name",
        "component_name",
        "default_content",
        "slots",
        "state",
        "node_id",
        "parent_id",
        "pushed",
    }
)

_RESERVED = (
    frozenset(name for name in dir(Component) if not name.startswith("_")) | _NODE_ATTRIBUTES
) - _SETTINGS
