"""Exceptions for the kumi component engine.

Exception Hierarchy:
ComponentError (base)
├── MissingRenderContext      # No render pass / host available
├── SlotNotFound              # Template asked for an undeclared slot
├── SlotTargetError           # Slot marker with no enclosing component
├── TemplateNotFound          # Route did not resolve to a template
├── RenderError               # Any other host failure (cause preserved)
├── StackConsistencyError     # Ancestor stack push/pop discipline broken
├── ComponentDepthError       # Nesting deeper than the pass allows
├── ComponentLifecycleError   # init/process called out of order
├── UnknownComponentError     # Registry lookup miss
├── UnknownPropError          # Usage-site attribute not declared
└── ReservedPropError         # Prop name shadows a node attribute

None of these are retried. They surface to the caller of the process
step and fail the whole render pass.

Example:
    ```
    KM-TPL-001: Template for component 'Card' not found: ~/ui/card/Card.html
      Route: ~/ui/card/Card.html
      Hint: The route is derived from the class's module path. Check that
            the template lives under the loader root at ui/card/Card.html
    ```

"""

from __future__ import annotations

from collections.abc import Iterable
from difflib import get_close_matches
from enum import Enum
from typing import Any

from kumi.utils import terminal

_KUMI_DOCS_BASE = "https://kumi.readthedocs.io/en/latest/errors"


class ErrorCode(Enum):
    """Searchable error codes.

    Format: KM-{CATEGORY}-{NUMBER}
    Categories: CTX (render context), SLT (slots), TPL (templates),
    STK (ancestor stack), CMP (component definitions)
    """

    MISSING_RENDER_CONTEXT = "KM-CTX-001"

    SLOT_NOT_FOUND = "KM-SLT-001"
    SLOT_TARGET_MISSING = "KM-SLT-002"

    TEMPLATE_NOT_FOUND = "KM-TPL-001"
    RENDER_ERROR = "KM-TPL-002"

    STACK_CONSISTENCY = "KM-STK-001"
    COMPONENT_DEPTH = "KM-STK-002"

    COMPONENT_LIFECYCLE = "KM-CMP-001"
    UNKNOWN_COMPONENT = "KM-CMP-002"
    UNKNOWN_PROP = "KM-CMP-003"
    RESERVED_PROP = "KM-CMP-004"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_KUMI_DOCS_BASE}/#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g., 'slot', 'template', 'stack')."""
        prefix = self.value.split("-")[1]
        return {
            "CTX": "context",
            "SLT": "slot",
            "TPL": "template",
            "STK": "stack",
            "CMP": "component",
        }.get(prefix, "unknown")


def did_you_mean(name: str, candidates: Iterable[str]) -> str | None:
    """Return the closest candidate to ``name``, or None."""
    matches = get_close_matches(name, [str(c) for c in candidates], n=1, cutoff=0.6)
    return matches[0] if matches else None


class ComponentError(Exception):
    """Base exception for all kumi errors.

    Attributes:
        message: Error description without decorations.
        component: Name of the component involved, if known.
        route: Template route involved, if known.
        suggestion: Actionable fix, shown as a hint.
        code: Searchable ErrorCode.
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        component: str | None = None,
        route: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.component = component
        self.route = route
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def __str__(self) -> str:
        return self._format_message()

    def _format_message(self) -> str:
        parts = [self.message]
        if self.route:
            parts.append(f"  Route: {terminal.location(self.route)}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        """Format as a structured terminal diagnostic.

        Format::

            KM-SLT-001: Slot 'heder' was not declared for component 'Card'
              Route: ~/ui/Card.html
              Hint: Did you mean 'header'?
              Docs: https://kumi.readthedocs.io/en/latest/errors/#km-slt-001
        """
        parts = [
            terminal.format_error_header(
                self.code.value if self.code else None, self.message
            )
        ]
        if self.route:
            parts.append(f"  Route: {terminal.location(self.route)}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        if self.code:
            parts.append(
                f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}"
            )
        return "\n".join(parts)


class MissingRenderContext(ComponentError):
    """A required render-time context was not supplied.

    Raised when a component is initialized or processed with no active
    render pass, or when the pass has no rendering host to delegate to.
    """

    code: ErrorCode | None = ErrorCode.MISSING_RENDER_CONTEXT

    def __init__(self, what: str = "render pass", **kwargs: Any):
        self.what = what
        kwargs.setdefault(
            "suggestion",
            "Render through JinjaHost.render_page() or render_tree(), "
            "or open one with kumi.render_pass()",
        )
        super().__init__(f"No active {what} for component rendering", **kwargs)


class SlotNotFound(ComponentError, KeyError):
    """A template requested a slot name never declared at the usage site.

    Distinct from a declared slot whose content is empty, which renders
    as an empty fragment.

    Example:
        >>> card.get_slot("heder")
        SlotNotFound: Slot 'heder' was not declared for component 'Card'
          Hint: Did you mean 'header'?
    """

    code: ErrorCode | None = ErrorCode.SLOT_NOT_FOUND

    def __init__(
        self,
        slot_name: str,
        declared: frozenset[str] = frozenset(),
        **kwargs: Any,
    ):
        self.slot_name = slot_name
        self.declared = declared
        component = kwargs.get("component")
        owner = f" for component '{terminal.component(str(component))}'" if component else ""
        match = did_you_mean(slot_name, declared)
        if match:
            hint = f"Did you mean '{terminal.suggestion(match)}'?"
        else:
            hint = (
                f"Add {{% slot \"{slot_name}\" %}}...{{% endslot %}} at the usage site, "
                f"or guard with model.is_slot_empty(\"{slot_name}\")"
            )
        kwargs.setdefault("suggestion", hint)
        super().__init__(f"Slot '{slot_name}' was not declared{owner}", **kwargs)


class SlotTargetError(ComponentError):
    """A slot marker was processed with no enclosing component to receive it."""

    code: ErrorCode | None = ErrorCode.SLOT_TARGET_MISSING

    def __init__(self, slot_name: str, **kwargs: Any):
        self.slot_name = slot_name
        kwargs.setdefault(
            "suggestion", "Slot markers must appear inside a component's usage block"
        )
        super().__init__(
            f"Slot '{slot_name}' has no enclosing component", **kwargs
        )


class TemplateNotFound(ComponentError):
    """A component's route did not resolve to a template.

    Usually a mismatch between where the component class lives and where
    its template lives, since the default route is derived from the
    class's module path.
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, route: str, template_name: str | None = None, **kwargs: Any):
        self.template_name = template_name or route
        component = kwargs.get("component")
        owner = f" for component '{terminal.component(str(component))}'" if component else ""
        kwargs.setdefault(
            "suggestion",
            "The default route is derived from the component's module path. "
            f"Check that the template exists at '{self.template_name}' under the "
            "loader root, or pass an explicit route",
        )
        super().__init__(
            f"Template{owner} not found: {self.template_name}",
            route=route,
            **kwargs,
        )


class RenderError(ComponentError):
    """The rendering host failed for a reason other than a missing template.

    The original exception is chained as ``__cause__`` and kept on
    ``original``.
    """

    code: ErrorCode | None = ErrorCode.RENDER_ERROR

    def __init__(self, route: str, original: BaseException, **kwargs: Any):
        self.original = original
        component = kwargs.get("component")
        owner = f" component '{terminal.component(str(component))}'" if component else ""
        kwargs.setdefault("suggestion", "See the chained exception for the host's error")
        super().__init__(
            f"Unexpected error while rendering{owner}: "
            f"{type(original).__name__}: {original}",
            route=route,
            **kwargs,
        )


class StackConsistencyError(ComponentError):
    """The ancestor stack's push/pop discipline was violated."""

    code: ErrorCode | None = ErrorCode.STACK_CONSISTENCY


class ComponentDepthError(ComponentError):
    """Components nested deeper than the render pass allows."""

    code: ErrorCode | None = ErrorCode.COMPONENT_DEPTH

    def __init__(self, limit: int, **kwargs: Any):
        self.limit = limit
        kwargs.setdefault(
            "suggestion", "Check for a component that renders itself: Card -> Card"
        )
        super().__init__(
            f"Maximum component nesting depth exceeded ({limit})", **kwargs
        )


class ComponentLifecycleError(ComponentError):
    """A node's init or process step ran out of order."""

    code: ErrorCode | None = ErrorCode.COMPONENT_LIFECYCLE


class UnknownComponentError(ComponentError):
    """No component is registered under the requested tag name."""

    code: ErrorCode | None = ErrorCode.UNKNOWN_COMPONENT

    def __init__(self, name: str, registered: frozenset[str] = frozenset(), **kwargs: Any):
        self.name = name
        match = did_you_mean(name, registered)
        if match:
            kwargs.setdefault("suggestion", f"Did you mean '{terminal.suggestion(match)}'?")
        else:
            kwargs.setdefault(
                "suggestion", f"Register it with @registry.component(\"{name}\")"
            )
        super().__init__(f"Unknown component '{name}'", **kwargs)


class UnknownPropError(ComponentError):
    """A usage-site attribute does not match any prop on the component."""

    code: ErrorCode | None = ErrorCode.UNKNOWN_PROP

    def __init__(self, attribute: str, props: frozenset[str] = frozenset(), **kwargs: Any):
        self.attribute = attribute
        component = kwargs.get("component")
        owner = f" on component '{terminal.component(str(component))}'" if component else ""
        match = did_you_mean(attribute.replace("-", "_"), props)
        if match:
            kwargs.setdefault("suggestion", f"Did you mean '{terminal.suggestion(match)}'?")
        else:
            kwargs.setdefault(
                "suggestion", "Declare it as an annotated class attribute on the component"
            )
        super().__init__(f"Unknown attribute '{attribute}'{owner}", **kwargs)


class ReservedPropError(ComponentError):
    """A component class declares a prop under a name the node itself uses.

    Raised when the class is defined, since such a prop would either be
    shadowed by node state or overwrite it.
    """

    code: ErrorCode | None = ErrorCode.RESERVED_PROP

    def __init__(self, names: Iterable[str], **kwargs: Any):
        self.names = tuple(sorted(names))
        component = kwargs.get("component")
        owner = f" on component '{terminal.component(str(component))}'" if component else ""
        listed = ", ".join(f"'{name}'" for name in self.names)
        kwargs.setdefault(
            "suggestion",
            "The component node already uses these names for its own state and "
            "template helpers. Rename the prop, e.g. 'kind' -> 'variant'",
        )
        super().__init__(f"Reserved prop name {listed}{owner}", **kwargs)
