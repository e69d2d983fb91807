"""Component type -> template route naming convention.

A component's default template route is its fully-qualified class name
with the owning root package replaced by a root marker and dots turned
into path separators:

    myapp.components.card.Card  ->  ~/components/card/Card.html

The marker stands for the template loader's root, so the host strips it
before lookup (``components/card/Card.html``). Routes that do not start
with the marker are passed to the host verbatim.
"""

from __future__ import annotations

from kumi.utils.constants import ROOT_MARKER, TEMPLATE_SUFFIX


def qualified_name(cls: type) -> str:
    """``module.QualName`` for ``cls``, ignoring function-local scopes.

    Classes defined inside a function have ``<locals>`` in their
    qualname; only the part after the innermost function is kept.
    """
    qualname = cls.__qualname__.rpartition("<locals>.")[2]
    return f"{cls.__module__}.{qualname}"


def default_route(
    cls: type,
    *,
    root_package: str | None = None,
    root_marker: str = ROOT_MARKER,
    suffix: str = TEMPLATE_SUFFIX,
) -> str:
    """Derive the template route for a component class.

    Args:
        cls: Component class
        root_package: Dotted prefix to replace with the marker. Defaults
            to the first segment of the class's module.
        root_marker: Marker standing for the template root
        suffix: Template file extension

    Example:
        >>> default_route(Card)  # Card in myapp.ui.card
        '~/ui/card/Card.html'
        >>> default_route(Card, root_package="myapp.ui")
        '~/card/Card.html'
    """
    full = qualified_name(cls)
    root = root_package or cls.__module__.split(".")[0]
    if full.startswith(root + "."):
        full = full[len(root) + 1 :]
    return f"{root_marker}/{full.replace('.', '/')}{suffix}"


def template_name(route: str, root_marker: str = ROOT_MARKER) -> str:
    """Strip the root marker so a loader can resolve ``route``."""
    prefix = root_marker + "/"
    if route.startswith(prefix):
        return route[len(prefix) :]
    return route
