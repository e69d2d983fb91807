"""Component registry: tag name -> component class.

Markup refers to components by name (``{% component "card" %}``); the
registry resolves those names. Mutations are copy-on-write so a registry
shared by threads rendering concurrently is never observed half-updated.
"""

from __future__ import annotations

import re
from collections.abc import Callable, ItemsView, Iterator, KeysView
from typing import TypeVar

from kumi.components.node import Component
from kumi.exceptions import UnknownComponentError

_C = TypeVar("_C", bound=type[Component])

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def tag_name_for(cls: type) -> str:
    """Default tag name: kebab-cased class name without a ``Component`` suffix.

    Example:
        >>> tag_name_for(ParametersWithChildrenComponent)
        'parameters-with-children'
    """
    name = cls.__name__
    if name.endswith("Component") and name != "Component":
        name = name[: -len("Component")]
    return _CAMEL_BOUNDARY.sub("-", name).lower()


class ComponentRegistry:
    """Dict-like mapping of tag names to component classes.

    Supports:
        - registry.register("card", Card)
        - @registry.component("card") / @registry.component()
        - registry["card"], registry.get("card"), "card" in registry
    """

    __slots__ = ("_components",)

    def __init__(self, components: dict[str, type[Component]] | None = None):
        self._components: dict[str, type[Component]] = dict(components or {})

    def register(self, name: str, cls: type[Component]) -> None:
        if not (isinstance(cls, type) and issubclass(cls, Component)):
            raise TypeError(f"{cls!r} is not a Component subclass")
        new = self._components.copy()
        new[name] = cls
        self._components = new

    def component(self, name: str | None = None) -> Callable[[_C], _C]:
        """Class decorator form of register()."""

        def decorator(cls: _C) -> _C:
            self.register(name or tag_name_for(cls), cls)
            return cls

        return decorator

    def get_component(self, name: str) -> type[Component]:
        """Resolve ``name``.

        Raises:
            UnknownComponentError: If nothing is registered under ``name``
        """
        try:
            return self._components[name]
        except KeyError:
            raise UnknownComponentError(name, frozenset(self._components)) from None

    __getitem__ = get_component

    def get(self, name: str, default: type[Component] | None = None) -> type[Component] | None:
        return self._components.get(name, default)

    def update(self, mapping: dict[str, type[Component]]) -> None:
        new = self._components.copy()
        new.update(mapping)
        self._components = new

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def __iter__(self) -> Iterator[str]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def keys(self) -> KeysView[str]:
        return self._components.keys()

    def items(self) -> ItemsView[str, type[Component]]:
        return self._components.items()
