"""Slot content storage for component nodes.

A component receives child markup from its usage site in two ways:
unnamed default content, and named slots filled by slot markers nested
inside the usage block. Both are captured as ``Markup`` fragments, which
the host treats as already rendered and never escapes again.

Blankness:
    ``None``, ``""`` and whitespace-only fragments are all "blank". A
    template asking whether it needs fallback content gets True for any
    of them. Blank is different from undeclared: ``SlotStore.get`` on a
    declared-but-blank slot returns the (empty) fragment, while an
    undeclared name raises SlotNotFound.
"""

from __future__ import annotations

from collections.abc import Iterator

from markupsafe import Markup

from kumi.exceptions import SlotNotFound


def is_blank(fragment: str | None) -> bool:
    """True for None, empty, or whitespace-only content."""
    if fragment is None:
        return True
    return not fragment.strip()


def to_fragment(content: object) -> Markup:
    """Coerce captured child output to a Markup fragment.

    Child output is produced by the traversal (already rendered markup),
    so plain strings are trusted rather than escaped.
    """
    if content is None:
        return Markup("")
    if isinstance(content, Markup):
        return content
    return Markup(str(content))


class SlotStore:
    """Named fragments written by descendant slot markers.

    Supports:
        - store.fill("header", content)
        - store.get("header")        # SlotNotFound if never filled
        - "header" in store
        - store.is_empty("header")   # True when missing or blank

    A later fill of the same name replaces the earlier one, matching a
    usage site that repeats a slot marker.
    """

    __slots__ = ("_fragments", "_owner")

    def __init__(self, owner: str | None = None):
        self._fragments: dict[str, Markup] = {}
        self._owner = owner

    def fill(self, name: str, content: object) -> None:
        self._fragments[name] = to_fragment(content)

    def get(self, name: str) -> Markup:
        try:
            return self._fragments[name]
        except KeyError:
            raise SlotNotFound(
                name, frozenset(self._fragments), component=self._owner
            ) from None

    def is_empty(self, name: str) -> bool:
        return is_blank(self._fragments.get(name))

    def names(self) -> frozenset[str]:
        return frozenset(self._fragments)

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fragments)

    def __repr__(self) -> str:
        return f"SlotStore({sorted(self._fragments)!r})"
