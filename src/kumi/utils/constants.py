"""Shared defaults for kumi.

Every value here can be overridden per host or per render pass through
constructor keyword arguments; these are only the fallbacks.
"""

from __future__ import annotations

# Replaces the owning root package in a component's fully-qualified name
# when deriving its template route (``myapp.ui.Card`` -> ``~/ui/Card.html``).
ROOT_MARKER: str = "~"

# Appended to convention-derived routes. Explicit routes are used verbatim.
TEMPLATE_SUFFIX: str = ".html"

# Key under which the ancestor stack lives in a render pass's item bag.
STACK_KEY: str = "kumi.ancestor_stack"

# 50 is deep enough for any real component tree while catching
# self-recursive components early.
COMPONENT_DEPTH_LIMIT: int = 50

# Template variable the host binds the view-model to.
MODEL_VARIABLE: str = "model"

# Jinja2 tag names for component usage and slot markers.
COMPONENT_TAG: str = "component"
SLOT_TAG: str = "slot"
