"""Jinja2 extension for component usage in templates.

Syntax:
    {% component "card", title="Hello", elevated=true %}
        {% slot "footer" %}<a href="/more">More</a>{% endslot %}
        Body text becomes the card's default content.
    {% endcomponent %}

The first argument is a registered tag name or a Component class.
Keyword arguments bind to the component's props. Commas between
arguments are optional. Attribute names are Jinja2 identifiers, so a
prop like ``data_tone`` is written with its underscore here; dashed
names only reach components through element() or plain keyword
unpacking. ``caller`` is reserved for the tag body.

Each tag compiles to a call block: Jinja2 hands the extension a
``caller`` that renders the tag's body. The extension builds a node,
initializes it against the current render pass and processes it with
``caller`` as the child-content capture, which is what makes children
finish (and slot markers commit) before the component's own template
is rendered.
"""

from __future__ import annotations

from typing import Any

from jinja2 import nodes
from jinja2.ext import Extension
from jinja2.parser import Parser

from kumi.components.node import Component, slot_marker
from kumi.components.pipeline import run, run_async
from kumi.exceptions import UnknownComponentError
from kumi.host.registry import ComponentRegistry
from kumi.render_pass import get_render_pass_required
from kumi.utils.constants import COMPONENT_TAG, SLOT_TAG


class ComponentExtension(Extension):
    """Adds ``{% component %}`` and ``{% slot %}`` tags.

    Stores a ComponentRegistry on the environment as
    ``environment.component_registry`` unless one is already set.
    """

    tags = {COMPONENT_TAG, SLOT_TAG}

    def __init__(self, environment: Any):
        super().__init__(environment)
        environment.extend(component_registry=ComponentRegistry())

    def parse(self, parser: Parser) -> nodes.Node:
        token = next(parser.stream)
        lineno = token.lineno
        if token.value == SLOT_TAG:
            name = parser.parse_expression()
            body = parser.parse_statements((f"name:end{SLOT_TAG}",), drop_needle=True)
            call = self.call_method("_render_slot", [name], lineno=lineno)
            return nodes.CallBlock(call, [], [], body).set_lineno(lineno)

        target = parser.parse_expression()
        attributes = self._parse_attributes(parser)
        body = parser.parse_statements((f"name:end{COMPONENT_TAG}",), drop_needle=True)
        call = self.call_method("_render_component", [target], attributes, lineno=lineno)
        return nodes.CallBlock(call, [], [], body).set_lineno(lineno)

    def _parse_attributes(self, parser: Parser) -> list[nodes.Keyword]:
        attributes: list[nodes.Keyword] = []
        while parser.stream.current.type != "block_end":
            parser.stream.skip_if("comma")
            key = parser.stream.expect("name")
            if key.value == "caller":
                parser.fail(
                    "'caller' is reserved for the component body and cannot be an attribute",
                    key.lineno,
                )
            parser.stream.expect("assign")
            value = parser.parse_expression()
            attributes.append(nodes.Keyword(key.value, value, lineno=key.lineno))
        return attributes

    def _resolve(self, target: object) -> type[Component]:
        if isinstance(target, str):
            registry: ComponentRegistry = self.environment.component_registry  # type: ignore[attr-defined]
            return registry.get_component(target)
        if isinstance(target, type) and issubclass(target, Component):
            return target
        raise UnknownComponentError(repr(target))

    def _render_component(self, target: object, /, caller: Any, **attributes: Any) -> Any:
        rp = get_render_pass_required()
        node = self._resolve(target)(**attributes)
        if self.environment.is_async:
            return run_async(node, rp, caller)
        return run(node, rp, caller)

    def _render_slot(self, name: str, caller: Any) -> Any:
        rp = get_render_pass_required()
        node = slot_marker(str(name))
        if self.environment.is_async:
            return run_async(node, rp, caller)
        return run(node, rp, caller)
