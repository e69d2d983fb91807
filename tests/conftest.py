"""Pytest configuration and fixtures for kumi tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

import pytest
from jinja2 import DictLoader

from kumi import (
    ComponentNode,
    JinjaHost,
    RenderPass,
    get_render_pass_required,
    get_stack,
    render_pass,
)

from .components import Badge, Inner, JinjaCard, JinjaLayout, JinjaPanel, Outer

Template = Callable[[Any], str]


@dataclass
class RenderCall:
    """One host render as observed by RecordingHost."""

    route: str
    model: Any
    stack: tuple[ComponentNode, ...]
    parent: ComponentNode | None
    slots: frozenset[str]


def default_template(model: Any) -> str:
    """``<Name>default content</Name>``."""
    name = model.component_name
    return f"<{name}>{model.default_content or ''}</{name}>"


class RecordingHost:
    """Fake rendering host that records every call it receives.

    ``templates`` maps routes to callables taking the view-model. Routes
    with no entry use default_template().
    """

    def __init__(self, templates: dict[str, Template] | None = None):
        self.templates = dict(templates or {})
        self.calls: list[RenderCall] = []

    def render(self, route: str, model: Any) -> str:
        rp = get_render_pass_required()
        self.calls.append(
            RenderCall(
                route=route,
                model=model,
                stack=get_stack(rp).snapshot(),
                parent=model.parent,
                slots=model.slots.names(),
            )
        )
        return self.templates.get(route, default_template)(model)

    async def render_async(self, route: str, model: Any) -> str:
        # Yield to the loop so concurrent passes interleave.
        await asyncio.sleep(0)
        return self.render(route, model)

    def routes(self) -> list[str]:
        return [call.route for call in self.calls]


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def rp(host: RecordingHost) -> Iterator[RenderPass]:
    """A render pass on the recording host, bound for the test body."""
    with render_pass(host) as bound:
        yield bound


TEMPLATES = {
    "card.html": (
        '<div class="card"><h2>{{ title }}</h2>'
        "{% if model.is_default_content_empty %}<p>Nothing here</p>"
        "{% else %}{{ model.default_content }}{% endif %}"
        '{% if not model.is_slot_empty("footer") %}'
        '<footer>{{ model.get_slot("footer") }}</footer>{% endif %}</div>'
    ),
    "panel.html": "<section><h1>{{ heading }}</h1>{{ model.default_content }}</section>",
    "layout.html": (
        "<body><header>{{ model.render_slot('header') }}</header>"
        "<main>{{ model.default_content }}</main></body>"
    ),
    "badge.html": '<span class="badge badge-{{ data_tone }}">{{ label }}</span>',
    "outer.html": (
        "<outer>{{ model.chain() | join('/') }}"
        "{% component 'inner' %}x{% endcomponent %}</outer>"
    ),
    "inner.html": (
        "<inner parent={{ model.parent.component_name }}>"
        "{{ model.chain() | join('/') }}</inner>"
    ),
}


@pytest.fixture
def templates() -> dict[str, str]:
    return dict(TEMPLATES)


@pytest.fixture
def jinja_host(templates: dict[str, str]) -> JinjaHost:
    """JinjaHost over an in-memory loader with the sample components registered."""
    host = JinjaHost(loader=DictLoader(templates))
    register_samples(host)
    return host


@pytest.fixture
def async_jinja_host(templates: dict[str, str]) -> JinjaHost:
    host = JinjaHost(loader=DictLoader(templates), enable_async=True)
    register_samples(host)
    return host


def register_samples(host: JinjaHost) -> None:
    host.registry.update(
        {
            "card": JinjaCard,
            "panel": JinjaPanel,
            "layout": JinjaLayout,
            "badge": Badge,
            "outer": Outer,
            "inner": Inner,
        }
    )

