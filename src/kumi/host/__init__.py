"""Rendering host integration: adapter protocol, Jinja2 host, tags, registry."""

from kumi.host.adapter import JinjaHost, RenderingHost
from kumi.host.extension import ComponentExtension
from kumi.host.registry import ComponentRegistry, tag_name_for

__all__ = [
    "ComponentExtension",
    "ComponentRegistry",
    "JinjaHost",
    "RenderingHost",
    "tag_name_for",
]
