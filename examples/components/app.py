"""Reusable components -- default content, named slots and fallbacks.

Component classes live in this module, so their templates follow the
naming convention: ``Card`` renders ``~/Card.html``, where ``~`` is the
templates directory. ``Alert`` opts out with an explicit route.

The page passes each card a body (default content) and, for some cards,
a footer slot. Card.html renders a fallback when the body is blank and
skips the footer when the slot is empty.

Run:
    python app.py
"""

from pathlib import Path

from kumi import Component, JinjaHost

templates_dir = Path(__file__).parent / "templates"
host = JinjaHost.from_directory(templates_dir, trim_blocks=True, lstrip_blocks=True)


@host.registry.component()
class PageLayout(Component):
    title: str = ""


@host.registry.component()
class Card(Component):
    title: str = ""


@host.registry.component()
class Alert(Component):
    template = "widgets/alert.html"
    level: str = "info"


output = host.render_page(
    "page.html",
    title="Component Demo",
    features=[
        {"name": "Slots", "desc": "Named fragments routed to the enclosing component",
         "link": "/docs/slots"},
        {"name": "Fallbacks", "desc": "Templates can test for blank content", "link": None},
        {"name": "Isolation", "desc": "", "link": "/docs/render-pass"},
    ],
    warning_message="This is an alpha release. API may change.",
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
