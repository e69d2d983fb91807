"""Markup trees -- composing components from Python with a custom host.

kumi only needs a rendering host: anything with ``render(route, model)``
and ``render_async(route, model)``. Here the host is a dict of Python
functions, and the page is a tree built with ``element()`` and
``slot()`` instead of template tags.

Run:
    python app.py
"""

from markupsafe import Markup, escape

from kumi import Component, element, render_tree, slot


class Nav(Component):
    template = "nav"


class Link(Component):
    template = "link"
    href: str = "#"
    active: bool = False


def render_nav(nav: Nav) -> str:
    brand = nav.get_slot("brand") if not nav.is_slot_empty("brand") else "Home"
    return f'<nav><span class="brand">{brand}</span>{nav.default_content}</nav>'


def render_link(link: Link) -> str:
    css = ' class="active"' if link.active else ""
    return f'<a href="{escape(link.href)}"{css}>{link.default_content}</a>'


class FunctionHost:
    """Rendering host backed by plain functions keyed by route."""

    def __init__(self, templates):
        self.templates = templates
        self.rendered: list[str] = []

    def render(self, route: str, model: object) -> str:
        self.rendered.append(route)
        return self.templates[route](model)

    async def render_async(self, route: str, model: object) -> str:
        return self.render(route, model)


host = FunctionHost({"nav": render_nav, "link": render_link})

page = element(
    Nav,
    slot("brand", "<b>kumi</b>"),
    element(Link, "Docs", href="/docs", active=True),
    element(Link, "Source", href="/src?a=1&b=2"),
)

output: Markup = render_tree(page, host)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
