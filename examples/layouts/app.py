"""Layouts -- nested components, named slots and ancestor lookups.

``Button`` has no tone of its own. It asks for the closest enclosing
``Theme`` through its parent links, which are recorded when the button
is initialized inside the theme's usage block. A button rendered into
the layout's sidebar slot still sees the theme, because slot content is
captured inside the layout, which is inside the theme.

Run:
    python app.py
"""

from pathlib import Path

from kumi import Component, JinjaHost

host = JinjaHost.from_directory(
    Path(__file__).parent / "templates", trim_blocks=True, lstrip_blocks=True
)


@host.registry.component()
class Theme(Component):
    tone: str = "light"


@host.registry.component()
class TwoColumn(Component):
    pass


@host.registry.component()
class Button(Component):
    def tone(self) -> str:
        theme = self.closest(Theme)
        return theme.tone if theme is not None else "default"


output = host.render_page("page.html")


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
