"""Hello World -- the simplest kumi example.

One component, one page, templates held in memory. The page uses the
component tag; the component's template prints its prop and the body
it was given.

Run:
    python app.py
"""

from jinja2 import DictLoader

from kumi import Component, JinjaHost

host = JinjaHost(
    loader=DictLoader(
        {
            "greeting.html": "<p>Hello, {{ name }}! {{ model.default_content }}</p>",
            "page.html": (
                '{% component "greeting", name=name %}Welcome back.{% endcomponent %}'
            ),
        }
    )
)


@host.registry.component("greeting")
class Greeting(Component):
    template = "greeting.html"
    name: str = "World"


output = host.render_page("page.html", name="World")


def main() -> None:
    print(output)
    print()

    for name in ["Kumi", "Jinja", "Python"]:
        print(host.render_page("page.html", name=name))


if __name__ == "__main__":
    main()
