"""Async rendering -- components that await data, pages rendered concurrently.

With ``enable_async=True`` Jinja2 awaits coroutine results inside
templates, so a component method can be ``async def``. Each page gets
its own render pass, so pages rendered concurrently with
``asyncio.gather`` never see each other's components.

Run:
    python app.py
"""

import asyncio

from jinja2 import DictLoader

from kumi import Component, JinjaHost

USERS = {
    "ada": {"name": "Ada Lovelace", "role": "admin"},
    "alan": {"name": "Alan Turing", "role": "editor"},
    "grace": {"name": "Grace Hopper", "role": "viewer"},
}

TEMPLATES = {
    "profile.html": (
        '<div class="profile">'
        "{% set user = model.load() %}"
        "<h2>{{ user.name }}</h2>"
        '{% component "role-badge", role=user.role %}{% endcomponent %}'
        "{{ model.default_content }}"
        "</div>"
    ),
    "role_badge.html": (
        '<span class="badge">{{ role }}</span>'
        "<small>in {{ model.parent.component_name }}</small>"
    ),
    "page.html": (
        '{% component "profile", user_id=user_id %}'
        "<p>Signed in as {{ user_id }}</p>"
        "{% endcomponent %}"
    ),
}

host = JinjaHost(loader=DictLoader(TEMPLATES), enable_async=True)


@host.registry.component()
class Profile(Component):
    template = "profile.html"
    user_id: str = ""

    async def load(self) -> dict:
        """Simulate a database lookup."""
        await asyncio.sleep(0.01)
        return USERS[self.user_id]


@host.registry.component()
class RoleBadge(Component):
    template = "role_badge.html"
    role: str = ""


async def render_all() -> list[str]:
    return await asyncio.gather(
        *(host.render_page_async("page.html", user_id=user_id) for user_id in USERS)
    )


pages = asyncio.run(render_all())
output = "\n".join(pages)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
