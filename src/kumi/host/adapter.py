"""Rendering host adapter.

The rendering host turns a template route and a view-model into markup.
kumi never evaluates templates itself; it only talks to a host through
the RenderingHost protocol. JinjaHost is the bundled implementation on
top of a ``jinja2.Environment``.

Error translation:
    - ``jinja2.TemplateNotFound`` for the template the route names
      -> TemplateNotFound (naming-convention mismatch)
    - any other failure, including a missing template pulled in by an
      ``{% include %}`` inside an existing template
      -> RenderError, with the original exception chained
    - kumi's own errors raised by nested components pass through as-is,
      so the innermost diagnosis reaches the caller

Detection compares the exception's template names with the requested
name; it never inspects message text.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from os import PathLike
from typing import Any, Protocol, runtime_checkable

import jinja2
from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from kumi.components.routes import template_name
from kumi.exceptions import ComponentError, RenderError, TemplateNotFound
from kumi.host.extension import ComponentExtension
from kumi.host.registry import ComponentRegistry
from kumi.render_pass import RenderPass, async_render_pass, render_pass
from kumi.stack import get_stack, has_stack
from kumi.utils.constants import MODEL_VARIABLE, ROOT_MARKER

logger = logging.getLogger(__name__)


@runtime_checkable
class RenderingHost(Protocol):
    """Anything that can render a route with a view-model."""

    def render(self, route: str, model: object) -> str: ...

    async def render_async(self, route: str, model: object) -> str: ...


def _missing_names(exc: jinja2.TemplateNotFound) -> list[str]:
    names = getattr(exc, "templates", None)
    if names:
        return [str(n) for n in names]
    return [str(exc.name)]


class JinjaHost:
    """RenderingHost backed by a Jinja2 environment.

    Installs ComponentExtension on the environment, so templates rendered
    by this host can use ``{% component %}`` and ``{% slot %}`` tags.

    The view-model is bound to ``model`` in the template context. A
    Component's props are also bound as top-level variables, so both
    ``{{ model.title }}`` and ``{{ title }}`` work.

    Example:
            >>> host = JinjaHost.from_directory("templates/")
            >>> @host.registry.component("card")
            ... class Card(Component):
            ...     template = "card.html"
            ...     title: str = ""
            >>> host.render_page("index.html", user=user)
    """

    def __init__(
        self,
        env: Environment | None = None,
        *,
        loader: BaseLoader | None = None,
        registry: ComponentRegistry | None = None,
        root_marker: str = ROOT_MARKER,
        model_variable: str = MODEL_VARIABLE,
        max_depth: int | None = None,
        **env_options: Any,
    ):
        if env is None:
            env_options.setdefault("autoescape", select_autoescape(default_for_string=True))
            env = Environment(loader=loader, **env_options)
        elif loader is not None or env_options:
            raise TypeError("Pass either an Environment or loader/options, not both")
        if ComponentExtension.identifier not in env.extensions:
            env.add_extension(ComponentExtension)
        if registry is not None:
            env.component_registry = registry  # type: ignore[attr-defined]
        self.env = env
        self.root_marker = root_marker
        self.model_variable = model_variable
        self.max_depth = max_depth

    @classmethod
    def from_directory(
        cls,
        paths: str | PathLike[str] | list[str | PathLike[str]],
        **kwargs: Any,
    ) -> JinjaHost:
        """Host loading templates from one or more directories."""
        return cls(loader=FileSystemLoader(paths), **kwargs)

    @property
    def registry(self) -> ComponentRegistry:
        return self.env.component_registry  # type: ignore[attr-defined]

    def template_name(self, route: str) -> str:
        return template_name(route, self.root_marker)

    def context_for(self, model: object) -> dict[str, Any]:
        """Template context for rendering ``model``."""
        context: dict[str, Any] = {}
        props = getattr(model, "props", None)
        if callable(props):
            context.update(props())
        context[self.model_variable] = model
        return context

    # -- RenderingHost ------------------------------------------------------

    def render(self, route: str, model: object) -> str:
        name = self.template_name(route)
        try:
            return self.env.get_template(name).render(self.context_for(model))
        except ComponentError:
            raise
        except jinja2.TemplateNotFound as exc:
            raise self._translate_missing(route, name, model, exc) from exc
        except Exception as exc:
            raise RenderError(route, exc, component=_component_name(model)) from exc

    async def render_async(self, route: str, model: object) -> str:
        if not self.env.is_async:
            return self.render(route, model)
        name = self.template_name(route)
        try:
            template = self.env.get_template(name)
            return await template.render_async(self.context_for(model))
        except ComponentError:
            raise
        except jinja2.TemplateNotFound as exc:
            raise self._translate_missing(route, name, model, exc) from exc
        except Exception as exc:
            raise RenderError(route, exc, component=_component_name(model)) from exc

    def _translate_missing(
        self, route: str, name: str, model: object, exc: jinja2.TemplateNotFound
    ) -> ComponentError:
        component = _component_name(model)
        if name in _missing_names(exc):
            return TemplateNotFound(route, name, component=component)
        return RenderError(route, exc, component=component)

    # -- top-level pages ------------------------------------------------------

    def render_page(
        self,
        page: str,
        context: Mapping[str, Any] | None = None,
        /,
        *,
        request: Any = None,
        items: Mapping[str, object] | None = None,
        **variables: Any,
    ) -> Markup:
        """Render template ``page`` inside a fresh render pass.

        Args:
            page: Loader-relative template name or marker route
            context: Template variables
            request: Framework request object exposed on the pass
            items: Initial pass-scoped items
            **variables: More template variables

        ``request`` and ``items`` are reserved keywords. Pass template
        variables with those names through ``context``:

            >>> host.render_page("p.html", {"request": req}, name="Ada")
        """
        variables = {**(context or {}), **variables}
        template_id = self.template_name(page)
        with render_pass(self, request=request, max_depth=self.max_depth, **(items or {})) as rp:
            try:
                html = self.env.get_template(template_id).render(variables)
            except ComponentError:
                raise
            except jinja2.TemplateNotFound as exc:
                raise self._translate_missing(page, template_id, None, exc) from exc
            except Exception as exc:
                raise RenderError(page, exc) from exc
            _check_balance(rp)
        return Markup(html)

    async def render_page_async(
        self,
        page: str,
        context: Mapping[str, Any] | None = None,
        /,
        *,
        request: Any = None,
        items: Mapping[str, object] | None = None,
        **variables: Any,
    ) -> Markup:
        """Async twin of render_page(); requires ``enable_async=True``."""
        variables = {**(context or {}), **variables}
        template_id = self.template_name(page)
        async with async_render_pass(
            self, request=request, max_depth=self.max_depth, **(items or {})
        ) as rp:
            try:
                html = await self.env.get_template(template_id).render_async(variables)
            except ComponentError:
                raise
            except jinja2.TemplateNotFound as exc:
                raise self._translate_missing(page, template_id, None, exc) from exc
            except Exception as exc:
                raise RenderError(page, exc) from exc
            _check_balance(rp)
        return Markup(html)


def _component_name(model: object) -> str | None:
    if model is None:
        return None
    return getattr(model, "component_name", type(model).__name__)


def _check_balance(rp: RenderPass) -> None:
    if not has_stack(rp):
        return
    stack = get_stack(rp)
    if not stack.balanced:
        logger.warning(
            "pass %s finished with an unbalanced ancestor stack: %r (%d pushes, %d pops)",
            rp.pass_id,
            stack,
            stack.pushes,
            stack.pops,
        )
