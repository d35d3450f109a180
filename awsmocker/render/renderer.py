"""Renders aggregated packages through the Jinja2 mock template."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound

from ..errors import RenderFailure
from ..models import TemplateData
from ..naming import NamingResolver

DEFAULT_TEMPLATE = "mock.go.j2"
BUNDLED_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"


class TemplateRenderer:
    """Wraps a Jinja2 environment preloaded with the naming helpers."""

    def __init__(
        self,
        naming: NamingResolver | None = None,
        templates_dir: Path | None = None,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> None:
        self.naming = naming or NamingResolver()
        self.templates_dir = templates_dir
        self.template_name = template_name
        self._env = self._create_env(templates_dir)

    def render(self, data: TemplateData) -> str:
        try:
            template = self._env.get_template(self.template_name)
        except TemplateNotFound as exc:
            raise RenderFailure(f"template {self.template_name!r} not found") from exc
        except TemplateError as exc:
            raise RenderFailure(f"unable to parse template {self.template_name!r}: {exc}") from exc

        try:
            return template.render(
                client_default=data.client_default,
                package_name=data.package_name,
                packages=data.packages,
            )
        except TemplateError as exc:
            raise RenderFailure(f"unable to render template {self.template_name!r}: {exc}") from exc

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        if str(BUNDLED_TEMPLATES) not in directories:
            directories.append(str(BUNDLED_TEMPLATES))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        helpers = self.naming.template_helpers()
        env.filters.update(helpers)
        env.globals.update(helpers)
        return env


__all__ = ["BUNDLED_TEMPLATES", "DEFAULT_TEMPLATE", "TemplateRenderer"]
