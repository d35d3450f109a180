"""Template rendering and source formatting for generated mocks."""

from __future__ import annotations

from .formatter import DEFAULT_COMMAND, GoImportsFormatter
from .renderer import BUNDLED_TEMPLATES, DEFAULT_TEMPLATE, TemplateRenderer

__all__ = [
    "BUNDLED_TEMPLATES",
    "DEFAULT_COMMAND",
    "DEFAULT_TEMPLATE",
    "GoImportsFormatter",
    "TemplateRenderer",
]
