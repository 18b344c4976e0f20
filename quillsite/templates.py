"""Jinja2 template engine used to render site pages."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2
from jinja2 import Environment, FileSystemLoader, Template, TemplateNotFound, select_autoescape

logger = logging.getLogger(__name__)


class TemplateError(RuntimeError):
    """Raised when a template cannot be found or fails to render."""


class TemplateEngine:
    """Load templates from a single directory and render them with a context."""

    def __init__(self, templates_dir: Path) -> None:
        if not templates_dir.is_dir():
            raise TemplateError(f"Templates directory '{templates_dir}' does not exist.")
        self._templates_dir = templates_dir
        self._environment = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def templates_dir(self) -> Path:
        return self._templates_dir

    def get_template(self, name: str) -> Template:
        try:
            return self._environment.get_template(name)
        except TemplateNotFound as exc:
            raise TemplateError(
                f"Required template '{name}' not found in '{self._templates_dir}'."
            ) from exc
        except jinja2.TemplateError as exc:
            raise TemplateError(f"Template '{name}' could not be loaded: {exc}") from exc

    def render(self, name: str, context: dict[str, Any]) -> str:
        template = self.get_template(name)
        try:
            return template.render(**context)
        except jinja2.TemplateError as exc:
            raise TemplateError(f"Template '{name}' failed to render: {exc}") from exc

    def render_to(self, name: str, context: dict[str, Any], destination: Path) -> Path:
        """Render ``name`` and write it to ``destination``, replacing any existing file."""
        rendered = self.render(name, context)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(rendered, encoding="utf-8")
        logger.debug("Rendered %s -> %s", name, destination)
        return destination
