from __future__ import annotations

from pathlib import Path
from textwrap import dedent
from typing import Protocol

import markdown
from jinja2 import Environment as TemplateEnvironment
from jinja2 import FileSystemLoader, Template, TemplateError, select_autoescape

from sitedeploy.core.config import SiteConfig
from sitedeploy.core.environment import Environment
from sitedeploy.core.errors import RenderError


class Renderer(Protocol):
    def render(self, content: str, environment: Environment, extra_classes: str) -> str:
        """Turn raw page content into the final page, or raise RenderError."""
        ...


DEFAULT_TEMPLATE = dedent(
    """
    <!doctype html>
    <html lang="en">
    <head>
      <meta charset="utf-8">
      <meta name="viewport" content="width=device-width, initial-scale=1">
      <base href="{{ root_url }}/">
    </head>
    <body>
      <main class="{{ classes }}">
    {{ body | safe }}
      </main>
    </body>
    </html>
    """
).strip() + "\n"

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


class MarkdownRenderer:
    """Python-Markdown body wrapped in a Jinja2 page template."""

    def __init__(self, config: SiteConfig, template_path: str | Path | None = None):
        self.config = config
        template_path = template_path or config.template_path
        self.template = _load_template(Path(template_path) if template_path else None)

    def render(self, content: str, environment: Environment, extra_classes: str) -> str:
        md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
        try:
            body = md.convert(content)
            return self.template.render(
                body=body,
                root_url=self.config.root_url(environment).rstrip("/"),
                environment=environment.value,
                classes=" ".join(["content", *extra_classes.split()]),
            )
        except TemplateError as exc:
            raise RenderError(f"template rendering failed: {exc}") from exc


def _load_template(path: Path | None) -> Template:
    if path is None:
        env = TemplateEnvironment(autoescape=select_autoescape(default=True))
        return env.from_string(DEFAULT_TEMPLATE)
    try:
        env = TemplateEnvironment(
            loader=FileSystemLoader(str(path.parent)),
            autoescape=select_autoescape(default=True),
        )
        return env.get_template(path.name)
    except TemplateError as exc:
        raise RenderError(f"could not load template '{path}': {exc}") from exc


__all__ = ["Renderer", "MarkdownRenderer", "DEFAULT_TEMPLATE"]
