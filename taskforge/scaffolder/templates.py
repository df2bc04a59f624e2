"""Jinja2 rendering for the files the assembler synthesizes.

``TemplateRenderer`` loads ``.j2`` templates from
``taskforge/scaffolder/templates/`` (``frontend/``, ``backend/``, ``root/``
and ``shared/`` subdirectories) and renders them to strings.  Rendering is
pure; writing the tree to disk is the pipeline's job.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from taskforge.utils import pascal_case

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def _slugify(value: str) -> str:
    """Lower-case *value* and collapse anything non-alphanumeric to ``-``."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


class TemplateRenderer:
    """Renders the bundled project templates.

    Contexts carry the project name, description, ports and the generated
    files a template refers to.  A variable missing from the context raises
    ``jinja2.UndefinedError`` rather than rendering as an empty string.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir or _DEFAULT_TEMPLATE_DIR)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(slugify=_slugify, pascal_case=pascal_case)

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render *template_path* (relative to the template directory, e.g.
        ``"root/START.sh.j2"``) with *context*."""
        return self.env.get_template(template_path).render(**context)
