"""Template loading and rendering for project scaffolding.

Three kinds of templates live under ``devops_init/scaffolder/templates/``:

* **Static templates** (``package.json``, ``.env.example``, Docker and CI
  files) are plain files carrying literal placeholder tokens such as
  ``your-app-name``.  They are read verbatim and resolved with
  :func:`substitute`, which performs ordered literal replacement.
* **Jinja2 templates** (``*.j2``) produce the files whose content is built
  from the project answers (README, Express entry point and server).
* **Fixed files** (``.gitignore``, ``.dockerignore``) are copied as is.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from devops_init.errors import ScaffoldError
from devops_init.utils import write_file


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# Literal substitution
# ---------------------------------------------------------------------------


def substitute(text: str, replacements: Iterable[tuple[str, str]]) -> str:
    """Replace every occurrence of each token, in the given order.

    Order matters when one token is a substring of another: the longer
    pattern must come first or it will never match.
    """
    for token, value in replacements:
        text = text.replace(token, value)
    return text


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Loads static templates and renders Jinja2 templates.

    The renderer resolves every template path relative to a configurable
    template directory, so a user can point ``--template-dir`` at a copy of
    the bundled templates and customise them.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["capitalize_first"] = _capitalize_first_filter

    # -- Static templates --------------------------------------------------

    def path_of(self, template_path: str) -> Path:
        """Return the absolute path of a template, failing if it is missing."""
        path = self.template_dir / template_path
        if not path.is_file():
            raise ScaffoldError(f"template not found: {path}")
        return path

    def load(self, template_path: str) -> str:
        """Return the raw text of a static template."""
        return self.path_of(template_path).read_text(encoding="utf-8")

    async def copy_to_file(self, template_path: str, output_path: str | Path) -> Path:
        """Copy a static template byte-for-byte to *output_path*."""
        source = self.path_of(template_path)
        out = Path(output_path)
        await asyncio.to_thread(_copy_file, source, out)
        return out

    # -- Jinja2 rendering --------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single Jinja2 template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"app/server.js.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        self.path_of(template_path)
        template = self.env.get_template(template_path)
        return template.render(**context)

    # -- File output (async) -----------------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a Jinja2 template and write the result to *output_path*.

        Parent directories are created automatically and an existing file is
        overwritten.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(write_file, out, content)
        return out

    async def write_text(self, output_path: str | Path, content: str) -> Path:
        """Write already-resolved content to *output_path*."""
        out = Path(output_path)
        await asyncio.to_thread(write_file, out, content)
        return out


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _capitalize_first_filter(value: str) -> str:
    """Upper-case the first character only (``postgresql`` -> ``Postgresql``)."""
    return value[:1].upper() + value[1:]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _copy_file(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)
