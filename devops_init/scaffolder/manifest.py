"""``package.json`` generation.

The manifest template is parsed as JSON, the project fields are filled in,
and the database tooling is stripped when the project opts out of a
database.  Key order from the template is preserved.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from devops_init.config import ProjectConfig

# section -> keys removed when ``features.database`` is false
DATABASE_ENTRIES: dict[str, tuple[str, ...]] = {
    "dependencies": ("drizzle-orm", "@neondatabase/serverless"),
    "devDependencies": ("drizzle-kit",),
    "scripts": ("db:generate", "db:migrate", "db:studio"),
}


def build_manifest(template: dict[str, Any], config: ProjectConfig) -> dict[str, Any]:
    """Return a new manifest dict for *config*; *template* is left untouched."""
    manifest = copy.deepcopy(template)

    manifest["name"] = config.name
    manifest["description"] = config.description
    manifest["author"] = config.author_line
    manifest.setdefault("repository", {"type": "git"})["url"] = config.repository_url
    manifest.setdefault("bugs", {})["url"] = config.bugs_url
    manifest["homepage"] = config.homepage

    if not config.features.database:
        for section, keys in DATABASE_ENTRIES.items():
            entries = manifest.get(section, {})
            for key in keys:
                entries.pop(key, None)

    return manifest


def render_manifest(template_text: str, config: ProjectConfig) -> str:
    """Parse *template_text* and serialise the filled-in manifest.

    Raises:
        json.JSONDecodeError: If the template is not valid JSON.
    """
    template = json.loads(template_text)
    manifest = build_manifest(template, config)
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
