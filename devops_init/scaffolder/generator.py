"""Main scaffolding orchestrator.

Takes a frozen ``ProjectConfig`` and writes a Node.js/Express service
skeleton into an output directory: the directory tree, ``package.json``,
environment files, Docker assets, CI workflows, the Express entry point and
server, ``.gitignore`` and ``README.md``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from devops_init.config import FeatureFlags, ProjectConfig
from devops_init.utils import ensure_dir, print_created

from .ci_gen import WorkflowGenerator
from .docker_gen import DockerGenerator
from .manifest import render_manifest
from .templates import TemplateRenderer, substitute


# ---------------------------------------------------------------------------
# Directory layout
# ---------------------------------------------------------------------------

BASE_DIRECTORIES: tuple[str, ...] = (
    "src",
    "src/config",
    "src/controllers",
    "src/middleware",
    "src/models",
    "src/routes",
    "src/services",
    "src/utils",
    "src/validations",
    "tests",
    "tests/unit",
    "tests/integration",
    "logs",
    "scripts",
)

ENV_APP_NAME_TOKEN = "your-app-name"
ENV_DOCKER_USER_TOKEN = "your-docker-username"


def directory_layout(features: FeatureFlags) -> list[str]:
    """Return the directories to create, in creation order."""
    dirs = list(BASE_DIRECTORIES)
    if features.docker:
        dirs.append("nginx")
    if features.cicd:
        dirs.extend([".github", ".github/workflows"])
    return dirs


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Materializes a project skeleton from a ``ProjectConfig``.

    Every step runs one at a time in a fixed order and overwrites whatever
    is already on disk; nothing is merged and nothing is rolled back if a
    write fails halfway.
    """

    def __init__(
        self,
        config: ProjectConfig,
        template_dir: str | Path | None = None,
    ) -> None:
        self.config = config
        self.renderer = TemplateRenderer(template_dir)
        self.docker_gen = DockerGenerator(self.renderer)
        self.workflow_gen = WorkflowGenerator(self.renderer)

    # -- Public API --------------------------------------------------------

    async def create_directories(self, output_dir: str | Path) -> list[str]:
        """Create the directory skeleton inside *output_dir*.

        Existing directories are left alone.  Returns the relative paths in
        creation order.
        """
        root = Path(output_dir)
        dirs = directory_layout(self.config.features)
        for d in dirs:
            await asyncio.to_thread(ensure_dir, root / d)
            print_created(f"{d}/")
        return dirs

    async def materialize(self, output_dir: str | Path) -> list[str]:
        """Write every template-derived file into *output_dir*.

        Returns:
            Relative paths of the written files, in write order.
        """
        root = Path(output_dir)
        written: list[Path] = []

        # 1. package.json
        written.append(await self._render_manifest(root))

        # 2. .env.example and .env
        written.extend(await self._render_env_files(root))

        # 3. Docker assets
        if self.config.features.docker:
            written.extend(self._report(root, await self.docker_gen.generate_all(root, self.config)))

        # 4. CI/CD workflows
        if self.config.features.cicd:
            written.extend(self._report(root, await self.workflow_gen.generate_all(root, self.config)))

        # 5. Express entry point and server
        written.extend(await self._render_app(root))

        # 6. .gitignore and README
        written.extend(await self._render_repo_files(root))

        return [p.relative_to(root).as_posix() for p in written]

    async def generate(self, output_dir: str | Path) -> list[str]:
        """Create the directories, then materialize all files."""
        await self.create_directories(output_dir)
        return await self.materialize(output_dir)

    # -- Context building --------------------------------------------------

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the project config."""
        return {
            "project": self.config,
            "project_name": self.config.name,
            "features": self.config.features,
        }

    # -- Individual artifacts ----------------------------------------------

    async def _render_manifest(self, root: Path) -> Path:
        content = render_manifest(self.renderer.load("config/package.json"), self.config)
        path = await self.renderer.write_text(root / "package.json", content)
        print_created("package.json")
        return path

    def resolve_env(self) -> str:
        """Return the environment file content for this project."""
        return substitute(
            self.renderer.load("config/.env.example"),
            [
                (ENV_APP_NAME_TOKEN, self.config.name),
                (ENV_DOCKER_USER_TOKEN, self.config.docker_username),
            ],
        )

    async def _render_env_files(self, root: Path) -> list[Path]:
        """Write ``.env.example`` and ``.env`` with identical content."""
        content = self.resolve_env()
        written: list[Path] = []
        for name in (".env.example", ".env"):
            written.append(await self.renderer.write_text(root / name, content))
            print_created(name)
        return written

    async def _render_app(self, root: Path) -> list[Path]:
        ctx = self._build_context()
        written: list[Path] = []
        for template_name, output_name in (
            ("app/index.js.j2", "src/index.js"),
            ("app/server.js.j2", "src/server.js"),
        ):
            written.append(await self.renderer.render_to_file(template_name, root / output_name, ctx))
            print_created(output_name)
        return written

    async def _render_repo_files(self, root: Path) -> list[Path]:
        gitignore = await self.renderer.copy_to_file("repo/gitignore", root / ".gitignore")
        print_created(".gitignore")
        readme = await self.renderer.render_to_file(
            "repo/README.md.j2", root / "README.md", self._build_context()
        )
        print_created("README.md")
        return [gitignore, readme]

    def _report(self, root: Path, paths: list[Path]) -> list[Path]:
        for path in paths:
            print_created(path.relative_to(root).as_posix())
        return paths
