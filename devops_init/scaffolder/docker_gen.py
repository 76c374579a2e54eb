"""Docker asset generation.

Copies the ``Dockerfile`` verbatim, writes the dev and prod Compose files
with the project name as the ``PROJECT_NAME`` default, and writes the fixed
``.dockerignore``.
"""

from __future__ import annotations

from pathlib import Path

from devops_init.config import ProjectConfig

from .templates import TemplateRenderer, substitute

PROJECT_NAME_TOKEN = "${PROJECT_NAME:-app}"


class DockerGenerator:
    """Generates the Docker assets of the scaffolded project."""

    # Template name -> output file name
    _COMPOSE_FILES: dict[str, str] = {
        "docker/docker-compose.dev.yml": "docker-compose.dev.yml",
        "docker/docker-compose.prod.yml": "docker-compose.prod.yml",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate_all(self, output_dir: Path, config: ProjectConfig) -> list[Path]:
        """Generate every Docker asset into *output_dir*.

        Returns:
            Written paths in order: ``Dockerfile``, the Compose files,
            ``.dockerignore``.
        """
        written = [await self.generate_dockerfile(output_dir)]
        written.extend(await self.generate_compose_files(output_dir, config))
        written.append(await self.generate_dockerignore(output_dir))
        return written

    async def generate_dockerfile(self, output_dir: Path) -> Path:
        return await self.renderer.copy_to_file("docker/Dockerfile", output_dir / "Dockerfile")

    async def generate_compose_files(
        self,
        output_dir: Path,
        config: ProjectConfig,
    ) -> list[Path]:
        """Write ``docker-compose.dev.yml`` and ``docker-compose.prod.yml``.

        Every ``${PROJECT_NAME:-app}`` in the templates becomes
        ``${PROJECT_NAME:-<name>}``, so the environment variable still wins
        when it is set.
        """
        replacement = f"${{PROJECT_NAME:-{config.name}}}"
        written: list[Path] = []
        for template_name, output_name in self._COMPOSE_FILES.items():
            content = substitute(
                self.renderer.load(template_name),
                [(PROJECT_NAME_TOKEN, replacement)],
            )
            path = await self.renderer.write_text(output_dir / output_name, content)
            written.append(path)
        return written

    async def generate_dockerignore(self, output_dir: Path) -> Path:
        return await self.renderer.copy_to_file("docker/dockerignore", output_dir / ".dockerignore")
