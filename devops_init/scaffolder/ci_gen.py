"""GitHub Actions workflow generation."""

from __future__ import annotations

from pathlib import Path

from devops_init.config import ProjectConfig

from .templates import TemplateRenderer, substitute

WORKFLOWS: tuple[str, ...] = (
    "lint-and-format.yml",
    "tests.yml",
    "docker-build-and-push.yml",
)

APP_NAME_TOKEN = "your-app-name"
IMAGE_TOKEN = "${{ secrets.DOCKER_USERNAME }}/your-app-name"


class WorkflowGenerator:
    """Writes the CI workflows into ``.github/workflows/``."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def resolve(self, workflow: str, config: ProjectConfig) -> str:
        """Return the workflow text with the project name filled in."""
        text = self.renderer.load(f"ci-cd/{workflow}")
        return substitute(
            text,
            [
                (IMAGE_TOKEN, f"${{{{ secrets.DOCKER_USERNAME }}}}/{config.name}"),
                (APP_NAME_TOKEN, config.name),
            ],
        )

    async def generate_all(self, output_dir: Path, config: ProjectConfig) -> list[Path]:
        """Write every workflow and return the written paths."""
        workflows_dir = output_dir / ".github" / "workflows"
        written: list[Path] = []
        for workflow in WORKFLOWS:
            content = self.resolve(workflow, config)
            written.append(await self.renderer.write_text(workflows_dir / workflow, content))
        return written
