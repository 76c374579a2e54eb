"""devops-init run orchestrator.

Runs the strictly linear initialisation sequence:

1. COLLECT     -- ask for the project answers (or load them from a file).
2. DIRECTORIES -- create the directory skeleton.
3. TEMPLATES   -- materialize package.json, env, Docker, CI, app and repo files.
4. INSTALL     -- run the package manager install (best effort).
5. GIT         -- git init / add / commit (best effort).
6. SUMMARY     -- print what was done and the next steps.

An exception in steps 1-3 aborts the run with exit status 1.  Steps 4-5
report failures as warnings and the run still finishes with exit status 0.

Usage::

    devops-init
    devops-init -o ./my-api --skip-install
    python -m devops_init --answers answers.json
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from devops_init.config import ProjectConfig, ToolConfig
from devops_init.installer import StepResult, initialize_git, install_dependencies
from devops_init.prompts import ConfigCollector
from devops_init.scaffolder import ProjectGenerator
from devops_init.utils import (
    console,
    ensure_dir,
    print_banner,
    print_error,
    print_info,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
)


class ProjectInitializer:
    """Drives one initialisation run.

    Attributes:
        tool: Runtime settings (output directory, templates, package manager).
        project: The frozen project answers; ``None`` until collected.
        state: Results accumulated by each step, used for the summary.
    """

    def __init__(
        self,
        tool: ToolConfig,
        project: ProjectConfig | None = None,
        collector: ConfigCollector | None = None,
        save_answers: Path | None = None,
    ) -> None:
        self.tool = tool
        self.project = project
        self.save_answers = save_answers
        self.collector = collector or ConfigCollector()
        self.state: dict[str, Any] = {
            "directories": [],
            "files": [],
            "install": None,
            "git": None,
        }

    async def run(self) -> dict[str, Any]:
        """Run every step in order and return the accumulated state."""
        print_banner(
            "Node.js DevOps Project Initializer",
            "This tool will help you set up a new Node.js project with DevOps best practices.",
        )

        # 1. Collect
        if self.project is None:
            self.project = self.collector.collect()
        project = self.project
        if self.save_answers is not None:
            project.save(self.save_answers)
            print_info(f"  Answers saved to {self.save_answers}")

        generator = ProjectGenerator(project, template_dir=self.tool.template_dir)
        root = ensure_dir(self.tool.output_dir)

        # 2. Directories
        print_step_header("Creating project structure")
        self.state["directories"] = await generator.create_directories(root)

        # 3. Templates
        print_step_header("Processing template files")
        self.state["files"] = await generator.materialize(root)

        # 4. Install
        print_step_header("Installing dependencies")
        if self.tool.install_deps:
            result = await install_dependencies(root, self.tool.install_command)
        else:
            result = StepResult.skip("install")
        self.state["install"] = result
        _report_step(result, "Dependencies installed successfully", "Failed to install dependencies")

        # 5. Git
        print_step_header("Initializing Git repository")
        if self.tool.init_git:
            result = await initialize_git(root, self.tool.commit_message)
        else:
            result = StepResult.skip("git")
        self.state["git"] = result
        _report_step(result, "Git repository initialized", "Failed to initialize Git")

        # 6. Summary
        self.show_summary(project)
        return self.state

    def show_summary(self, project: ProjectConfig) -> None:
        """Print the completion banner, the run summary and the next steps for *project*."""
        features = project.features

        console.print()
        print_success("Project initialization completed!")
        print_summary_table(
            {
                "Project": project.name,
                "Directory": str(Path(self.tool.output_dir).resolve()),
                "Features": ", ".join(features.enabled()) or "none",
                "Database": project.database if features.database else "-",
                "Directories created": str(len(self.state["directories"])),
                "Files written": str(len(self.state["files"])),
                "Install": self.state["install"].status if self.state["install"] else "-",
                "Git": self.state["git"].status if self.state["git"] else "-",
            },
            title="Initialization Summary",
        )

        steps = ["Update .env file with your configuration", "Review and customize the generated files"]
        if features.cicd:
            secrets = ["DOCKER_USERNAME", "DOCKER_PASSWORD"]
            if features.database:
                secrets += ["DATABASE_URL", "TEST_DATABASE_URL"]
            secrets.append("JWT_SECRET")
            steps.append("Set up GitHub repository secrets: " + ", ".join(secrets))

        console.print("Next steps:")
        for number, step in enumerate(steps, start=1):
            console.print(f"  {number}. {step}", markup=False)

        console.print()
        console.print("Start development:")
        if features.docker:
            console.print("  npm run dev:docker  # With Docker", markup=False)
        console.print("  npm run dev         # Local development", markup=False)
        console.print()
        print_success("Happy coding!")


def _report_step(result: StepResult, ok_message: str, fail_message: str) -> None:
    if result.skipped:
        print_info(f"  Skipped ({result.name})")
    elif result.success:
        print_success(f"  {ok_message}")
    else:
        print_warning(f"  {fail_message}: {result.message}")
        print_info(f"  {result.hint}")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devops-init",
        description="Scaffold a Node.js service with Docker, CI/CD and DevOps defaults",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  devops-init\n"
            "  devops-init -o ./my-api --skip-install\n"
            "  devops-init --answers answers.json --skip-git\n"
        ),
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory to scaffold into (default: current directory)",
    )
    parser.add_argument(
        "--answers",
        default=None,
        help="Load project answers from a JSON file instead of prompting",
    )
    parser.add_argument(
        "--save-answers",
        default=None,
        help="Write the collected answers to a JSON file",
    )
    parser.add_argument(
        "--template-dir",
        default=None,
        help="Use templates from this directory instead of the bundled ones",
    )
    parser.add_argument(
        "--package-manager",
        default=None,
        help="Package manager used for the install step (default: npm)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not run the dependency install step",
    )
    parser.add_argument(
        "--skip-git",
        action="store_true",
        help="Do not initialise a git repository",
    )
    return parser


def tool_config_from_args(args: argparse.Namespace) -> ToolConfig:
    """Layer command line flags over the environment-derived settings."""
    tool = ToolConfig.from_env()
    overrides: dict[str, Any] = {}
    if args.output:
        overrides["output_dir"] = Path(args.output)
    if args.template_dir:
        overrides["template_dir"] = Path(args.template_dir)
    if args.package_manager:
        overrides["package_manager"] = args.package_manager
    if args.skip_install:
        overrides["install_deps"] = False
    if args.skip_git:
        overrides["init_git"] = False
    return tool.model_copy(update=overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``devops-init`` and ``python -m devops_init``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        tool = tool_config_from_args(args)
        project = ProjectConfig.load(Path(args.answers)) if args.answers else None
        initializer = ProjectInitializer(
            tool,
            project=project,
            save_answers=Path(args.save_answers) if args.save_answers else None,
        )
        asyncio.run(initializer.run())
    except KeyboardInterrupt:
        console.print()
        print_error("Initialization cancelled.")
        sys.exit(130)
    except Exception as exc:
        print_error(f"Error during initialization: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
