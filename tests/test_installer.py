"""Tests for the best-effort install and git steps (devops_init.installer)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, call, patch

import pytest

from devops_init.config import DEFAULT_COMMIT_MESSAGE
from devops_init.installer import StepResult, initialize_git, install_dependencies

pytestmark = pytest.mark.unit


class TestStepResult:
    def test_skip(self):
        result = StepResult.skip("install")
        assert result.skipped is True
        assert result.success is True
        assert result.status == "skipped"

    def test_status_ok_and_failed(self):
        assert StepResult(name="git", success=True).status == "ok"
        assert StepResult(name="git", success=False).status == "failed"


class TestInstallDependencies:
    async def test_success(self, tmp_path: Path):
        with patch(
            "devops_init.installer.run_command",
            new_callable=AsyncMock,
            return_value=(0, "", ""),
        ) as run:
            result = await install_dependencies(tmp_path, ["npm", "install"])

        run.assert_awaited_once_with(["npm", "install"], cwd=tmp_path, capture=False)
        assert result.success is True
        assert result.status == "ok"
        assert result.command == "npm install"
        assert result.hint == ""

    async def test_nonzero_exit(self, tmp_path: Path):
        with patch(
            "devops_init.installer.run_command",
            new_callable=AsyncMock,
            return_value=(1, "", ""),
        ):
            result = await install_dependencies(tmp_path, ["npm", "install"])

        assert result.success is False
        assert "exited with status 1" in result.message
        assert result.hint == "You can install them manually later with: npm install"

    async def test_missing_package_manager(self, tmp_path: Path):
        with patch(
            "devops_init.installer.run_command",
            new_callable=AsyncMock,
            side_effect=FileNotFoundError("No such file or directory: 'pnpm'"),
        ):
            result = await install_dependencies(tmp_path, ["pnpm", "install"])

        assert result.success is False
        assert result.message.startswith("could not run 'pnpm'")
        assert result.hint.endswith("pnpm install")


class TestInitializeGit:
    async def test_runs_three_commands(self, tmp_path: Path):
        with patch(
            "devops_init.installer.run_command",
            new_callable=AsyncMock,
            return_value=(0, "", ""),
        ) as run:
            result = await initialize_git(tmp_path, DEFAULT_COMMIT_MESSAGE)

        assert result.success is True
        assert run.await_args_list == [
            call(["git", "init"], cwd=tmp_path, capture=False),
            call(["git", "add", "."], cwd=tmp_path, capture=False),
            call(
                ["git", "commit", "-m", "Initial commit: Project setup with DevOps template"],
                cwd=tmp_path,
                capture=False,
            ),
        ]

    async def test_stops_at_first_failure(self, tmp_path: Path):
        with patch(
            "devops_init.installer.run_command",
            new_callable=AsyncMock,
            side_effect=[(0, "", ""), (128, "", "")],
        ) as run:
            result = await initialize_git(tmp_path, "msg")

        assert run.await_count == 2
        assert result.success is False
        assert result.command == "git add ."
        assert result.hint == "You can initialize it manually later with: git init"

    async def test_git_not_installed(self, tmp_path: Path):
        with patch(
            "devops_init.installer.run_command",
            new_callable=AsyncMock,
            side_effect=FileNotFoundError("git"),
        ) as run:
            result = await initialize_git(tmp_path, "msg")

        assert run.await_count == 1
        assert result.success is False
        assert result.command == "git init"
        assert "could not run 'git'" in result.message
