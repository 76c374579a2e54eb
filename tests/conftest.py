"""Shared pytest fixtures for the devops-init test suite.

Provides reusable fixtures for:
- Temporary output directories
- Sample project configurations (full featured and minimal)
- Scripted answer readers for the interactive collector
- A recording console so tests can assert on printed output
- Mock subprocess helpers
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from devops_init.config import FeatureFlags, ProjectConfig, ToolConfig


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "demo"
    project_dir.mkdir()
    yield project_dir


# ---------------------------------------------------------------------------
# Project configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def demo_config() -> ProjectConfig:
    """The ``demo``/``alice`` project with every default feature enabled."""
    return ProjectConfig(
        name="demo",
        description="Demo API",
        author="Alice Example",
        email="alice@example.com",
        github_username="alice",
        docker_username="alicedocker",
        database="postgresql",
        features=FeatureFlags(docker=True, cicd=True, database=True, redis=False, monitoring=True),
    )


@pytest.fixture
def no_database_config(demo_config: ProjectConfig) -> ProjectConfig:
    """``demo_config`` with the database feature turned off."""
    return demo_config.model_copy(
        update={"features": demo_config.features.model_copy(update={"database": False})}
    )


@pytest.fixture
def minimal_config() -> ProjectConfig:
    """A project with every optional feature turned off."""
    return ProjectConfig(
        name="bare",
        github_username="bob",
        features=FeatureFlags(docker=False, cicd=False, database=False, redis=False, monitoring=False),
    )


@pytest.fixture
def tool_config(tmp_project_dir: Path) -> ToolConfig:
    """Tool settings writing into ``tmp_project_dir`` with both external steps enabled."""
    return ToolConfig(output_dir=tmp_project_dir)


@pytest.fixture
def sample_answers_dict() -> dict[str, Any]:
    """A saved answers file as a plain dict."""
    return {
        "name": "orders-api",
        "description": "Order management service",
        "author": "Carol",
        "email": "carol@example.com",
        "github_username": "carol",
        "docker_username": "",
        "database": "mysql",
        "features": {
            "docker": True,
            "cicd": False,
            "database": True,
            "redis": True,
            "monitoring": False,
        },
    }


@pytest.fixture
def answers_file(tmp_path: Path, sample_answers_dict: dict[str, Any]) -> Path:
    path = tmp_path / "answers.json"
    path.write_text(json.dumps(sample_answers_dict), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Interactive input
# ---------------------------------------------------------------------------

@pytest.fixture
def scripted_reader() -> Callable[[Iterable[str]], MagicMock]:
    """Return a factory for readers that answer prompts from a list.

    The returned mock records every prompt it was asked, so tests can check
    both the order of questions and the default hints they show.

    Usage:
        def test_collect(scripted_reader):
            reader = scripted_reader(["demo", "", ...])
            config = ConfigCollector(reader).collect()
    """
    def factory(answers: Iterable[str]) -> MagicMock:
        return MagicMock(side_effect=list(answers))

    return factory


# ---------------------------------------------------------------------------
# Console capture
# ---------------------------------------------------------------------------

@pytest.fixture
def recording_console(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    """Route all Rich output to a buffer and return the buffer."""
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=200, color_system=None)
    monkeypatch.setattr("devops_init.utils.console", console)
    monkeypatch.setattr("devops_init.initializer.console", console)
    return buffer


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
