"""Best-effort dependency installation and git initialisation.

Both steps delegate to external programs and never raise: the outcome is a
``StepResult`` the caller reports as success or as a warning with a manual
recovery hint.  The run always continues to the summary either way.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from devops_init.utils import run_command


class StepResult(BaseModel):
    """Outcome of one best-effort step."""

    name: str
    success: bool
    skipped: bool = False
    command: str = Field(default="", description="Last command attempted")
    message: str = Field(default="", description="Failure detail, empty on success")
    hint: str = Field(default="", description="What to run by hand after a failure")

    @classmethod
    def skip(cls, name: str) -> "StepResult":
        return cls(name=name, success=True, skipped=True)

    @property
    def status(self) -> str:
        if self.skipped:
            return "skipped"
        return "ok" if self.success else "failed"


async def _run_step(cmd: list[str], cwd: Path) -> tuple[bool, str]:
    """Run one command with inherited stdio; return ``(ok, failure message)``."""
    try:
        returncode, _, _ = await run_command(cmd, cwd=cwd, capture=False)
    except OSError as exc:
        return False, f"could not run '{cmd[0]}': {exc}"
    if returncode != 0:
        return False, f"'{' '.join(cmd)}' exited with status {returncode}"
    return True, ""


async def install_dependencies(cwd: Path, command: list[str]) -> StepResult:
    """Run the package manager's install command in *cwd*."""
    display = " ".join(command)
    ok, message = await _run_step(command, cwd)
    return StepResult(
        name="install",
        success=ok,
        command=display,
        message=message,
        hint="" if ok else f"You can install them manually later with: {display}",
    )


async def initialize_git(cwd: Path, commit_message: str) -> StepResult:
    """Run ``git init``, ``git add .`` and the initial commit, stopping at the first failure."""
    commands = [
        ["git", "init"],
        ["git", "add", "."],
        ["git", "commit", "-m", commit_message],
    ]
    for cmd in commands:
        ok, message = await _run_step(cmd, cwd)
        if not ok:
            return StepResult(
                name="git",
                success=False,
                command=" ".join(cmd),
                message=message,
                hint="You can initialize it manually later with: git init",
            )
    return StepResult(name="git", success=True, command=" ".join(commands[-1]))
