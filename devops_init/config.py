"""devops-init configuration.

Two typed models live here.  ``ProjectConfig`` holds the answers that drive
scaffolding: it is built once every answer is known and is frozen after
that.  ``ToolConfig`` holds the runtime settings of the tool itself (where to
write, which templates, which package manager) and can be built from
environment variables.  Both are Pydantic v2 models, so they are validated
on construction and serialise to and from JSON.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from devops_init.errors import ScaffoldError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_DATABASE = "postgresql"
DATABASE_CHOICES: tuple[str, ...] = ("postgresql", "mysql", "mongodb")
DEFAULT_COMMIT_MESSAGE = "Initial commit: Project setup with DevOps template"

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates"

# Names end up in file paths, image tags and GitHub URLs.
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_GITHUB_USER_PATTERN = re.compile(r"^[A-Za-z0-9-]*$")
_DOCKER_USER_PATTERN = re.compile(r"^[A-Za-z0-9._-]*$")

_TRUTHY = {"1", "true", "yes", "on"}


def default_description(name: str) -> str:
    """Return the description used when the user leaves it blank."""
    return f"{name} - A Node.js API with DevOps practices"


# ---------------------------------------------------------------------------
# Project answers
# ---------------------------------------------------------------------------


class FeatureFlags(BaseModel):
    """Optional artifact sets selected for the generated project."""

    model_config = ConfigDict(frozen=True)

    docker: bool = True
    cicd: bool = True
    database: bool = True
    redis: bool = False
    monitoring: bool = True

    def enabled(self) -> list[str]:
        """Return the names of every enabled feature, in declaration order."""
        return [name for name, value in self.model_dump().items() if value]


class ProjectConfig(BaseModel):
    """Everything the scaffolder needs to know about the project to create.

    Instances are immutable.  The interactive collector gathers answers in a
    plain mapping and only builds a ``ProjectConfig`` at the very end, so the
    generation phase never sees a partially filled record.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Package name; also used for directories and image names")
    description: str = Field(default="", description="Free-text project description")
    author: str = Field(default="")
    email: str = Field(default="")
    github_username: str = Field(default="")
    docker_username: str = Field(default="")
    database: str = Field(
        default=DEFAULT_DATABASE,
        description="Database flavour; unknown values are kept verbatim",
    )
    features: FeatureFlags = Field(default_factory=FeatureFlags)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _NAME_PATTERN.match(value):
            raise ValueError(
                "project name must start with a letter or digit and contain only "
                "letters, digits, '.', '_' or '-'"
            )
        return value

    @field_validator("github_username")
    @classmethod
    def _check_github_username(cls, value: str) -> str:
        if not _GITHUB_USER_PATTERN.match(value):
            raise ValueError("GitHub username may only contain letters, digits and '-'")
        return value

    @field_validator("docker_username")
    @classmethod
    def _check_docker_username(cls, value: str) -> str:
        if not _DOCKER_USER_PATTERN.match(value):
            raise ValueError("Docker Hub username may only contain letters, digits, '.', '_' or '-'")
        return value

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("description") and data.get("name"):
            data["description"] = default_description(data["name"])
        if not data.get("docker_username"):
            data["docker_username"] = data.get("github_username", "")
        return data

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def github_url(self) -> str:
        """``https://github.com/<user>/<name>``."""
        return f"https://github.com/{self.github_username}/{self.name}"

    @property
    def repository_url(self) -> str:
        return f"git+{self.github_url}.git"

    @property
    def clone_url(self) -> str:
        return f"{self.github_url}.git"

    @property
    def bugs_url(self) -> str:
        return f"{self.github_url}/issues"

    @property
    def homepage(self) -> str:
        return f"{self.github_url}#readme"

    @property
    def author_line(self) -> str:
        """Author in ``package.json`` person format."""
        return f"{self.author} <{self.email}>"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Write the answers to *path* as JSON so a later run can replay them."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        """Load previously saved answers.

        Raises:
            ScaffoldError: If the file is missing or does not hold a valid
                project configuration.
        """
        source = Path(path)
        try:
            raw = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise ScaffoldError(f"cannot read answers file {source}: {exc}") from exc
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise ScaffoldError(f"invalid answers file {source}: {exc}") from exc


# ---------------------------------------------------------------------------
# Tool settings
# ---------------------------------------------------------------------------


class ToolConfig(BaseModel):
    """Runtime settings for a single ``devops-init`` run."""

    output_dir: Path = Field(default=Path("."))
    template_dir: Path = Field(default=_DEFAULT_TEMPLATE_DIR)
    package_manager: str = Field(default="npm", min_length=1)
    install_deps: bool = Field(default=True, description="Run '<package_manager> install'")
    init_git: bool = Field(default=True, description="Run git init/add/commit")
    commit_message: str = Field(default=DEFAULT_COMMIT_MESSAGE, min_length=1)

    @property
    def install_command(self) -> list[str]:
        return [self.package_manager, "install"]

    @classmethod
    def from_env(cls) -> "ToolConfig":
        """Build a ``ToolConfig`` from environment variables.

        Recognised variables (all optional):
            DEVOPS_INIT_OUTPUT_DIR, DEVOPS_INIT_TEMPLATE_DIR,
            DEVOPS_INIT_PACKAGE_MANAGER, DEVOPS_INIT_SKIP_INSTALL,
            DEVOPS_INIT_SKIP_GIT, DEVOPS_INIT_COMMIT_MESSAGE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("DEVOPS_INIT_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["DEVOPS_INIT_OUTPUT_DIR"])
        if os.environ.get("DEVOPS_INIT_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["DEVOPS_INIT_TEMPLATE_DIR"])
        if os.environ.get("DEVOPS_INIT_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["DEVOPS_INIT_PACKAGE_MANAGER"]
        if os.environ.get("DEVOPS_INIT_COMMIT_MESSAGE"):
            kwargs["commit_message"] = os.environ["DEVOPS_INIT_COMMIT_MESSAGE"]

        kwargs["install_deps"] = not _env_flag("DEVOPS_INIT_SKIP_INSTALL")
        kwargs["init_git"] = not _env_flag("DEVOPS_INIT_SKIP_GIT")
        return cls(**kwargs)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY
