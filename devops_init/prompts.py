"""Interactive collection of the project answers.

Each question is one line on stdout followed by one line read from stdin.
Blank answers fall back to the default shown in brackets.  Yes/no questions
follow a deliberately lopsided policy: a question whose default is yes is
only answered "no" by ``n``/``N``; a question whose default is no (Redis) is
only answered "yes" by ``y``/``Y``.  Answers are not trimmed, so ``" n"``
still counts as yes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from devops_init.config import (
    DATABASE_CHOICES,
    DEFAULT_DATABASE,
    FeatureFlags,
    ProjectConfig,
    default_description,
)
from devops_init.utils import print_error, print_step_header, read_line

Reader = Callable[[str], str]


def default_yes(answer: str) -> bool:
    """Anything except ``n``/``N`` (including a blank line) means yes."""
    return answer.lower() != "n"


def default_no(answer: str) -> bool:
    """Only ``y``/``Y`` means yes."""
    return answer.lower() == "y"


class ConfigCollector:
    """Asks the questions in a fixed order and returns a frozen ``ProjectConfig``.

    Answers are accumulated in a local dict; the config object is only
    built once every question has been answered.
    """

    def __init__(self, reader: Reader | None = None) -> None:
        self._reader = reader or read_line

    def ask(self, prompt: str) -> str:
        return self._reader(prompt)

    def collect(self) -> ProjectConfig:
        print_step_header("Project Information")
        answers: dict[str, Any] = {}

        answers["name"] = self._ask_valid("Project name: ", "name")
        answers["description"] = self.ask("Project description (optional): ") or default_description(
            answers["name"]
        )
        answers["author"] = self.ask("Author name: ")
        answers["email"] = self.ask("Author email: ")
        answers["github_username"] = self._ask_valid("GitHub username: ", "github_username")
        answers["docker_username"] = (
            self._ask_valid("Docker Hub username (optional): ", "docker_username")
            or answers["github_username"]
        )

        print_step_header("Features Selection")
        docker = default_yes(self.ask("Include Docker configuration? (y/n) [y]: "))
        cicd = default_yes(self.ask("Include CI/CD workflows? (y/n) [y]: "))
        database = default_yes(self.ask("Include database configuration? (y/n) [y]: "))

        answers["database"] = DEFAULT_DATABASE
        if database:
            choices = "/".join(DATABASE_CHOICES)
            # Unknown database names are kept verbatim.
            answers["database"] = (
                self.ask(f"Database type ({choices}) [{DEFAULT_DATABASE}]: ") or DEFAULT_DATABASE
            )

        redis = default_no(self.ask("Include Redis configuration? (y/n) [n]: "))
        monitoring = default_yes(self.ask("Include monitoring setup? (y/n) [y]: "))

        answers["features"] = FeatureFlags(
            docker=docker,
            cicd=cicd,
            database=database,
            redis=redis,
            monitoring=monitoring,
        )
        return ProjectConfig(**answers)

    def _ask_valid(self, prompt: str, field: str) -> str:
        """Re-ask *prompt* until the answer passes the ``ProjectConfig`` check for *field*."""
        while True:
            value = self.ask(prompt)
            error = _field_error(field, value)
            if error is None:
                return value
            print_error(error)


def _field_error(field: str, value: str) -> str | None:
    candidate = {"name": "placeholder", field: value}
    try:
        ProjectConfig(**candidate)
    except ValidationError as exc:
        for err in exc.errors():
            if err["loc"] and err["loc"][0] == field:
                return err["msg"].removeprefix("Value error, ")
    return None
