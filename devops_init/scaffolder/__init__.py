"""devops-init scaffolder -- writes a Node.js DevOps project skeleton.

This module takes a ``ProjectConfig`` and materializes the directory tree
and template-derived files (package manifest, env files, Docker assets,
GitHub Actions workflows, Express entry point, README).

Quick usage::

    from devops_init.config import ProjectConfig
    from devops_init.scaffolder import ProjectGenerator

    config = ProjectConfig(name="my-api", github_username="octocat")
    generator = ProjectGenerator(config)
    written = await generator.generate("./my-api")
"""

from devops_init.scaffolder.generator import ProjectGenerator, directory_layout
from devops_init.scaffolder.templates import TemplateRenderer, substitute

__all__ = [
    "ProjectGenerator",
    "TemplateRenderer",
    "directory_layout",
    "substitute",
]
