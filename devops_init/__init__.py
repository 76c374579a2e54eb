"""devops-init -- interactive scaffolder for Node.js DevOps projects."""

__version__ = "0.1.0"
