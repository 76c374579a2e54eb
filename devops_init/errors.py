"""Exceptions raised by devops-init."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Raised when scaffolding cannot continue (missing template, bad answers file)."""
