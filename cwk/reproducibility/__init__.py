"""Reproducibility infrastructure: code provenance tracking."""

from cwk.reproducibility.git_hash import get_git_hash

__all__ = ["get_git_hash"]
