"""Git operations for forge."""

from forge.git.repository import GitRepository

__all__ = [
    "GitRepository",
]
