"""External integration adapters."""

from .github import GitHubClient

__all__ = [
    "GitHubClient",
]
