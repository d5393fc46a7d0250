"""Version-control collaborators."""

from .base import RepositoryProvider, VCSError, VersionControl
from .git_cli import GitCliRepository, GitError, LocalRepositoryProvider
from .github_api import GitHubRepository, GitHubRepositoryProvider

__all__ = [
    "VersionControl",
    "RepositoryProvider",
    "VCSError",
    "GitCliRepository",
    "GitError",
    "LocalRepositoryProvider",
    "GitHubRepository",
    "GitHubRepositoryProvider",
]
