"""Repository discovery and cloning."""

from .models import RepoRef
from .github_client import GitHubClient
from .repo_manager import RepoManager

__all__ = ["RepoRef", "GitHubClient", "RepoManager"]
