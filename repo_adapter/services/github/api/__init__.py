"""
GitHub API Module

Handles GitHub REST API interactions including:
- Contents (file metadata, raw downloads, deletion)
- Git data (refs, trees, commits)
- Repository archives
"""

from repo_adapter.services.github.api.client import GitHubAPIClient
from repo_adapter.services.github.api.contents import ContentsOperations
from repo_adapter.services.github.api.git_data import GitDataOperations
from repo_adapter.services.github.api.repositories import RepositoryOperations

__all__ = [
    "GitHubAPIClient",
    "ContentsOperations",
    "GitDataOperations",
    "RepositoryOperations",
]
