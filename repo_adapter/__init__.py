"""
GitHub repository adapter.

Reads files and archives from GitHub repositories, looks up content SHAs,
pushes multi-file commits and removes placeholder folders.
"""

from repo_adapter.services.github.github_service import GitHubRepositoryAdapter

__all__ = ["GitHubRepositoryAdapter"]
