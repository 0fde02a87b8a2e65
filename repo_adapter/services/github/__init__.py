"""
GitHub Service Package

Adapter over the GitHub REST API for repository file access and commits.

Main Components:
- GitHubRepositoryAdapter: Facade exposing the repository operations
- API Client: Authenticated GitHub REST API requests
- Auth: GitHub App JWT and installation tokens
- Repository: Blob URL parsing
"""

from repo_adapter.services.github.errors import (
    GitHubAPIError,
    InvalidURLFormatError,
    RepositoryURLError,
    URLParseError,
)
from repo_adapter.services.github.github_service import GitHubRepositoryAdapter

__all__ = [
    "GitHubRepositoryAdapter",
    "GitHubAPIError",
    "InvalidURLFormatError",
    "RepositoryURLError",
    "URLParseError",
]
