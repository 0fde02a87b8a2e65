"""
GitHub App Authentication Module

Handles GitHub App authentication including:
- JWT token generation for GitHub App
- Installation access token management and caching
"""

from repo_adapter.services.github.auth.jwt_generator import GitHubAppJWTGenerator
from repo_adapter.services.github.auth.installation_token_manager import (
    InstallationToken,
    InstallationTokenManager,
)

__all__ = [
    "GitHubAppJWTGenerator",
    "InstallationToken",
    "InstallationTokenManager",
]
