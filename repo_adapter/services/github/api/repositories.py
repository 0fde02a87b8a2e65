"""
GitHub repository operations.
"""

import logging
from typing import Optional
from urllib.parse import quote

from repo_adapter.config.config import GITHUB_ARCHIVE_MAX_REDIRECTS
from repo_adapter.services.github.api.client import GitHubAPIClient

logger = logging.getLogger(__name__)

ARCHIVE_FORMATS = ("tarball", "zipball")


class RepositoryOperations:
    """Handles GitHub repository operations."""

    def __init__(self, client: Optional[GitHubAPIClient] = None):
        """Initialize repository operations.

        Args:
            client: GitHub API client (creates new if not provided)
        """
        self.client = client or GitHubAPIClient()

    async def get_archive_link(
        self,
        owner: str,
        repository_name: str,
        archive_format: str = "tarball",
        ref: Optional[str] = None,
        max_redirects: int = GITHUB_ARCHIVE_MAX_REDIRECTS,
    ) -> str:
        """Get the short-lived download URL of a repository archive.

        Args:
            owner: Repository owner
            repository_name: Repository name
            archive_format: "tarball" or "zipball"
            ref: Git reference (default branch when empty)
            max_redirects: Permanent redirects to follow while resolving

        Returns:
            Download URL of the archive

        Raises:
            ValueError: If the archive format is unknown
            GitHubAPIError: If the link cannot be resolved
        """
        if archive_format not in ARCHIVE_FORMATS:
            raise ValueError(f"Unsupported archive format: {archive_format}")

        path = f"repos/{owner}/{repository_name}/{archive_format}"
        if ref:
            path = f"{path}/{quote(ref, safe='')}"

        return await self.client.get_redirect_location(path, max_redirects=max_redirects)

    async def download_archive(self, url: str) -> bytes:
        """Download an archive from a link returned by get_archive_link."""
        return await self.client.fetch_url(url, description="archive")
