"""
GitHub repository contents operations.

Reads file metadata and raw file bytes, and deletes files through the
contents API.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from repo_adapter.services.github.api.client import GitHubAPIClient
from repo_adapter.services.github.models.types import ContentInfo

logger = logging.getLogger(__name__)


def _ref_params(ref: Optional[str]) -> Dict[str, Any]:
    # An empty ref lets GitHub pick the default branch
    return {"ref": ref} if ref else {}


def _contents_endpoint(owner: str, repository_name: str, file_path: str) -> str:
    # '#', '?' and '%' are valid in repository paths
    return f"repos/{owner}/{repository_name}/contents/{quote(file_path, safe='/')}"


class ContentsOperations:
    """Handles GitHub repository contents operations."""

    def __init__(self, client: Optional[GitHubAPIClient] = None):
        """Initialize contents operations.

        Args:
            client: GitHub API client (creates new if not provided)
        """
        self.client = client or GitHubAPIClient()

    async def get_contents(
        self,
        owner: str,
        repository_name: str,
        file_path: str,
        ref: Optional[str] = None,
    ) -> ContentInfo:
        """Get metadata, including the blob SHA, of a single file.

        Raises:
            GitHubAPIError: If the request fails
            ValueError: If the path names a directory, symlink or submodule
        """
        endpoint = _contents_endpoint(owner, repository_name, file_path)
        response = await self.client.get(endpoint, params=_ref_params(ref))

        if isinstance(response, list):
            raise ValueError(f"{owner}/{repository_name}/{file_path} is a directory, not a file")

        info = ContentInfo.from_response(response)
        if not info.is_file:
            raise ValueError(f"{owner}/{repository_name}/{file_path} is a {info.type}, not a file")
        return info

    async def download_contents(
        self,
        owner: str,
        repository_name: str,
        file_path: str,
        ref: Optional[str] = None,
    ) -> bytes:
        """Download the raw bytes of a file at a reference."""
        endpoint = _contents_endpoint(owner, repository_name, file_path)
        return await self.client.download_raw(endpoint, params=_ref_params(ref))

    async def delete_file(
        self,
        owner: str,
        repository_name: str,
        file_path: str,
        sha: str,
        message: str,
        branch: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Delete a file, creating a commit on the branch.

        Args:
            owner: Repository owner
            repository_name: Repository name
            file_path: Path of the file to delete
            sha: Blob SHA of the file being deleted
            message: Commit message
            branch: Target branch (repository default when None)

        Returns:
            GitHub's commit response
        """
        data = {"message": message, "sha": sha}
        if branch:
            data["branch"] = branch

        endpoint = _contents_endpoint(owner, repository_name, file_path)
        response = await self.client.delete(endpoint, data=data)
        logger.info(f"Deleted {file_path} from {owner}/{repository_name} ({branch or 'default branch'})")
        return response
