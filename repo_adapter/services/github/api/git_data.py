"""
GitHub Git Data API operations.

Low-level access to references, trees and commits, used to build commits
without a local clone.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from repo_adapter.services.github.api.client import GitHubAPIClient
from repo_adapter.services.github.models.types import GitReference, GitTree

logger = logging.getLogger(__name__)


def _short_ref(ref: str) -> str:
    """Strip the "refs/" prefix and escape the rest for use in a URL path."""
    short_ref = ref[len("refs/"):] if ref.startswith("refs/") else ref
    return quote(short_ref, safe="/")


class GitDataOperations:
    """Handles GitHub Git Data operations (refs, trees, commits)."""

    def __init__(self, client: Optional[GitHubAPIClient] = None):
        """Initialize git data operations.

        Args:
            client: GitHub API client (creates new if not provided)
        """
        self.client = client or GitHubAPIClient()

    async def get_ref(self, owner: str, repository_name: str, ref: str) -> GitReference:
        """Get a reference such as "refs/heads/main".

        Args:
            owner: Repository owner
            repository_name: Repository name
            ref: Fully qualified reference name

        Returns:
            GitReference pointing at the current object
        """
        response = await self.client.get(f"repos/{owner}/{repository_name}/git/ref/{_short_ref(ref)}")
        return GitReference.from_response(response)

    async def update_ref(
        self,
        owner: str,
        repository_name: str,
        ref: str,
        sha: str,
        force: bool = False,
    ) -> GitReference:
        """Point a reference at a new commit.

        Args:
            owner: Repository owner
            repository_name: Repository name
            ref: Fully qualified reference name
            sha: Commit SHA to point at
            force: Allow a non-fast-forward update

        Returns:
            Updated GitReference
        """
        response = await self.client.patch(
            f"repos/{owner}/{repository_name}/git/refs/{_short_ref(ref)}",
            data={"sha": sha, "force": force},
        )
        logger.info(f"Updated {ref} of {owner}/{repository_name} to {sha} (force={force})")
        return GitReference.from_response(response)

    async def get_tree(
        self,
        owner: str,
        repository_name: str,
        sha: str,
        recursive: bool = False,
    ) -> GitTree:
        """Get a tree by tree or commit SHA."""
        params = {"recursive": "1"} if recursive else None
        response = await self.client.get(
            f"repos/{owner}/{repository_name}/git/trees/{sha}", params=params
        )
        return GitTree.from_response(response)

    async def create_tree(
        self,
        owner: str,
        repository_name: str,
        base_tree: str,
        entries: List[Dict[str, Any]],
    ) -> GitTree:
        """Create a tree from entries on top of base_tree.

        Args:
            owner: Repository owner
            repository_name: Repository name
            base_tree: SHA of the tree (or commit) the new tree builds on
            entries: Tree entries as accepted by the API

        Returns:
            The created GitTree
        """
        response = await self.client.post(
            f"repos/{owner}/{repository_name}/git/trees",
            data={"base_tree": base_tree, "tree": entries},
        )
        return GitTree.from_response(response)

    async def create_commit(
        self,
        owner: str,
        repository_name: str,
        message: str,
        tree_sha: str,
        parents: List[str],
    ) -> str:
        """Create a commit object and return its SHA."""
        response = await self.client.post(
            f"repos/{owner}/{repository_name}/git/commits",
            data={"message": message, "tree": tree_sha, "parents": parents},
        )
        return response["sha"]
