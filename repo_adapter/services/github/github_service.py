"""
GitHub repository adapter - facade over the GitHub API operation groups.

This service provides a single entry point for:
- Parsing GitHub blob URLs
- Reading files and repository archives
- Looking up file content SHAs
- Pushing several files in one commit
- Removing placeholder folders
"""

import logging
from typing import Dict, List, Optional, Tuple

from repo_adapter.services.github.api.client import GitHubAPIClient
from repo_adapter.services.github.api.contents import ContentsOperations
from repo_adapter.services.github.api.git_data import GitDataOperations
from repo_adapter.services.github.api.repositories import RepositoryOperations
from repo_adapter.services.github.errors import GitHubAPIError
from repo_adapter.services.github.models.types import File, TreeEntry
from repo_adapter.services.github.repository.url_parser import parse_file_url

logger = logging.getLogger(__name__)

ARCHIVE_FORMAT = "tarball"
FOLDER_PLACEHOLDER = ".gitkeep"
# Folder deletion always targets this branch; see DESIGN.md
DELETE_DIRS_BRANCH = "main"

_TREE_ENTRY_FIELDS = ("path", "mode", "type", "sha")


class GitHubRepositoryAdapter:
    """
    Stateless adapter over a GitHub repository.

    The API client is injected once and shared by every operation group;
    nothing else is kept between calls.
    """

    def __init__(
        self,
        client: Optional[GitHubAPIClient] = None,
        contents: Optional[ContentsOperations] = None,
        git_data: Optional[GitDataOperations] = None,
        repositories: Optional[RepositoryOperations] = None,
    ):
        """Initialize the adapter.

        Args:
            client: GitHub API client (creates new from config if not provided)
            contents: Contents operations (built on client if not provided)
            git_data: Git data operations (built on client if not provided)
            repositories: Repository operations (built on client if not provided)
        """
        self.api_client = client or GitHubAPIClient()

        self.contents = contents or ContentsOperations(client=self.api_client)
        self.git_data = git_data or GitDataOperations(client=self.api_client)
        self.repositories = repositories or RepositoryOperations(client=self.api_client)

    @staticmethod
    def parse_url(url: str) -> Tuple[str, str, str]:
        """Split a GitHub blob URL into (file path, owner, repository name).

        Raises:
            InvalidURLFormatError: If the URL lacks the https://github.com/ prefix
            URLParseError: If the URL is not owner/repo/blob/ref/path
        """
        return parse_file_url(url)

    async def get_file(self, owner: str, repo_name: str, file_path: str, ref: str = "") -> File:
        """Read a file's raw bytes at ref (default branch when empty)."""
        content = await self.contents.download_contents(owner, repo_name, file_path, ref)
        return File(name=file_path, content=content)

    async def get_repository_archive(self, owner: str, repo_name: str, ref: str = "") -> bytes:
        """Download the tarball of a repository at ref.

        Raises:
            GitHubAPIError: If the link cannot be resolved or the download does
                not answer 200
        """
        archive_link = await self.repositories.get_archive_link(
            owner, repo_name, archive_format=ARCHIVE_FORMAT, ref=ref
        )
        return await self.repositories.download_archive(archive_link)

    async def get_latest_commit_hash(self, owner: str, repo_name: str, file_path: str, ref: str = "") -> str:
        """Return the SHA GitHub reports for a file at ref.

        Despite the name this is the file's blob (content) SHA, not the SHA of
        the commit that last touched it. It changes whenever the file content
        changes, which is what callers use it for.
        """
        info = await self.contents.get_contents(owner, repo_name, file_path, ref)
        return info.sha

    async def push_files_to_repository(
        self,
        files: Dict[str, bytes],
        owner: str,
        repo_name: str,
        branch: str,
        commit_message: str,
    ) -> str:
        """
        Commit several files to a branch in a single commit.

        Uses the Git Data API:
        1. Resolve the branch to its tip commit
        2. Read the tip's tree
        3. Build entries: new files first, then the base tree's entries
        4. Create the new tree
        5. Create the commit with the tip as its only parent
        6. Force-update the branch to the new commit

        Nothing is visible on the branch until step 6. Objects created by
        earlier steps of a failed push stay unreferenced.

        Args:
            files: File path to content
            owner: Repository owner
            repo_name: Repository name
            branch: Branch to commit to
            commit_message: Commit message

        Returns:
            SHA of the new commit
        """
        ref_name = f"refs/heads/{branch}"

        ref = await self.git_data.get_ref(owner, repo_name, ref_name)
        parent_sha = ref.sha
        logger.debug(f"{owner}/{repo_name}@{branch} is at {parent_sha}")

        base_tree = await self.git_data.get_tree(owner, repo_name, parent_sha, recursive=False)

        entries = self._build_tree_entries(files, base_tree.entries)
        logger.debug(
            f"Creating tree with {len(files)} new and {len(entries) - len(files)} base entries"
        )

        new_tree = await self.git_data.create_tree(owner, repo_name, parent_sha, entries)

        commit_sha = await self.git_data.create_commit(
            owner, repo_name, commit_message, new_tree.sha, [parent_sha]
        )

        await self.git_data.update_ref(owner, repo_name, ref_name, commit_sha, force=True)

        logger.info(f"Pushed {len(files)} file(s) to {owner}/{repo_name}@{branch} as {commit_sha}")
        return commit_sha

    @staticmethod
    def _build_tree_entries(files: Dict[str, bytes], base_entries: List[Dict]) -> List[Dict]:
        """New file entries followed by base entries whose paths are not overwritten."""
        entries = [
            TreeEntry(path=path, content=content.decode("utf-8", errors="replace")).to_payload()
            for path, content in files.items()
        ]

        for base_entry in base_entries:
            if base_entry.get("path") in files:
                continue
            entries.append({key: base_entry[key] for key in _TREE_ENTRY_FIELDS if key in base_entry})

        return entries

    async def delete_dirs(self, owner: str, repo_name: str, *folder_paths: str) -> None:
        """
        Delete folders by removing their .gitkeep placeholder on the main branch.

        Each folder is deleted with its own commit. A folder whose placeholder
        is already gone counts as deleted.

        Raises:
            GitHubAPIError: On the first failure other than not-found; later
                folders are not processed
        """
        for folder_path in folder_paths:
            file_path = f"{folder_path}/{FOLDER_PLACEHOLDER}"
            try:
                info = await self.contents.get_contents(owner, repo_name, file_path, DELETE_DIRS_BRANCH)
                await self.contents.delete_file(
                    owner,
                    repo_name,
                    file_path,
                    sha=info.sha,
                    message=f"Delete folder {folder_path}",
                    branch=DELETE_DIRS_BRANCH,
                )
            except GitHubAPIError as e:
                if not e.is_not_found:
                    raise
                logger.warning(f"{file_path} not found in {owner}/{repo_name}, folder already deleted")
