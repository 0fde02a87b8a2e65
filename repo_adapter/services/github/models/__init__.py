"""
GitHub Models Module

Shared types and dataclasses for GitHub repository operations.
"""

from repo_adapter.services.github.models.types import (
    REGULAR_FILE_MODE,
    BlobURLInfo,
    ContentInfo,
    File,
    GitReference,
    GitTree,
    TreeEntry,
)

__all__ = [
    "REGULAR_FILE_MODE",
    "BlobURLInfo",
    "ContentInfo",
    "File",
    "GitReference",
    "GitTree",
    "TreeEntry",
]
