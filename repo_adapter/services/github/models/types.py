"""
Shared types and models for GitHub repository operations.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Regular, non-executable file
REGULAR_FILE_MODE = "100644"


@dataclass(frozen=True)
class File:
    """A file read from a repository."""

    name: str
    content: bytes


@dataclass
class TreeEntry:
    """An entry sent to the tree-creation endpoint for a new or changed file."""

    path: str
    content: str
    mode: str = REGULAR_FILE_MODE
    type: str = "blob"

    def to_payload(self) -> Dict[str, str]:
        return {
            "path": self.path,
            "mode": self.mode,
            "type": self.type,
            "content": self.content,
        }


@dataclass
class GitReference:
    ref: str
    sha: str
    object_type: str = "commit"

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "GitReference":
        return cls(
            ref=data["ref"],
            sha=data["object"]["sha"],
            object_type=data["object"].get("type", "commit"),
        )


@dataclass
class GitTree:
    sha: str
    entries: List[Dict[str, Any]] = field(default_factory=list)
    truncated: bool = False

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "GitTree":
        return cls(
            sha=data["sha"],
            entries=list(data.get("tree", [])),
            truncated=bool(data.get("truncated", False)),
        )


@dataclass
class ContentInfo:
    """Contents API metadata for a single path."""

    name: str
    path: str
    type: str
    sha: str
    size: int = 0
    download_url: Optional[str] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "ContentInfo":
        return cls(
            name=data.get("name", ""),
            path=data.get("path", ""),
            type=data.get("type", ""),
            sha=data.get("sha", ""),
            size=data.get("size", 0),
            download_url=data.get("download_url"),
        )

    @property
    def is_file(self) -> bool:
        return self.type == "file"


@dataclass
class BlobURLInfo:
    """Information extracted from a GitHub blob view URL."""

    owner: str
    repo_name: str
    ref: str
    path: str
    original_url: str
