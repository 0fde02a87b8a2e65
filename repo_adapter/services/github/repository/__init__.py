"""
Repository URL Module

Parses GitHub web URLs into repository coordinates.
"""

from repo_adapter.services.github.repository.url_parser import (
    BLOB_URL_PATTERN,
    parse_blob_url,
    parse_file_url,
)

__all__ = [
    "BLOB_URL_PATTERN",
    "parse_blob_url",
    "parse_file_url",
]
