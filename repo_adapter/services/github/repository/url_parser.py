"""
GitHub blob URL parsing.

Splits a web "blob view" URL such as
https://github.com/owner/repo/blob/main/idl/service.thrift into the pieces
needed to address the file through the API.
"""

import logging
import re
from typing import Tuple

from repo_adapter.config.config import GITHUB_WEB_URL_PREFIX
from repo_adapter.services.github.errors import InvalidURLFormatError, URLParseError
from repo_adapter.services.github.models.types import BlobURLInfo

logger = logging.getLogger(__name__)

BLOB_URL_PATTERN = r"([^/]+)/([^/]+)/blob/([^/]+)/(.+)"
_BLOB_URL_REGEX = re.compile(BLOB_URL_PATTERN)


def parse_blob_url(url: str) -> BlobURLInfo:
    """
    Parse a GitHub blob URL into owner, repository, ref and file path.

    The query string, if any, is dropped at the last '?' before matching.

    Args:
        url: URL of the form https://github.com/<owner>/<repo>/blob/<ref>/<path>

    Returns:
        BlobURLInfo with parsed information

    Raises:
        InvalidURLFormatError: If the URL does not start with https://github.com/
        URLParseError: If the remainder does not match the blob URL grammar
    """
    if not url.startswith(GITHUB_WEB_URL_PREFIX):
        raise InvalidURLFormatError(GITHUB_WEB_URL_PREFIX)

    temp_path = url[len(GITHUB_WEB_URL_PREFIX):]

    query_index = temp_path.rfind("?")
    if query_index != -1:
        temp_path = temp_path[:query_index]

    match = _BLOB_URL_REGEX.search(temp_path)
    if match is None:
        raise URLParseError(url, BLOB_URL_PATTERN)

    owner, repo_name, ref, path = match.groups()
    logger.debug(f"Parsed blob URL {url}: owner={owner}, repo={repo_name}, ref={ref}, path={path}")

    return BlobURLInfo(
        owner=owner,
        repo_name=repo_name,
        ref=ref,
        path=path,
        original_url=url,
    )


def parse_file_url(url: str) -> Tuple[str, str, str]:
    """
    Parse a GitHub blob URL into (file path, owner, repository name).

    The ref is validated by the grammar but not returned; use
    parse_blob_url when it is needed.
    """
    info = parse_blob_url(url)
    return info.path, info.owner, info.repo_name
