"""
Exceptions raised by the GitHub repository adapter.
"""

from typing import Optional


class RepositoryURLError(ValueError):
    """Base class for GitHub web URL parsing failures."""


class InvalidURLFormatError(RepositoryURLError):
    """URL does not start with the expected GitHub prefix."""

    def __init__(self, expected_prefix: str):
        self.expected_prefix = expected_prefix
        super().__init__(
            f"IDL path format is incorrect; it does not have the expected prefix: {expected_prefix}"
        )


class URLParseError(RepositoryURLError):
    """URL has the GitHub prefix but does not follow the blob URL grammar."""

    def __init__(self, url: str, pattern: str):
        self.url = url
        self.pattern = pattern
        super().__init__(
            f"IDL path format is incorrect; unable to parse the GitHub URL {url!r} "
            f"(expected https://github.com/{pattern})"
        )


class GitHubAPIError(Exception):
    """A GitHub API request failed.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
            request never produced a response (connection errors, timeouts)
        message: Error message reported by GitHub, when the body carried one
        rate_limit_remaining: Value of the X-RateLimit-Remaining header
    """

    def __init__(
        self,
        description: str,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        rate_limit_remaining: Optional[str] = None,
    ):
        super().__init__(description)
        self.status_code = status_code
        self.message = message
        self.rate_limit_remaining = rate_limit_remaining

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code in (403, 429) and self.rate_limit_remaining == "0"
