"""
GitHub API client for making authenticated requests.
Supports both personal access tokens and GitHub App installation tokens.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from repo_adapter.config.config import (
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    GITHUB_CONNECT_TIMEOUT,
    GITHUB_INSTALLATION_ID,
    GITHUB_REQUEST_TIMEOUT,
    GITHUB_TOKEN,
)
from repo_adapter.services.github.auth.installation_token_manager import InstallationTokenManager
from repo_adapter.services.github.errors import GitHubAPIError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/vnd.github+json"
RAW_MEDIA_TYPE = "application/vnd.github.raw+json"

SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
REDIRECT_STATUSES = (301, 302, 307)


class GitHubAPIClient:
    """Base client for GitHub API interactions with dual-mode authentication."""

    def __init__(
        self,
        token: Optional[str] = None,
        installation_id: Optional[int] = None,
        token_manager: Optional[InstallationTokenManager] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize GitHub API client.

        An explicit token wins over an installation; with neither, the client
        falls back to GITHUB_INSTALLATION_ID and then GITHUB_TOKEN.

        Args:
            token: Personal access token
            installation_id: GitHub App installation ID
            token_manager: Installation token manager (created on demand)
            base_url: API base URL (GitHub Enterprise support)
            timeout: Request timeout in seconds
            connect_timeout: Connection timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else GITHUB_REQUEST_TIMEOUT
        self.connect_timeout = connect_timeout if connect_timeout is not None else GITHUB_CONNECT_TIMEOUT
        self._transport = transport

        self.token = token
        self.installation_id = None
        self._installation_token_manager = None

        if not token:
            self.installation_id = installation_id or GITHUB_INSTALLATION_ID

        if self.installation_id:
            self._installation_token_manager = token_manager or InstallationTokenManager(
                base_url=self.base_url, transport=transport
            )
            logger.info(f"GitHub API client initialized with installation ID: {self.installation_id}")
        elif not token:
            self.token = GITHUB_TOKEN
            if not self.token:
                logger.warning("GitHub API client initialized without credentials - only public data is reachable")

    async def _get_token(self) -> Optional[str]:
        """Get authentication token (installation token or personal access token)."""
        if self.installation_id and self._installation_token_manager:
            return await self._installation_token_manager.get_installation_token(self.installation_id)
        return self.token

    async def _get_headers(self, accept: str = JSON_MEDIA_TYPE) -> Dict[str, str]:
        headers = {
            "Accept": accept,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        token = await self._get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _http_client(self, follow_redirects: bool = False) -> httpx.AsyncClient:
        timeout_config = httpx.Timeout(self.timeout, connect=self.connect_timeout)
        return httpx.AsyncClient(
            timeout=timeout_config,
            trust_env=False,
            follow_redirects=follow_redirects,
            transport=self._transport,
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make a GitHub API request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: API path (without base URL)
            data: JSON request body
            params: Query parameters

        Returns:
            Decoded JSON body, or an empty dict when there is none

        Raises:
            ValueError: If the HTTP method is unsupported
            GitHubAPIError: If the request fails or GitHub answers with an error
        """
        method_upper = method.upper()
        if method_upper not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = self._url(path)
        headers = await self._get_headers()

        try:
            async with self._http_client() as client:
                response = await client.request(
                    method_upper, url, json=data, params=params, headers=headers
                )
        except httpx.RequestError as e:
            error_msg = f"GitHub API request error: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg)

        return self._process_response(response, method_upper, url)

    def _process_response(self, response: httpx.Response, method: str, url: str) -> Any:
        """Return the JSON body of a successful response or raise GitHubAPIError."""
        if response.is_success:
            logger.info(f"GitHub API {method} request to {url} successful (status: {response.status_code})")
            if response.content:
                try:
                    return response.json()
                except ValueError:
                    return {}
            return {}

        raise self._build_error(response, f"GitHub API {method} {url} failed")

    @staticmethod
    def _build_error(response: httpx.Response, description: str) -> GitHubAPIError:
        message = None
        try:
            body = response.json()
            if isinstance(body, dict):
                message = body.get("message")
        except ValueError:
            pass

        error_msg = f"{description} (status {response.status_code}): {message or response.text}"
        if response.status_code == 404:
            logger.warning(error_msg)
        else:
            logger.error(error_msg)

        return GitHubAPIError(
            error_msg,
            status_code=response.status_code,
            message=message,
            rate_limit_remaining=response.headers.get("X-RateLimit-Remaining"),
        )

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, data=data)

    async def patch(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PATCH", path, data=data)

    async def delete(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", path, data=data)

    async def download_raw(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """Download an API resource's raw body (e.g. file contents).

        The response is streamed and closed before returning, on success
        and on failure alike.

        Raises:
            GitHubAPIError: If the request fails or GitHub answers with an error
        """
        url = self._url(path)
        headers = await self._get_headers(accept=RAW_MEDIA_TYPE)

        try:
            async with self._http_client(follow_redirects=True) as client:
                async with client.stream("GET", url, params=params, headers=headers) as response:
                    content = await response.aread()
        except httpx.RequestError as e:
            error_msg = f"GitHub raw download error: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg)

        if not response.is_success:
            raise self._build_error(response, f"GitHub raw download of {url} failed")

        logger.info(f"Downloaded {len(content)} bytes from {url}")
        return content

    async def get_redirect_location(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        max_redirects: int = 3,
    ) -> str:
        """Resolve an API endpoint that answers with a redirect to its target URL.

        A temporary redirect (302/307) is the answer. A permanent redirect
        (301) means the resource moved, so it is followed, at most
        max_redirects times.

        Raises:
            GitHubAPIError: On any other status, too many redirects or a
                transport failure
        """
        url = self._url(path)
        headers = await self._get_headers()

        try:
            async with self._http_client(follow_redirects=False) as client:
                for _ in range(max_redirects + 1):
                    response = await client.get(url, params=params, headers=headers)

                    if response.status_code not in REDIRECT_STATUSES:
                        raise self._build_error(response, f"Unexpected response resolving {url}")

                    location = response.headers.get("Location")
                    if not location:
                        raise GitHubAPIError(
                            f"Redirect from {url} carries no Location header",
                            status_code=response.status_code,
                        )

                    if response.status_code != 301:
                        logger.debug(f"Resolved {url} to {location}")
                        return location

                    logger.debug(f"{url} moved permanently to {location}")
                    url = location
                    params = None
        except httpx.RequestError as e:
            error_msg = f"GitHub API request error: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg)

        error_msg = f"Stopped after {max_redirects} redirects resolving {path}"
        logger.error(error_msg)
        raise GitHubAPIError(error_msg)

    async def fetch_url(self, url: str, description: str = "resource") -> bytes:
        """Plain unauthenticated GET of an absolute URL, such as a signed download link.

        Raises:
            GitHubAPIError: If the status is not 200 (the message carries the
                status text) or the transport fails
        """
        try:
            async with self._http_client(follow_redirects=True) as client:
                async with client.stream("GET", url) as response:
                    if response.status_code != 200:
                        error_msg = (
                            f"failed to fetch {description}: "
                            f"{response.status_code} {response.reason_phrase}"
                        )
                        logger.error(error_msg)
                        raise GitHubAPIError(error_msg, status_code=response.status_code)
                    content = await response.aread()
        except httpx.RequestError as e:
            error_msg = f"Error fetching {description}: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg)

        logger.info(f"Fetched {description} ({len(content)} bytes)")
        return content
