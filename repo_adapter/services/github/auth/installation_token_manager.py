"""
GitHub App installation access token manager.

Exchanges the app JWT for installation tokens and caches them per
installation until shortly before they expire.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

import httpx

from repo_adapter.config.config import GITHUB_API_URL, GITHUB_API_VERSION
from repo_adapter.services.github.auth.jwt_generator import GitHubAppJWTGenerator
from repo_adapter.services.github.errors import GitHubAPIError

logger = logging.getLogger(__name__)


@dataclass
class InstallationToken:
    """A GitHub App installation access token."""

    token: str
    expires_at: str  # ISO 8601, e.g. 2026-01-01T00:00:00Z

    def is_expired(self, buffer_seconds: int = 300) -> bool:
        """Whether the token has expired or will within buffer_seconds."""
        try:
            expires_at = datetime.fromisoformat(self.expires_at.replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable installation token expiry {self.expires_at!r}")
            return True

        remaining = (expires_at - datetime.now(timezone.utc)).total_seconds()
        return remaining <= buffer_seconds


class InstallationTokenManager:
    """Manages GitHub App installation access tokens with caching."""

    def __init__(
        self,
        jwt_generator: Optional[GitHubAppJWTGenerator] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize installation token manager.

        Args:
            jwt_generator: JWT generator instance (creates new if not provided)
            base_url: GitHub API base URL (defaults to config)
            transport: Optional httpx transport, used by tests
        """
        self.jwt_generator = jwt_generator or GitHubAppJWTGenerator()
        self.base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self._transport = transport
        self._token_cache: Dict[int, InstallationToken] = {}
        self._cache_lock = asyncio.Lock()

    async def get_installation_token(self, installation_id: int) -> str:
        """
        Get an installation access token, reusing the cached one while valid.

        Raises:
            GitHubAPIError: If GitHub refuses to issue a token
        """
        async with self._cache_lock:
            cached_token = self._token_cache.get(installation_id)
            if cached_token and not cached_token.is_expired():
                logger.debug(f"Using cached installation token for installation {installation_id}")
                return cached_token.token

            logger.info(f"Requesting new installation token for installation {installation_id}")
            token = await self._request_installation_token(installation_id)
            self._token_cache[installation_id] = token
            return token.token

    async def _request_installation_token(self, installation_id: int) -> InstallationToken:
        url = f"{self.base_url}/app/installations/{installation_id}/access_tokens"
        headers = {
            "Authorization": f"Bearer {self.jwt_generator.generate_jwt()}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

        try:
            timeout_config = httpx.Timeout(30.0, connect=10.0)
            async with httpx.AsyncClient(
                timeout=timeout_config, trust_env=False, transport=self._transport
            ) as client:
                response = await client.post(url, headers=headers)
        except httpx.RequestError as e:
            error_msg = f"Network error requesting installation token: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg)

        if response.status_code != 201:
            error_msg = (
                f"Failed to get installation token (status {response.status_code}): {response.text}"
            )
            logger.error(error_msg)
            raise GitHubAPIError(error_msg, status_code=response.status_code)

        data = response.json()
        token = InstallationToken(token=data["token"], expires_at=data["expires_at"])
        logger.info(
            f"Obtained installation token for installation {installation_id} "
            f"(expires at {token.expires_at})"
        )
        return token

    def clear_cache(self, installation_id: Optional[int] = None):
        """
        Clear cached tokens.

        Args:
            installation_id: Clear only this installation's token; all when None
        """
        if installation_id is not None:
            self._token_cache.pop(installation_id, None)
            logger.info(f"Cleared cached token for installation {installation_id}")
        else:
            self._token_cache.clear()
            logger.info("Cleared all cached installation tokens")
