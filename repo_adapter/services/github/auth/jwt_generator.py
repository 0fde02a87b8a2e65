"""
GitHub App JWT generator.

Signs the short-lived RS256 JSON Web Token a GitHub App presents when it asks
for installation access tokens.
"""

import logging
import time
from pathlib import Path
from typing import Optional

import jwt

from repo_adapter.config.config import (
    GITHUB_APP_ID,
    GITHUB_APP_PRIVATE_KEY_CONTENT,
    GITHUB_APP_PRIVATE_KEY_PATH,
)

logger = logging.getLogger(__name__)

# GitHub rejects app JWTs valid for longer than ten minutes
MAX_JWT_EXPIRATION_SECONDS = 600


class GitHubAppJWTGenerator:
    """Generates JWT tokens for GitHub App authentication."""

    def __init__(
        self,
        app_id: Optional[str] = None,
        private_key: Optional[str] = None,
        private_key_path: Optional[str] = None,
    ):
        """
        Initialize JWT generator.

        Args:
            app_id: GitHub App ID (defaults to config)
            private_key: PEM private key content (defaults to config)
            private_key_path: Path to private key .pem file (defaults to config)

        Raises:
            ValueError: If the app ID or both key sources are missing
        """
        self.app_id = app_id or GITHUB_APP_ID
        self._private_key = private_key or GITHUB_APP_PRIVATE_KEY_CONTENT
        self.private_key_path = private_key_path or GITHUB_APP_PRIVATE_KEY_PATH

        if not self.app_id:
            raise ValueError("GitHub App ID is required. Set GITHUB_APP_ID in environment.")

        if not self._private_key and not self.private_key_path:
            raise ValueError(
                "GitHub App private key is required. Set GITHUB_APP_PRIVATE_KEY_CONTENT "
                "or GITHUB_APP_PRIVATE_KEY_PATH in environment."
            )

    def _load_private_key(self) -> str:
        """
        Return the private key, reading it from disk on first use.

        Raises:
            FileNotFoundError: If the configured key file does not exist
            ValueError: If the key is empty or cannot be read
        """
        if self._private_key:
            return self._private_key

        key_path = Path(self.private_key_path)
        if not key_path.exists():
            raise FileNotFoundError(f"GitHub App private key not found at: {key_path}")

        try:
            private_key = key_path.read_text()
        except OSError as e:
            logger.error(f"Failed to read private key from {key_path}: {e}")
            raise ValueError(f"Failed to load GitHub App private key: {e}")

        if not private_key.strip():
            raise ValueError(f"Private key file {key_path} is empty")

        logger.info(f"Loaded GitHub App private key from {key_path}")
        self._private_key = private_key
        return private_key

    def generate_jwt(self, expiration_seconds: int = MAX_JWT_EXPIRATION_SECONDS) -> str:
        """
        Generate a JWT for GitHub App authentication.

        Args:
            expiration_seconds: Token lifetime, capped at 600 seconds

        Returns:
            Encoded JWT

        Raises:
            ValueError: If the expiration is not positive or signing fails
        """
        if expiration_seconds < 1:
            raise ValueError("Expiration must be at least 1 second")

        if expiration_seconds > MAX_JWT_EXPIRATION_SECONDS:
            logger.warning(
                f"Requested JWT expiration {expiration_seconds}s exceeds GitHub's limit, "
                f"using {MAX_JWT_EXPIRATION_SECONDS}s"
            )
            expiration_seconds = MAX_JWT_EXPIRATION_SECONDS

        private_key = self._load_private_key()
        now = int(time.time())

        payload = {
            # Backdated to tolerate clock drift between us and GitHub
            "iat": now - 60,
            "exp": now + expiration_seconds,
            "iss": str(self.app_id),
        }

        try:
            token = jwt.encode(payload, private_key, algorithm="RS256")
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            logger.error(f"Failed to sign GitHub App JWT: {e}")
            raise ValueError(f"Failed to generate GitHub App JWT: {e}")

        logger.debug(f"Generated GitHub App JWT (app_id={self.app_id}, expires in {expiration_seconds}s)")
        return token
