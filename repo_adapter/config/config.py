"""
Configuration module for the repository adapter.

Values are read from the environment once at import time; a local .env file
is honoured for development.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def get_env_float(key: str, default: float) -> float:
    """Get a float environment variable, falling back to default when unset."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise Exception(f"{key} must be a number, got {value!r}")


def get_env_int(key: str, default: int) -> int:
    """Get an integer environment variable, falling back to default when unset."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise Exception(f"{key} must be an integer, got {value!r}")


# GitHub REST API
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_API_VERSION = os.getenv("GITHUB_API_VERSION", "2022-11-28")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")

# Transport
GITHUB_REQUEST_TIMEOUT = get_env_float("GITHUB_REQUEST_TIMEOUT", 150.0)
GITHUB_CONNECT_TIMEOUT = get_env_float("GITHUB_CONNECT_TIMEOUT", 60.0)
# GitHub recommends following at most three redirects for archive links
GITHUB_ARCHIVE_MAX_REDIRECTS = get_env_int("GITHUB_ARCHIVE_MAX_REDIRECTS", 3)

# GitHub App authentication (private repositories)
GITHUB_APP_ID = os.getenv("GITHUB_APP_ID")
GITHUB_APP_PRIVATE_KEY_PATH = os.getenv("GITHUB_APP_PRIVATE_KEY_PATH")
GITHUB_APP_PRIVATE_KEY_CONTENT = os.getenv("GITHUB_APP_PRIVATE_KEY_CONTENT")
GITHUB_INSTALLATION_ID = get_env_int("GITHUB_INSTALLATION_ID", 0) or None

# Web URLs accepted by the blob URL parser
GITHUB_WEB_URL_PREFIX = "https://github.com/"
