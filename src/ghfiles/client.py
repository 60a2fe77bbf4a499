"""GitHub API client."""

import logging
import os
import subprocess
from typing import Any

import httpx

from .errors import GitHubAPIError, SchemaValidationError, error_for_status

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0  # seconds
API_VERSION = "2022-11-28"


def get_token_from_gh_cli() -> str | None:
    """
    Get GitHub token from gh cli.

    Returns:
        Token string or None if gh cli not available/authenticated
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            logger.info("Using token from gh cli")
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("gh cli not available: %s", e)
    return None


def get_token(token: str | None = None, use_gh_cli: bool = False) -> str | None:
    """
    Get GitHub token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GH_TOKEN / GITHUB_TOKEN
    3. gh cli (`gh auth token`) - only if use_gh_cli=True

    Args:
        token: Explicitly provided token
        use_gh_cli: Whether to use gh cli credentials (requires user consent)

    Returns:
        GitHub token or None
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    env_token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if env_token:
        logger.info("Using token from environment variable")
        return env_token

    if use_gh_cli:
        return get_token_from_gh_cli()

    return None


def get_base_url(base_url: str | None = None) -> str:
    """Resolve the API root: argument, then GITHUB_API_URL, then api.github.com."""
    resolved = base_url or os.environ.get("GITHUB_API_URL") or DEFAULT_BASE_URL
    return resolved.rstrip("/")


class GitHubClient:
    """Async GitHub REST API transport."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        use_gh_cli: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token (optional)
            base_url: Custom base URL (defaults to GITHUB_API_URL or GitHub API)
            timeout: Request timeout in seconds
            use_gh_cli: Use gh cli credentials (requires user consent)
            transport: Custom httpx transport (tests inject a MockTransport)
        """
        self.base_url = get_base_url(base_url)
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "ghfiles-client",
        }

        resolved_token = get_token(token, use_gh_cli=use_gh_cli)

        if resolved_token:
            self.headers["Authorization"] = f"Bearer {resolved_token}"
            logger.debug("GitHub client initialized with token")
        else:
            logger.warning("GitHub client initialized without token (writes will fail)")
        logger.info("GitHub client ready, base_url=%s", self.base_url)

    async def request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make one HTTP request to the GitHub API.

        Args:
            method: HTTP method
            endpoint: API path starting with "/"
            params: Query parameters
            json: Request body

        Returns:
            Decoded JSON body ({} when the body is empty)

        Raises:
            GitHubFilesError: Subclass matching the response status, or
                GitHubAPIError when the request never got a response
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug("Request: %s %s", method, url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                transport=self.transport,
                follow_redirects=True,
            ) as client:
                response = await client.request(method, url, params=params, json=json)
        except httpx.RequestError as e:
            logger.error("Request failed: %s %s: %s", method, endpoint, e)
            raise GitHubAPIError(
                f"GitHub API request error: {method} {endpoint}: {e}", cause=e
            ) from e

        logger.debug(
            "Response: %s %s (status=%d)",
            method,
            endpoint,
            response.status_code,
        )

        # 3xx left over (no Location, too many hops) is a failure too
        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            error = error_for_status(response.status_code, body)
            logger.error("%s %s failed: %s", method, endpoint, error)
            raise error

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise SchemaValidationError(
                f"Response to {method} {endpoint} is not JSON: {e}", cause=e
            ) from e
