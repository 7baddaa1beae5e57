"""Async GitHub Releases API client."""

import asyncio
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any, Self

import httpx


class GitHubAPIError(Exception):
    """Base exception for GitHub API errors."""


class RateLimitError(GitHubAPIError):
    """Raised when rate limit is exceeded."""

    def __init__(self, message: str, reset_at: datetime | None = None):
        """Initialize with reset time.

        Args:
            message: Error message.
            reset_at: When rate limit resets (UTC).
        """
        super().__init__(message)
        self.reset_at = reset_at


class AuthenticationError(GitHubAPIError):
    """Raised for authentication failures."""


class NotFoundError(GitHubAPIError):
    """Raised when repository doesn't exist or no access."""


class GitHubReleasesClient:
    """Async client for the GitHub releases endpoint.

    Handles authentication, rate limiting, and retries of transient failures.
    Pages are fetched strictly one after another.

    Attributes:
        BASE_URL: GitHub API base URL.
        PER_PAGE: Page size requested from the releases endpoint.
    """

    BASE_URL = "https://api.github.com"
    PER_PAGE = 100

    def __init__(self, token: str, timeout: float = 30.0, backoff: float = 1.0):
        """Initialize client with authentication token.

        Args:
            token: GitHub personal access token.
            timeout: Request timeout in seconds.
            backoff: Base delay in seconds between retries.
        """
        self.token = token
        self.timeout = timeout
        self.backoff = backoff
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=headers,
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        max_retries: int = 3,
    ) -> Any:
        """Execute request with retry logic.

        Args:
            method: HTTP method.
            path: API endpoint path.
            params: Query string parameters.
            max_retries: Maximum attempts for transient failures.

        Returns:
            Decoded JSON response.

        Raises:
            RateLimitError: When rate limit is exceeded.
            AuthenticationError: For auth failures.
            NotFoundError: When resource not found.
            GitHubAPIError: For other API errors.
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        last_error: Exception | None = None

        for attempt in range(max_retries):
            try:
                response = await self._client.request(method, path, params=params)

                if response.status_code == 200:
                    return response.json()

                if response.status_code == 401:
                    raise AuthenticationError("Invalid or expired token")

                if response.status_code == 403:
                    remaining = response.headers.get("X-RateLimit-Remaining", "1")
                    if remaining == "0":
                        reset_timestamp = int(response.headers.get("X-RateLimit-Reset", "0"))
                        reset_at = datetime.fromtimestamp(reset_timestamp, tz=UTC)
                        raise RateLimitError(
                            f"Rate limit exceeded. Resets at {reset_at.isoformat()}",
                            reset_at=reset_at,
                        )
                    raise AuthenticationError("Access forbidden - check token permissions")

                if response.status_code == 404:
                    raise NotFoundError(f"Repository not found or no access: {path}")

                # Server errors - retry
                if response.status_code >= 500:
                    last_error = GitHubAPIError(
                        f"Server error {response.status_code}: {response.text}"
                    )
                    await asyncio.sleep(self.backoff * 2**attempt)
                    continue

                raise GitHubAPIError(f"API error {response.status_code}: {response.text}")

            except httpx.RequestError as e:
                last_error = GitHubAPIError(f"Request failed: {e}")
                await asyncio.sleep(self.backoff * 2**attempt)

        raise last_error or GitHubAPIError("Request failed after retries")

    async def iter_release_pages(self, owner: str, repo: str) -> AsyncIterator[list[dict]]:
        """Yield pages of raw release objects until an empty page is returned.

        Args:
            owner: Repository owner/organization.
            repo: Repository name.

        Yields:
            Non-empty lists of release objects as returned by the API.
        """
        page = 1
        while True:
            data = await self._request(
                "GET",
                f"/repos/{owner}/{repo}/releases",
                params={"per_page": self.PER_PAGE, "page": page},
            )
            if not isinstance(data, list):
                raise GitHubAPIError(f"Unexpected releases payload for {owner}/{repo}")
            if not data:
                return
            yield data
            page += 1

    async def get_releases(self, owner: str, repo: str) -> list[dict]:
        """Fetch every release object of a repository.

        Args:
            owner: Repository owner/organization.
            repo: Repository name.

        Returns:
            Raw release objects across all pages, in API order (newest first).
        """
        releases: list[dict] = []
        async for page in self.iter_release_pages(owner, repo):
            releases.extend(page)
        return releases
