"""GitHub REST API client for paged listings."""

import logging
import os
from typing import Any
from urllib.parse import quote

import httpx

from pr_reporter.github.errors import (
    GitHubConfigError,
    RateLimitError,
    TransientFetchError,
)
from pr_reporter.models.pr import RepositoryRef

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitHubClient:
    """Client for interacting with GitHub API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout_sec: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub API token. If None, reads from GITHUB_TOKEN or GH_TOKEN env var.
            base_url: API root. If None, reads from GITHUB_API_URL env var.
            timeout_sec: Timeout applied to every request
            http_client: Optional pre-configured client (owned by the caller)
        """
        if timeout_sec <= 0:
            raise GitHubConfigError("timeout_sec must be positive")

        self.token = token or os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
        self.base_url = (base_url or os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.timeout_sec = timeout_sec
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "GitHubClient":
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        if self._client is None:
            raise GitHubConfigError("GitHubClient must be used as an async context manager")

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            return await self._client.get(
                url, params=params, headers=self.headers, timeout=self.timeout_sec
            )
        except httpx.TimeoutException as e:
            raise TransientFetchError(f"Timed out after {self.timeout_sec}s: GET {path}") from e
        except httpx.HTTPError as e:
            raise TransientFetchError(f"Request failed: GET {path}: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        status = response.status_code
        if status < 400:
            return

        retry_after = response.headers.get("Retry-After")
        remaining = response.headers.get("X-RateLimit-Remaining")
        if status == 429 or (status == 403 and (remaining == "0" or retry_after)):
            raise RateLimitError(
                f"Rate limited (HTTP {status}): GET {path}",
                status_code=status,
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
            )

        raise TransientFetchError(f"GitHub API HTTP {status}: GET {path}", status_code=status)

    async def fetch_page(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        page: int = 1,
        per_page: int = 100,
    ) -> list[dict[str, Any]]:
        """
        Fetch one page of a listing endpoint.

        Args:
            path: Resource path (e.g. ``orgs/myorg/repos``)
            params: Query filters
            page: 1-based page number
            per_page: Page size

        Returns:
            Decoded items of the page; empty when there is no more data

        Raises:
            TransientFetchError: On network errors, timeouts or bad responses
            RateLimitError: If GitHub enforces a rate limit
        """
        query = dict(params or {})
        query.update(page=page, per_page=per_page)

        logger.debug("GET %s page=%d per_page=%d", path, page, per_page)
        response = await self._get(path, params=query)
        self._raise_for_status(response, path)

        try:
            items = response.json()
        except ValueError as e:
            raise TransientFetchError(f"Invalid JSON from GET {path}") from e

        if not isinstance(items, list):
            raise TransientFetchError(f"Expected a list from GET {path}, got {type(items).__name__}")
        return items

    async def branch_exists(self, repo: RepositoryRef, branch: str) -> bool:
        """
        Check whether a branch exists on a repository.

        Args:
            repo: Repository
            branch: Branch name

        Returns:
            True if the branch exists, False on HTTP 404 or a redirect

        Raises:
            GitHubFetchError: If the check itself fails
        """
        path = f"repos/{repo.full_name}/branches/{quote(branch, safe='/')}"
        response = await self._get(path)
        if response.status_code == 404:
            return False
        self._raise_for_status(response, path)
        if not response.is_success:
            # Renamed branches answer with a redirect to the new name
            logger.info(
                "GET %s answered HTTP %d, branch treated as missing", path, response.status_code
            )
            return False
        return True
