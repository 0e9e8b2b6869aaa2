"""Shared fixtures: an in-memory GitHub REST API behind httpx.MockTransport."""

import asyncio
from datetime import date
from typing import Any

import httpx
import pytest

from pr_reporter.github.client import GitHubClient
from pr_reporter.models.report import DateRange

API_URL = "https://api.example.test"


def pr_item(
    number: int,
    merged_at: str | None,
    *,
    title: str | None = None,
    branch: str | None = None,
    author: str = "octocat",
    reviewers: int = 0,
    updated_at: str | None = None,
) -> dict[str, Any]:
    """Build a pull request item shaped like the REST listing response."""
    return {
        "number": number,
        "title": title if title is not None else f"Change {number}",
        "state": "closed",
        "merged_at": merged_at,
        "updated_at": updated_at or merged_at or "2024-12-31T00:00:00Z",
        "head": {"ref": branch or f"feature/{number}"},
        "user": {"login": author},
        "html_url": f"https://github.com/acme/repo/pull/{number}",
        "requested_reviewers": [{"login": f"reviewer{i}"} for i in range(reviewers)],
    }


class FakeGitHub:
    """Routes requests for org repos, branches and pulls to in-memory data."""

    def __init__(self):
        self.repos: list[str] = []
        self.branches: dict[str, set[str]] = {}
        self.pulls: dict[str, list[dict[str, Any]]] = {}
        # (path, page) -> HTTP status, exception, or coroutine function
        self.failures: dict[tuple[str, int | None], Any] = {}
        self.requests: list[httpx.Request] = []

    def add_repo(
        self,
        full_name: str,
        branches: set[str] | None = None,
        pulls: list[dict[str, Any]] | None = None,
    ) -> None:
        self.repos.append(full_name)
        self.branches[full_name] = set(branches or ())
        self.pulls[full_name] = list(pulls or ())

    @staticmethod
    def _page(items: list[Any], page: int, per_page: int) -> httpx.Response:
        start = (page - 1) * per_page
        return httpx.Response(200, json=items[start : start + per_page])

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.lstrip("/")
        page = int(request.url.params.get("page", 1))
        per_page = int(request.url.params.get("per_page", 30))

        failure = self.failures.get((path, page), self.failures.get((path, None)))
        if isinstance(failure, int):
            return httpx.Response(failure, json={"message": "failure"})
        if isinstance(failure, Exception):
            raise failure
        if callable(failure):
            return await failure(request)

        parts = path.split("/")
        if parts[0] == "orgs" and parts[2:] == ["repos"]:
            return self._page([{"full_name": name} for name in self.repos], page, per_page)

        if parts[0] == "repos" and len(parts) >= 4:
            repo = "/".join(parts[1:3])
            if parts[3] == "branches":
                branch = "/".join(parts[4:])
                if branch in self.branches.get(repo, set()):
                    return httpx.Response(200, json={"name": branch})
                return httpx.Response(404, json={"message": "Branch not found"})
            if parts[3] == "pulls":
                return self._page(self.pulls.get(repo, []), page, per_page)

        return httpx.Response(404, json={"message": "Not Found"})

    def client(self, **kwargs) -> GitHubClient:
        transport = httpx.MockTransport(self.handler)
        return GitHubClient(
            token="test-token",
            base_url=API_URL,
            http_client=httpx.AsyncClient(transport=transport),
            **kwargs,
        )

    def requested(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == f"/{path}"]

    def pages_requested(self, path: str) -> list[int]:
        return [int(request.url.params["page"]) for request in self.requested(path)]


def hanging_response() -> Any:
    """A failure hook that never answers, and an event set once it is reached."""
    reached = asyncio.Event()

    async def _hang(request: httpx.Request) -> httpx.Response:
        reached.set()
        await asyncio.Event().wait()
        raise AssertionError("unreachable")

    return _hang, reached


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def november() -> DateRange:
    return DateRange(start=date(2024, 11, 1), end=date(2024, 11, 30))
