"""Tests for the GitHub paging client and branch checker."""

import httpx
import pytest

from conftest import API_URL
from pr_reporter.github.client import GitHubClient
from pr_reporter.github.errors import (
    GitHubConfigError,
    GitHubFetchError,
    RateLimitError,
    TransientFetchError,
)
from pr_reporter.models.pr import RepositoryRef


def _client(handler) -> GitHubClient:
    return GitHubClient(
        token="secret",
        base_url=API_URL,
        timeout_sec=5.0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_fetch_page_sends_filters_and_headers():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"number": 1}])

    async with _client(handler) as client:
        items = await client.fetch_page(
            "repos/org/app/pulls", {"state": "closed", "base": "develop"}, page=3, per_page=50
        )

    assert items == [{"number": 1}]
    request = seen[0]
    assert request.url.path == "/repos/org/app/pulls"
    assert request.url.params["state"] == "closed"
    assert request.url.params["base"] == "develop"
    assert request.url.params["page"] == "3"
    assert request.url.params["per_page"] == "50"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Accept"] == "application/vnd.github+json"


@pytest.mark.asyncio
async def test_fetch_page_empty_list_is_not_an_error():
    async with _client(lambda request: httpx.Response(200, json=[])) as client:
        assert await client.fetch_page("orgs/org/repos") == []


@pytest.mark.asyncio
async def test_server_error_is_transient():
    async with _client(lambda request: httpx.Response(502, text="bad gateway")) as client:
        with pytest.raises(TransientFetchError) as exc_info:
            await client.fetch_page("orgs/org/repos")
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_non_list_payload_is_transient():
    async with _client(lambda request: httpx.Response(200, json={"message": "?"})) as client:
        with pytest.raises(TransientFetchError):
            await client.fetch_page("orgs/org/repos")


@pytest.mark.asyncio
async def test_timeout_is_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(TransientFetchError, match="Timed out"):
            await client.fetch_page("orgs/org/repos")


@pytest.mark.asyncio
async def test_connection_error_is_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(TransientFetchError):
            await client.fetch_page("orgs/org/repos")


@pytest.mark.asyncio
async def test_too_many_requests_is_rate_limit():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, headers={"Retry-After": "60"}, json={"message": "slow down"})

    async with _client(handler) as client:
        with pytest.raises(RateLimitError) as exc_info:
            await client.fetch_page("orgs/org/repos")
    assert exc_info.value.retry_after == 60.0
    assert isinstance(exc_info.value, GitHubFetchError)


@pytest.mark.asyncio
async def test_exhausted_quota_is_rate_limit():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, headers={"X-RateLimit-Remaining": "0"}, json={})

    async with _client(handler) as client:
        with pytest.raises(RateLimitError):
            await client.fetch_page("orgs/org/repos")


@pytest.mark.asyncio
async def test_plain_forbidden_is_transient():
    async with _client(lambda request: httpx.Response(403, json={})) as client:
        with pytest.raises(TransientFetchError):
            await client.fetch_page("orgs/org/repos")


@pytest.mark.asyncio
async def test_branch_exists(fake_github):
    fake_github.add_repo("org/app", branches={"develop", "release/1.0"})
    repo = RepositoryRef(full_name="org/app")

    async with fake_github.client() as client:
        assert await client.branch_exists(repo, "develop")
        assert await client.branch_exists(repo, "release/1.0")
        assert not await client.branch_exists(repo, "main")


@pytest.mark.asyncio
async def test_branch_check_failure_raises(fake_github):
    fake_github.add_repo("org/app", branches={"develop"})
    fake_github.failures[("repos/org/app/branches/develop", None)] = 500

    async with fake_github.client() as client:
        with pytest.raises(TransientFetchError):
            await client.branch_exists(RepositoryRef(full_name="org/app"), "develop")


@pytest.mark.asyncio
async def test_branch_redirect_is_missing(fake_github):
    fake_github.add_repo("org/app", branches={"develop"})
    fake_github.failures[("repos/org/app/branches/develop", None)] = 301

    async with fake_github.client() as client:
        assert not await client.branch_exists(RepositoryRef(full_name="org/app"), "develop")


@pytest.mark.asyncio
async def test_client_requires_context():
    client = GitHubClient(token="secret", base_url=API_URL)
    with pytest.raises(GitHubConfigError):
        await client.fetch_page("orgs/org/repos")


def test_token_from_environment(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("GH_TOKEN", "from-gh")
    client = GitHubClient(base_url=API_URL)
    assert client.headers["Authorization"] == "Bearer from-gh"


def test_invalid_timeout():
    with pytest.raises(GitHubConfigError):
        GitHubClient(token="secret", timeout_sec=0)
