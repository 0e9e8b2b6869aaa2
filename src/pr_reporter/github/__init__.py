"""GitHub API access."""

from pr_reporter.github.client import GitHubClient
from pr_reporter.github.errors import (
    FatalError,
    GitHubError,
    GitHubFetchError,
    RateLimitError,
    TransientFetchError,
)
from pr_reporter.github.repositories import list_organization_repositories

__all__ = [
    "FatalError",
    "GitHubClient",
    "GitHubError",
    "GitHubFetchError",
    "RateLimitError",
    "TransientFetchError",
    "list_organization_repositories",
]
