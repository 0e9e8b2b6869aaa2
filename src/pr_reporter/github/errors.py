"""GitHub API errors."""


class GitHubError(Exception):
    """Base exception for GitHub access failures."""


class GitHubConfigError(GitHubError):
    """Raised when client configuration is invalid."""


class GitHubFetchError(GitHubError):
    """Raised when a single request against the GitHub API fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransientFetchError(GitHubFetchError):
    """Raised for network errors, timeouts and unexpected API responses."""


class RateLimitError(GitHubFetchError):
    """Raised when GitHub enforces a rate limit."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class FatalError(GitHubError):
    """Raised when the run cannot continue (no repositories to report on)."""

    @classmethod
    def repositories_unavailable(cls, organization: str, cause: Exception) -> "FatalError":
        """Return an error for an organization whose repositories cannot be listed."""
        return cls(f"Could not fetch repositories from {organization}: {cause}")

    @classmethod
    def no_repositories(cls, organization: str) -> "FatalError":
        """Return an error for an organization without repositories."""
        return cls(f"Organization {organization} has no repositories")
