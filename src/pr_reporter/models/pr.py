"""Repository and pull request models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

APPROVAL_STATUS_PLACEHOLDER = "See PR URL"


class RepositoryRef(BaseModel):
    """Organization-qualified repository identifier (e.g. ``org/name``)."""

    model_config = ConfigDict(frozen=True)

    full_name: str = Field(..., description="Repository full name, case preserved")

    @property
    def owner(self) -> str:
        """Organization part of the identifier."""
        return self.full_name.rsplit("/", 1)[0] if "/" in self.full_name else ""

    @property
    def name(self) -> str:
        """Short repository name (part after the last slash)."""
        return self.full_name.rsplit("/", 1)[-1]

    def matches(self, short_name: str) -> bool:
        """Case-insensitive exact comparison against a short repository name."""
        return self.name.casefold() == short_name.strip().casefold()

    def __lt__(self, other: "RepositoryRef") -> bool:
        return self.full_name < other.full_name

    def __str__(self) -> str:
        return self.full_name


class PullRequestRecord(BaseModel):
    """A pull request merged into the audited branch."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., gt=0, description="PR number")
    title: str = Field(..., description="PR title")
    branch: str = Field(..., description="PR source branch name")
    merged_at: str = Field(..., description="Merge timestamp (UTC, ISO-8601)")
    author: str = Field(..., description="Author login")
    url: str = Field(..., description="PR html URL")
    reviewers_requested: int = Field(default=0, ge=0, description="Requested reviewer count")
    # Real approval counts need one extra request per PR
    approval_status: str = Field(
        default=APPROVAL_STATUS_PLACEHOLDER, description="Approval status placeholder"
    )

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "PullRequestRecord":
        """
        Build a record from a GitHub REST pull request item.

        Args:
            item: Decoded item from ``GET /repos/{owner}/{repo}/pulls``

        Returns:
            PullRequestRecord

        Raises:
            ValueError: If the item has not been merged
        """
        if not item.get("merged_at"):
            raise ValueError(f"PR #{item.get('number')} has not been merged")

        user = item.get("user") or {}
        head = item.get("head") or {}
        return cls(
            number=item["number"],
            title=item.get("title") or "",
            branch=head.get("ref") or "",
            merged_at=item["merged_at"],
            author=user.get("login") or "ghost",
            url=item.get("html_url") or "",
            reviewers_requested=len(item.get("requested_reviewers") or []),
        )

    @property
    def merged_date(self) -> str:
        """Merge date without the time part."""
        return self.merged_at.split("T", 1)[0]
