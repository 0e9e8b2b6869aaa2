"""Report run configuration."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from pr_reporter.models.report import PAGE_CEILING, DateRange

DEFAULT_BRANCH = "develop"
PAGE_SIZE = 100


def parse_skip_list(raw: str | None) -> frozenset[str]:
    """Split a comma-separated repository list, trimming blanks."""
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


class ReportConfig(BaseModel):
    """Configuration for a merged-PR report run."""

    organization: str = Field(..., min_length=1, description="GitHub organization")
    branch: str = Field(default=DEFAULT_BRANCH, min_length=1, description="Target branch")
    date_range: DateRange = Field(..., description="Merge date window")
    skip_repos: frozenset[str] = Field(
        default_factory=frozenset, description="Repository short names to exclude"
    )

    # Pagination
    per_page: int = Field(default=PAGE_SIZE, gt=0, le=100, description="Items per page")
    max_pages: int = Field(
        default=PAGE_CEILING, gt=0, le=PAGE_CEILING, description="Page ceiling per repository"
    )

    # Network and scheduling
    timeout_sec: float = Field(default=30.0, gt=0, description="Per-request timeout")
    max_concurrency: int = Field(default=1, ge=1, description="Repositories processed at once")

    output_dir: Path = Field(default=Path("pr_reports"), description="Output directory")

    @field_validator("skip_repos", mode="before")
    @classmethod
    def _split_skip_repos(cls, value):
        if value is None or isinstance(value, str):
            return parse_skip_list(value)
        return frozenset(str(item).strip() for item in value if str(item).strip())
