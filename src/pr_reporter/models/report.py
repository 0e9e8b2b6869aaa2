"""Report pipeline models."""

from datetime import date, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pr_reporter.models.pr import PullRequestRecord, RepositoryRef

PAGE_CEILING = 200


class DateRange(BaseModel):
    """Inclusive calendar date window matched against merge timestamps."""

    model_config = ConfigDict(frozen=True)

    start: date = Field(..., description="First day of the window")
    end: date = Field(default_factory=date.today, description="Last day of the window")

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError(
                f"Start date {self.start} must be before or equal to end date {self.end}"
            )
        return self

    @property
    def start_bound(self) -> str:
        """Earliest merge timestamp inside the window."""
        return f"{self.start.isoformat()}T00:00:00Z"

    @property
    def end_bound(self) -> str:
        """Latest merge timestamp inside the window."""
        return f"{self.end.isoformat()}T23:59:59Z"

    def contains(self, merged_at: str | None) -> bool:
        """
        Check whether a merge timestamp falls inside the window.

        Timestamps are zero-padded UTC ISO-8601 strings, so lexical
        comparison orders them correctly.
        """
        if not merged_at:
            return False
        return self.start_bound <= merged_at <= self.end_bound

    def __str__(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


class FetchStats(BaseModel):
    """Per-repository pagination statistics."""

    model_config = ConfigDict(frozen=True)

    total_matched: int = Field(default=0, ge=0, description="Matching PR count")
    pages_fetched: int = Field(
        default=0, ge=0, le=PAGE_CEILING, description="Pages successfully fetched"
    )
    pages_with_matches: int = Field(
        default=0, ge=0, description="Pages with at least one matching PR"
    )
    malformed_items: int = Field(
        default=0, ge=0, description="Listing items that could not be parsed"
    )
    ceiling_hit: bool = Field(default=False, description="Stopped at the page ceiling")
    error: str | None = Field(default=None, description="Fetch error that ended collection")

    @model_validator(mode="after")
    def _check_pages(self) -> "FetchStats":
        if self.pages_with_matches > self.pages_fetched:
            raise ValueError("pages_with_matches cannot exceed pages_fetched")
        return self

    @property
    def incomplete(self) -> bool:
        """Results may be truncated."""
        return self.ceiling_hit or self.error is not None

    @property
    def pagination_required(self) -> bool:
        """More than one page contributed matches."""
        return self.pages_with_matches > 1


class CollectionResult(BaseModel):
    """Merged pull requests collected for one repository."""

    model_config = ConfigDict(frozen=True)

    records: tuple[PullRequestRecord, ...] = Field(default=(), description="Sorted records")
    stats: FetchStats = Field(default_factory=FetchStats, description="Fetch statistics")


class RepositoryStatus(str, Enum):
    """Outcome of processing one repository."""

    REPORTED = "reported"
    EXCLUDED = "excluded"
    MISSING_BRANCH = "missing_branch"
    NO_PRS_IN_RANGE = "no_prs_in_range"

    @property
    def description(self) -> str:
        """Human-readable reason."""
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    RepositoryStatus.REPORTED: "report generated",
    RepositoryStatus.EXCLUDED: "excluded by caller",
    RepositoryStatus.MISSING_BRANCH: "branch not found",
    RepositoryStatus.NO_PRS_IN_RANGE: "no PRs in range",
}


class RepositoryOutcome(BaseModel):
    """Result of running the pipeline for a single repository."""

    model_config = ConfigDict(frozen=True)

    repository: RepositoryRef = Field(..., description="Repository")
    status: RepositoryStatus = Field(..., description="Processing outcome")
    result: CollectionResult | None = Field(
        default=None, description="Collected PRs (reported repositories only)"
    )
    warnings: tuple[str, ...] = Field(default=(), description="Repository warnings")

    @property
    def skipped(self) -> bool:
        """The repository produced no report."""
        return self.status is not RepositoryStatus.REPORTED


class AggregateSummary(BaseModel):
    """
    Organization-wide result of a report run.

    Owned by the aggregator while the run is in progress; outcomes are
    recorded in enumeration order and the summary is read-only afterwards.
    """

    organization: str = Field(..., description="Organization")
    branch: str = Field(..., description="Target branch")
    date_range: DateRange = Field(..., description="Merge date window")
    generated_at: datetime = Field(..., description="Fixed generation timestamp")
    repositories: list[RepositoryRef] = Field(
        default_factory=list, description="Repositories considered, in order"
    )
    outcomes: list[RepositoryOutcome] = Field(
        default_factory=list, description="Per-repository outcomes, in order"
    )

    def record(self, outcome: RepositoryOutcome) -> None:
        """Append the outcome of the next repository."""
        self.outcomes.append(outcome)

    def _count(self, status: RepositoryStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def scanned(self) -> int:
        """Number of repositories enumerated."""
        return len(self.repositories)

    @property
    def with_results(self) -> int:
        return self._count(RepositoryStatus.REPORTED)

    @property
    def excluded(self) -> int:
        return self._count(RepositoryStatus.EXCLUDED)

    @property
    def missing_branch(self) -> int:
        return self._count(RepositoryStatus.MISSING_BRANCH)

    @property
    def no_prs_in_range(self) -> int:
        return self._count(RepositoryStatus.NO_PRS_IN_RANGE)

    @property
    def skipped(self) -> int:
        """Excluded, missing the branch, or without PRs in range."""
        return sum(1 for outcome in self.outcomes if outcome.skipped)

    @property
    def results(self) -> dict[RepositoryRef, CollectionResult]:
        """Collected PRs keyed by repository, for repositories with results."""
        return {
            outcome.repository: outcome.result
            for outcome in self.outcomes
            if outcome.status is RepositoryStatus.REPORTED and outcome.result is not None
        }

    @property
    def warnings(self) -> list[str]:
        """All repository warnings, prefixed with the repository name."""
        return [
            f"{outcome.repository.name}: {warning}"
            for outcome in self.outcomes
            for warning in outcome.warnings
        ]


class ReportFiles(BaseModel):
    """Files written for a run."""

    output_dir: Path = Field(..., description="Output directory")
    csv_reports: dict[str, Path] = Field(
        default_factory=dict, description="CSV report per repository full name"
    )
    markdown_reports: dict[str, Path] = Field(
        default_factory=dict, description="Markdown report per repository full name"
    )
    pdf_reports: dict[str, Path] = Field(
        default_factory=dict, description="PDF report per repository full name"
    )
    summary_path: Path | None = Field(default=None, description="Summary file")
    warnings: list[str] = Field(default_factory=list, description="Rendering warnings")
