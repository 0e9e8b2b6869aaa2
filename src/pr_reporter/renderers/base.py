"""Shared pieces of the report renderers."""

from abc import ABC, abstractmethod
from pathlib import Path

from pr_reporter.models.config import PAGE_SIZE
from pr_reporter.models.pr import RepositoryRef
from pr_reporter.models.report import AggregateSummary, RepositoryOutcome

REPORT_TITLE = "GitHub Pull Request Report - Merged PRs Evidence"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"

CSV_COLUMNS = [
    "Number",
    "Title",
    "Branch",
    "MergedAt",
    "Author",
    "URL",
    "ReviewersRequested",
    "ApprovalStatus",
]


class RenderError(Exception):
    """Raised when a report cannot be rendered."""


class PdfRenderer(ABC):
    """Converts a Markdown report into a PDF document."""

    name: str = "pdf"

    @abstractmethod
    def render(self, markdown_path: Path, pdf_path: Path) -> None:
        """
        Render a Markdown report to PDF.

        Args:
            markdown_path: Source Markdown file
            pdf_path: Target PDF file

        Raises:
            RenderError: If the document could not be produced
        """
        pass


def format_timestamp(summary: AggregateSummary) -> str:
    return summary.generated_at.strftime(TIMESTAMP_FORMAT).strip()


def describe_request(repo: RepositoryRef, branch: str, per_page: int = PAGE_SIZE) -> str:
    """The listing request a report was built from."""
    return (
        f"GET /repos/{repo.full_name}/pulls?state=closed&base={branch}"
        f"&per_page={per_page}&page={{page}}&sort=updated&direction=desc"
        f" | merged_at between the date range bounds"
    )


def report_filename(repo: RepositoryRef, suffix: str) -> str:
    return f"{repo.name}_PR_Report{suffix}"


def metadata_lines(summary: AggregateSummary, outcome: RepositoryOutcome) -> list[tuple[str, str]]:
    """Label/value pairs heading every repository report."""
    return [
        ("Repository", outcome.repository.full_name),
        ("Organization", summary.organization),
        ("Report Generated", format_timestamp(summary)),
        ("Date Range", str(summary.date_range)),
        ("Branch", summary.branch),
    ]


def execution_lines(summary: AggregateSummary, outcome: RepositoryOutcome) -> list[tuple[str, str]]:
    """Label/value pairs describing how the results were fetched."""
    stats = outcome.result.stats if outcome.result else None
    lines = [("Timestamp", format_timestamp(summary))]
    if stats is None:
        return lines

    lines += [
        ("Total PRs Merged", str(stats.total_matched)),
        ("Pages Fetched", str(stats.pages_fetched)),
        ("Pages With Matches", str(stats.pages_with_matches)),
        ("Pagination Required", "Yes" if stats.pagination_required else "No"),
    ]
    if stats.incomplete:
        lines.append(("Results Incomplete", "; ".join(outcome.warnings) or "Yes"))
    return lines
