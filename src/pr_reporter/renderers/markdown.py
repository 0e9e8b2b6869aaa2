"""Markdown repository report, also the PDF source."""

from pr_reporter.models.report import AggregateSummary, RepositoryOutcome
from pr_reporter.renderers.base import (
    REPORT_TITLE,
    describe_request,
    execution_lines,
    metadata_lines,
)

TITLE_WIDTH = 60


def table_cell(text: str) -> str:
    """Make text safe inside a pipe table cell."""
    return " ".join(text.split()).replace("|", "\\|")


def shorten(text: str, width: int = TITLE_WIDTH) -> str:
    if len(text) <= width:
        return text
    return text[:width] + "..."


def render_markdown_report(summary: AggregateSummary, outcome: RepositoryOutcome) -> str:
    """
    Render the Markdown report of one repository.

    Args:
        summary: Run summary
        outcome: Outcome of a reported repository

    Returns:
        Markdown document
    """
    if outcome.result is None:
        raise ValueError(f"{outcome.repository.full_name} has no results to report")

    lines = [f"# {REPORT_TITLE}", ""]
    lines += [f"**{label}:** {value}  " for label, value in metadata_lines(summary, outcome)]

    lines += ["", "## Request Executed", "", "```"]
    lines.append(describe_request(outcome.repository, summary.branch))
    lines += ["```", "", "## Execution Details", ""]
    lines += [f"- **{label}:** {value}" for label, value in execution_lines(summary, outcome)]

    lines += [
        "",
        "## Pull Request Summary",
        "",
        "| # | Title | Branch | Merged | Author | Rev | App | URL |",
        "|---|-------|--------|--------|--------|-----|-----|-----|",
    ]
    for record in outcome.result.records:
        cells = [
            str(record.number),
            table_cell(shorten(record.title)),
            table_cell(record.branch),
            record.merged_date,
            table_cell(record.author),
            str(record.reviewers_requested),
            table_cell(record.approval_status),
            f"[Link]({record.url})",
        ]
        lines.append("| " + " | ".join(cells) + " |")

    return "\n".join(lines) + "\n"
