"""CSV repository report."""

import csv
from pathlib import Path

from pr_reporter.models.report import AggregateSummary, RepositoryOutcome
from pr_reporter.renderers.base import (
    CSV_COLUMNS,
    REPORT_TITLE,
    describe_request,
    execution_lines,
    metadata_lines,
)

RULE = "=" * 56


def write_csv_report(
    summary: AggregateSummary, outcome: RepositoryOutcome, path: Path
) -> Path:
    """
    Write the CSV report of one repository.

    A plain-text preamble (repository, request, execution details) precedes
    the CSV table of merged pull requests.

    Args:
        summary: Run summary
        outcome: Outcome of a reported repository
        path: Target file

    Returns:
        The written path
    """
    if outcome.result is None:
        raise ValueError(f"{outcome.repository.full_name} has no results to report")

    with path.open("w", newline="", encoding="utf-8") as f:
        f.write(f"{REPORT_TITLE}\n{RULE}\n\n")
        for label, value in metadata_lines(summary, outcome):
            f.write(f"{label}: {value}\n")

        f.write("\nRequest Executed:\n")
        f.write(describe_request(outcome.repository, summary.branch) + "\n")

        f.write("\nExecution Details:\n")
        for label, value in execution_lines(summary, outcome):
            f.write(f"  - {label}: {value}\n")

        f.write(f"\n{RULE}\nPull Request Summary\n{RULE}\n\n")
        f.write(
            f"Note: PRs merged into {summary.branch} branch indicate they passed\n"
            "      required review and approval processes per branch protection rules.\n\n"
        )

        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for record in outcome.result.records:
            writer.writerow(
                [
                    record.number,
                    record.title,
                    record.branch,
                    record.merged_at,
                    record.author,
                    record.url,
                    record.reviewers_requested,
                    record.approval_status,
                ]
            )

    return path
