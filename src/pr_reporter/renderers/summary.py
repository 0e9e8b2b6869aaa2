"""Plain-text run summary."""

from pathlib import Path

from pr_reporter.models.report import AggregateSummary, RepositoryStatus
from pr_reporter.renderers.base import format_timestamp

SUMMARY_FILENAME = "00_SUMMARY.txt"


def skip_reason(summary: AggregateSummary, status: RepositoryStatus) -> str:
    if status is RepositoryStatus.MISSING_BRANCH:
        return f"no {summary.branch} branch"
    return status.description


def render_summary(
    summary: AggregateSummary,
    output_dir: Path | None = None,
    extra_warnings: list[str] | None = None,
) -> str:
    """
    Render the run summary.

    States, per repository, why no report was produced or why a report may
    be incomplete.

    Args:
        summary: Run summary
        output_dir: Directory the reports were saved in
        extra_warnings: Warnings raised while rendering

    Returns:
        Summary text
    """
    lines = [
        "GitHub Pull Request Report - Summary",
        "===================================",
        "",
        f"Report Generated: {format_timestamp(summary)}",
        f"Organization: {summary.organization}",
        f"Date Range Requested: {summary.date_range}",
        f"Branch: {summary.branch}",
        "",
        "Statistics:",
        f"  - Total Repositories Scanned: {summary.scanned}",
        f"  - Repositories with Merged PRs: {summary.with_results}",
        f"  - Repositories Skipped: {summary.skipped}",
        f"    - Excluded by caller: {summary.excluded}",
        f"    - No {summary.branch} branch: {summary.missing_branch}",
        f"    - No PRs in date range: {summary.no_prs_in_range}",
        "",
        "Individual Reports:",
        "-------------------",
    ]

    for outcome in summary.outcomes:
        if outcome.result is None:
            continue
        line = f"  - {outcome.repository.name}: {outcome.result.stats.total_matched} PRs"
        if outcome.result.stats.incomplete:
            line += " (may be incomplete: " + "; ".join(outcome.warnings) + ")"
        lines.append(line)
    if not summary.with_results:
        lines.append("  (none)")

    skipped = [outcome for outcome in summary.outcomes if outcome.skipped]
    if skipped:
        lines += ["", "Skipped Repositories:", "---------------------"]
        for outcome in skipped:
            lines.append(f"  - {outcome.repository.name}: {skip_reason(summary, outcome.status)}")

    warnings = summary.warnings + list(extra_warnings or [])
    if warnings:
        lines += ["", "Warnings:", "---------"]
        lines += [f"  - {warning}" for warning in warnings]

    if output_dir is not None:
        lines += ["", f"All reports saved in: {output_dir}"]

    return "\n".join(lines) + "\n"
