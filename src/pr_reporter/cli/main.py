"""Main CLI entry point."""

import asyncio
import re
from datetime import date, datetime
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pr_reporter.aggregator import ReportAggregator
from pr_reporter.github.client import GitHubClient
from pr_reporter.github.errors import FatalError
from pr_reporter.log import configure_logging
from pr_reporter.models.config import DEFAULT_BRANCH, ReportConfig, parse_skip_list
from pr_reporter.models.report import (
    AggregateSummary,
    DateRange,
    RepositoryOutcome,
    RepositoryStatus,
)
from pr_reporter.renderers.pdf import select_pdf_renderer
from pr_reporter.utils.reports import write_reports

app = typer.Typer(
    name="pr-reporter",
    help="Report pull requests merged into a branch across a GitHub organization",
)
console = Console()

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str, option: str) -> date:
    """Parse a YYYY-MM-DD date, raising typer.BadParameter otherwise."""
    if not DATE_PATTERN.match(value.strip()):
        raise typer.BadParameter(f"{option} must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise typer.BadParameter(f"{option} is not a valid date: {e}")


@app.command()
def report(
    start_date: str = typer.Option(
        None, "--start-date", help="First merge date (YYYY-MM-DD, prompted if omitted)"
    ),
    org: str = typer.Option(
        None, "--org", help="GitHub organization name (prompted if omitted)"
    ),
    end_date: str = typer.Option(
        None, "--end-date", help="Last merge date (YYYY-MM-DD, defaults to today)"
    ),
    branch: str = typer.Option(DEFAULT_BRANCH, "--branch", help="Target branch"),
    skip_repos: str = typer.Option(
        None, "--skip-repos", help="Comma-separated repository names to skip"
    ),
    output_dir: Path = typer.Option(
        None, "--output", "-o", help="Output directory (defaults to pr_reports_<timestamp>)"
    ),
    github_token: str = typer.Option(
        None, "--token", envvar="GITHUB_TOKEN", help="GitHub API token"
    ),
    api_url: str = typer.Option(
        None, "--api-url", envvar="GITHUB_API_URL", help="GitHub API base URL"
    ),
    timeout_sec: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds"),
    concurrency: int = typer.Option(
        1, "--concurrency", "-c", help="Repositories processed at once"
    ),
    pdf: bool = typer.Option(True, "--pdf/--no-pdf", help="Generate PDF reports when possible"),
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="PR_REPORTER_LOG_LEVEL", help="Log level"
    ),
):
    """
    Generate merged-PR reports for every repository of an organization.

    Example:
        pr-reporter report --start-date 2024-11-01 --end-date 2025-10-31 --org MyOrg
    """
    configure_logging(log_level)

    # Missing required values switch to interactive mode, which asks before running
    interactive = start_date is None or org is None
    if start_date is None:
        start_date = typer.prompt("Start date (YYYY-MM-DD)")
    if org is None:
        org = typer.prompt("GitHub organization")

    start = parse_date(start_date, "--start-date")
    end = parse_date(end_date, "--end-date") if end_date else date.today()
    if start > end:
        raise typer.BadParameter("Start date must be before or equal to end date")

    generated_at = datetime.now().astimezone()
    if output_dir is None:
        output_dir = Path(f"pr_reports_{generated_at:%Y%m%d_%H%M%S}")

    try:
        config = ReportConfig(
            organization=org.strip(),
            branch=branch.strip(),
            date_range=DateRange(start=start, end=end),
            skip_repos=parse_skip_list(skip_repos),
            timeout_sec=timeout_sec,
            max_concurrency=concurrency,
            output_dir=output_dir,
        )
    except ValidationError as e:
        console.print(f"[red]✗ Invalid configuration:[/red] {e}")
        raise typer.Exit(1)

    pdf_renderer = select_pdf_renderer() if pdf else None

    console.print(
        Panel.fit(
            "[bold blue]GitHub Pull Request Report Generator[/bold blue]\n"
            f"Organization: {config.organization}\n"
            f"Date Range: {config.date_range}\n"
            f"Branch: {config.branch}\n"
            + (f"Skipping: {', '.join(sorted(config.skip_repos))}\n" if config.skip_repos else "")
            + f"Output Directory: {config.output_dir}\n"
            f"PDF Generation: {pdf_renderer.name if pdf_renderer else 'Disabled'}",
            border_style="blue",
        )
    )
    if pdf and pdf_renderer is None:
        console.print(
            "[yellow]! Install pandoc with a LaTeX engine, weasyprint or wkhtmltopdf "
            "for PDF support[/yellow]"
        )

    if interactive and not typer.confirm("Continue?", default=False):
        console.print("Cancelled.")
        raise typer.Exit(0)

    try:
        summary = asyncio.run(
            _run_report_async(config, github_token, api_url, generated_at)
        )
    except FatalError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    files = write_reports(summary, config.output_dir, pdf_renderer)

    _display_summary(summary)
    for warning in files.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    console.print(f"\n[bold]Reports saved in:[/bold] {files.output_dir}")
    console.print(f"[bold]Summary:[/bold] {files.summary_path}")


async def _run_report_async(
    config: ReportConfig,
    github_token: str | None,
    api_url: str | None,
    generated_at: datetime,
) -> AggregateSummary:
    """Async implementation of report."""
    console.print(f"\n[bold]Fetching repositories from {config.organization}...[/bold]")

    async with GitHubClient(
        token=github_token, base_url=api_url, timeout_sec=config.timeout_sec
    ) as client:
        aggregator = ReportAggregator(client, config)
        return await aggregator.run(on_outcome=_print_outcome, generated_at=generated_at)


def _print_outcome(position: int, total: int, outcome: RepositoryOutcome):
    """Print one progress line per repository."""
    name = outcome.repository.name
    prefix = f"[{position}/{total}]"

    if outcome.status is RepositoryStatus.REPORTED and outcome.result:
        stats = outcome.result.stats
        console.print(
            f"{prefix} [green]✓[/green] {name}: {stats.total_matched} PRs found "
            f"across {stats.pages_with_matches} page(s)"
        )
    else:
        console.print(f"{prefix} [yellow]⚠[/yellow] {name}: skipped ({outcome.status.description})")

    for warning in outcome.warnings:
        console.print(f"   [yellow]! {warning}[/yellow]")


def _display_summary(summary: AggregateSummary):
    """Display summary of results."""
    table = Table(title="Report Generation Complete", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="yellow")

    table.add_row("Total Repositories", str(summary.scanned))
    table.add_row("With Merged PRs", str(summary.with_results))
    table.add_row("Skipped", str(summary.skipped))
    table.add_row("  Excluded by caller", str(summary.excluded))
    table.add_row(f"  No {summary.branch} branch", str(summary.missing_branch))
    table.add_row("  No PRs in range", str(summary.no_prs_in_range))
    table.add_row("Warnings", str(len(summary.warnings)))

    console.print()
    console.print(table)


@app.command()
def version():
    """Show version information."""
    from pr_reporter import __version__

    console.print(f"pr-reporter version {__version__}")


if __name__ == "__main__":
    app()
