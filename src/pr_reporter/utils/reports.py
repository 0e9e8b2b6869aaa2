"""Report file writing."""

import logging
from pathlib import Path

from pr_reporter.models.report import AggregateSummary, ReportFiles
from pr_reporter.renderers.base import PdfRenderer, RenderError, report_filename
from pr_reporter.renderers.csv_report import write_csv_report
from pr_reporter.renderers.markdown import render_markdown_report
from pr_reporter.renderers.summary import SUMMARY_FILENAME, render_summary

logger = logging.getLogger(__name__)


def write_reports(
    summary: AggregateSummary,
    output_dir: Path,
    pdf_renderer: PdfRenderer | None = None,
) -> ReportFiles:
    """
    Write every report of a finished run.

    For each repository with results: a CSV and a Markdown report, plus a
    PDF when a renderer is available. A failed PDF is recorded as a warning
    and the CSV report stays available. The summary is written last.

    Args:
        summary: Finished run summary
        output_dir: Directory to write into (created if missing)
        pdf_renderer: Renderer selected at startup, or None to skip PDFs

    Returns:
        ReportFiles listing what was written
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    files = ReportFiles(output_dir=output_dir)

    for outcome in summary.outcomes:
        if outcome.result is None:
            continue
        repo = outcome.repository

        csv_path = write_csv_report(summary, outcome, output_dir / report_filename(repo, ".csv"))
        files.csv_reports[repo.full_name] = csv_path

        md_path = output_dir / report_filename(repo, ".md")
        md_path.write_text(render_markdown_report(summary, outcome), encoding="utf-8")
        files.markdown_reports[repo.full_name] = md_path

        if pdf_renderer is None:
            continue

        pdf_path = output_dir / report_filename(repo, ".pdf")
        try:
            pdf_renderer.render(md_path, pdf_path)
        except RenderError as e:
            warning = f"{repo.name}: PDF generation failed ({e}), CSV report is available"
            logger.warning(warning)
            files.warnings.append(warning)
            pdf_path.unlink(missing_ok=True)
        else:
            files.pdf_reports[repo.full_name] = pdf_path

    summary_path = output_dir / SUMMARY_FILENAME
    summary_path.write_text(
        render_summary(summary, output_dir=output_dir, extra_warnings=files.warnings),
        encoding="utf-8",
    )
    files.summary_path = summary_path

    return files
