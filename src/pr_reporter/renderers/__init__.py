"""Renderers turning a run summary into report files."""

from pr_reporter.renderers.base import PdfRenderer, RenderError
from pr_reporter.renderers.csv_report import write_csv_report
from pr_reporter.renderers.markdown import render_markdown_report
from pr_reporter.renderers.pdf import PandocHtmlRenderer, PandocLatexRenderer, select_pdf_renderer
from pr_reporter.renderers.summary import render_summary

__all__ = [
    "PandocHtmlRenderer",
    "PandocLatexRenderer",
    "PdfRenderer",
    "RenderError",
    "render_markdown_report",
    "render_summary",
    "select_pdf_renderer",
    "write_csv_report",
]
