"""PDF renderers backed by pandoc."""

import logging
import shutil
import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path

from pr_reporter.renderers.base import PdfRenderer, RenderError

logger = logging.getLogger(__name__)

LATEX_ENGINES = ("pdflatex", "xelatex", "lualatex")
HTML_TOOLS = ("weasyprint", "wkhtmltopdf")


def _run(cmd: list[str], timeout_sec: float) -> None:
    """Run an external tool, raising RenderError on failure."""
    logger.debug("$ %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=timeout_sec, check=False
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise RenderError(f"{cmd[0]} failed: {e}") from e

    if result.returncode != 0:
        # First error-looking lines are enough to diagnose LaTeX failures
        errors = [
            line
            for line in result.stderr.splitlines()
            if "error" in line.lower() or "fatal" in line.lower() or line.startswith("!")
        ]
        detail = "; ".join(errors[:5]) or result.stderr.strip()[:200]
        raise RenderError(f"{cmd[0]} exited with {result.returncode}: {detail}")


def _check_output(pdf_path: Path, tool: str) -> None:
    if not pdf_path.exists() or pdf_path.stat().st_size == 0:
        raise RenderError(f"{tool} produced no PDF at {pdf_path}")


class PandocLatexRenderer(PdfRenderer):
    """Primary renderer: pandoc with a LaTeX PDF engine."""

    def __init__(self, engine: str, pandoc: str = "pandoc", timeout_sec: float = 300.0):
        self.engine = engine
        self.pandoc = pandoc
        self.timeout_sec = timeout_sec
        self.name = f"pandoc with {engine}"

    def render(self, markdown_path: Path, pdf_path: Path) -> None:
        _run(
            [
                self.pandoc,
                str(markdown_path),
                "-o",
                str(pdf_path),
                f"--pdf-engine={self.engine}",
                "-V",
                "geometry:landscape,margin=0.75in",
                "-V",
                "fontsize=9pt",
                "--standalone",
            ],
            self.timeout_sec,
        )
        _check_output(pdf_path, self.name)


class PandocHtmlRenderer(PdfRenderer):
    """Fallback renderer: pandoc to HTML, then an HTML-to-PDF tool."""

    def __init__(self, tool: str, pandoc: str = "pandoc", timeout_sec: float = 300.0):
        if tool not in HTML_TOOLS:
            raise ValueError(f"Unsupported HTML to PDF tool: {tool}")
        self.tool = tool
        self.pandoc = pandoc
        self.timeout_sec = timeout_sec
        self.name = tool

    def render(self, markdown_path: Path, pdf_path: Path) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            html_path = Path(tmp) / f"{markdown_path.stem}.html"
            _run(
                [self.pandoc, str(markdown_path), "-o", str(html_path), "--standalone"],
                self.timeout_sec,
            )
            _run([self.tool, str(html_path), str(pdf_path)], self.timeout_sec)
        _check_output(pdf_path, self.name)


def select_pdf_renderer(
    which: Callable[[str], str | None] = shutil.which,
) -> PdfRenderer | None:
    """
    Pick a PDF renderer from the tools available on PATH.

    Args:
        which: Executable lookup (``shutil.which`` by default)

    Returns:
        A LaTeX-based renderer when possible, an HTML-based one otherwise,
        or None when pandoc or every PDF engine is missing
    """
    pandoc = which("pandoc")
    if not pandoc:
        return None

    for engine in LATEX_ENGINES:
        if which(engine):
            return PandocLatexRenderer(engine, pandoc=pandoc)

    for tool in HTML_TOOLS:
        if which(tool):
            return PandocHtmlRenderer(tool, pandoc=pandoc)

    return None
