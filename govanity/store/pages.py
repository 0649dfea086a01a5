"""Static redirect pages for vanity import paths."""

import logging
from dataclasses import dataclass, field
from html import escape
from pathlib import Path

from rich.console import Console
from rich.markup import escape as markup_escape

from ..extractors.models import VanityImport

logger = logging.getLogger(__name__)

console = Console()

PAGE_TEMPLATE = """<!DOCTYPE html>
<head>
  <meta http-equiv="content-type" content="text/html; charset=utf-8">
  <meta name="go-import" content="{prefix} git {repo}">
  <meta name="go-source" content="{prefix} {repo} {repo}/tree/master{{/dir}} {repo}/blob/master{{/dir}}/{{file}}#L{{line}}">
  <meta http-equiv="refresh" content="0; url={repo}">
</head>
</html>
"""

INDEX_NAME = "index"
CNAME_FILE = "CNAME"


def render_page(imp: VanityImport) -> str:
    """Render the go-import/go-source page for a package."""
    return PAGE_TEMPLATE.format(
        prefix=escape(imp.import_prefix),
        repo=escape(imp.repo_url),
    )


def html_path(import_path: str, prefix: str, out_dir: Path | str) -> Path:
    """Where the page for ``import_path`` is written.

    The vanity prefix is removed and ``.html`` appended, so prefix
    ``example.com`` and ``example.com/repo/sub`` give ``<out>/repo/sub.html``.
    The prefix itself maps to ``<out>/index.html``.
    """
    rel = import_path[len(prefix):] if import_path.startswith(prefix) else import_path
    parts = [p for p in rel.split("/") if p not in ("", ".")]
    if ".." in parts:
        raise ValueError(f"{import_path} would be written outside {out_dir}")
    if not parts:
        parts = [INDEX_NAME]

    return Path(out_dir).joinpath(*parts[:-1], parts[-1] + ".html")


@dataclass
class WriteReport:
    """Files produced (or not) by a PageWriter run."""
    written: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    cname: Path | None = None


class PageWriter:
    """Writes one HTML page per vanity import below an output directory."""

    def __init__(self, out_dir: Path | str, prefix: str):
        self.out_dir = Path(out_dir)
        self.prefix = prefix

    def write_all(self, imports: list[VanityImport], report: WriteReport | None = None) -> WriteReport:
        """Write every page. Failures are recorded and do not stop the rest."""
        report = report or WriteReport()

        for imp in imports:
            if not imp.import_prefix:
                console.print(f"[yellow]Warning:[/yellow] skipping {markup_escape(imp.import_path)}: unusable import path")
                report.skipped.append((imp.import_path, "unusable import path"))
                continue

            try:
                path = html_path(imp.import_path, self.prefix, self.out_dir)
            except ValueError as e:
                console.print(f"[yellow]Warning:[/yellow] skipping {markup_escape(str(e))}")
                report.skipped.append((imp.import_path, str(e)))
                continue

            try:
                self.write_page(path, imp)
            except OSError as e:
                console.print(f"[red]✗[/red] Error writing {path}: {markup_escape(str(e))}")
                report.failed.append((path, str(e)))
                continue

            logger.debug("Wrote %s", path)
            report.written.append(path)

        console.print(f"[green]✓[/green] Wrote {len(report.written)} pages in {self.out_dir}")
        return report

    def write_page(self, path: Path, imp: VanityImport) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_page(imp), encoding="utf-8")

    def write_cname(self, host: str, report: WriteReport | None = None) -> Path | None:
        """Write the CNAME file used by GitHub Pages for custom domains."""
        path = self.out_dir / CNAME_FILE
        try:
            self.out_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(host + "\n", encoding="utf-8")
        except OSError as e:
            console.print(f"[red]✗[/red] Error writing {path}: {markup_escape(str(e))}")
            if report is not None:
                report.failed.append((path, str(e)))
            return None

        if report is not None:
            report.cname = path
        return path
