"""Page generation."""

from .pages import PageWriter, WriteReport, html_path, render_page

__all__ = ["PageWriter", "WriteReport", "html_path", "render_page"]
