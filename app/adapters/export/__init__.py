"""Export format adapters (HTML rendering, PDF via Gotenberg)."""
from app.adapters.export.gotenberg import GotenbergAdapter
from app.adapters.export.html_renderer import render_comparison_html, render_report_html

__all__ = [
    "GotenbergAdapter",
    "render_comparison_html",
    "render_report_html",
]
