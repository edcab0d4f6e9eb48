"""Per-site report rendering."""

from .site_report import render_site_report, render_site_reports

__all__ = ["render_site_report", "render_site_reports"]
