"""Report generation for athenalogs."""

from .driver import ReportConfig, ReportDriver, ReportResult
from .render import render_domains, render_referrers, render_tree, report_to_json

__all__ = [
    "ReportConfig",
    "ReportDriver",
    "ReportResult",
    "render_domains",
    "render_referrers",
    "render_tree",
    "report_to_json",
]
