#!/usr/bin/env python3
"""
Report rendering and output.

Markdown and HTML renderers plus the writer that lays report files out under
the reports directory.
"""

from .writer import ReportWriter
from .markdown import render_cwv_report, render_experiment_report, render_quality_report, render_strategy_report
from .html import render_cwv_dashboard

__all__ = [
    'ReportWriter',
    'render_cwv_report', 'render_experiment_report', 'render_quality_report', 'render_strategy_report',
    'render_cwv_dashboard'
]
