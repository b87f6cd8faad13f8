"""siterisk services for analysis, export and rendering."""

from siterisk.services.analysis import AnalysisAggregator, Statistics
from siterisk.services.loader import load_rows
from siterisk.services.pipeline import run_analysis
from siterisk.services.render import render_html, write_html
from siterisk.services.report import ReportViewModelBuilder, ViewModel

__all__ = [
    "AnalysisAggregator",
    "Statistics",
    "load_rows",
    "run_analysis",
    "render_html",
    "write_html",
    "ReportViewModelBuilder",
    "ViewModel",
]
