"""Tab modules for the Streamlit app."""

from tabs.filter_panel import render as render_filter_panel
from tabs.evaluation_overview import render as render_evaluation_overview

__all__ = [
    "render_filter_panel",
    "render_evaluation_overview",
]
