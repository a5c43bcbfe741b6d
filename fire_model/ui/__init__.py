"""
UI helper utilities for Streamlit app composition.
"""

from .inputs import build_config_from_inputs, render_sidebar_inputs
from .results import build_assets_figure, render_projection_results
from .app_controller import load_base_config, run_main_app

__all__ = [
    "build_config_from_inputs",
    "render_sidebar_inputs",
    "build_assets_figure",
    "render_projection_results",
    "load_base_config",
    "run_main_app",
]
