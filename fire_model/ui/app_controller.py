"""
Top-level Streamlit app orchestration.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..config import ProjectionConfig, load_config
from ..errors import ConfigurationError
from ..reporting import ProjectionReport
from ..simulation import Simulation
from .inputs import build_config_from_inputs, render_sidebar_inputs
from .results import render_projection_results

logger = logging.getLogger(__name__)

# Used when no config.toml sits next to the app
FALLBACK_CONFIG = {
    "inflation": 1.02,
    "salary_growth": 1.03,
    "return_on_investment": 1.07,
    "salary": 75_000,
    "cost_of_living": 25_000,
    "retirement_cost_of_living": 25_000,
}


def load_base_config(app_root: Path) -> ProjectionConfig:
    """
    Load ``config.toml`` from ``app_root``, falling back to built-in defaults.
    """
    path = app_root / "config.toml"
    try:
        return load_config(path)
    except (FileNotFoundError, ConfigurationError) as e:
        logger.warning(f"Could not load {path}: {e}")
        logger.warning("Falling back to built-in default configuration")
        return ProjectionConfig.from_dict(FALLBACK_CONFIG)


def run_main_app(st_module: Any, app_root: Path) -> None:
    """
    Render and orchestrate the full Streamlit app flow.
    """
    st_module.title("Financial Independence Projection")
    st_module.caption(
        "Project income, taxes, RRSP/TFSA/unregistered savings and retirement readiness year by year."
    )

    base_config = load_base_config(app_root)

    with st_module.sidebar:
        st_module.header("⚙️ Assumptions")
        inputs = render_sidebar_inputs(st_module=st_module, base_config=base_config)

    try:
        config = build_config_from_inputs(inputs, base_config)
    except ConfigurationError as e:
        st_module.error(f"Invalid configuration: {e}")
        return

    report = ProjectionReport(Simulation(config), inputs["number_of_years"], inputs["base_year"])
    render_projection_results(st_module=st_module, report=report)
