"""
Pytest fixtures for projection engine tests.
"""

import sys
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fire_model.config import ProjectionConfig, Rates, load_config
from fire_model.inflation import Constants
from fire_model.tax import TaxBracket

PROJECT_ROOT = Path(__file__).parent.parent


# =============================================================================
# BRACKET FIXTURES
# =============================================================================

@pytest.fixture
def simple_brackets():
    """Three brackets: 0% to 10K, 10% to 50K, 20% above."""
    return (
        TaxBracket(0, 10_000, 0.0),
        TaxBracket(10_000, 50_000, 10.0),
        TaxBracket(50_000, 999_999, 20.0),
    )


@pytest.fixture
def flat_brackets():
    """Single 10% bracket covering everything below $1M."""
    return (TaxBracket(0, 1_000_000, 10.0),)


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture
def no_tax_config():
    """Salaried saver with no tax brackets and no employer match."""
    return ProjectionConfig(
        salary=75_000,
        cost_of_living=20_000,
        retirement_cost_of_living=25_000,
        rates=Rates(
            inflation=1.02,
            salary_growth=1.05,
            return_on_investment=1.08,
            employer_match_rate=0.0,
        ),
    )


@pytest.fixture
def taxed_config(simple_brackets):
    """Saver with progressive tax, an employer match and opening balances."""
    return ProjectionConfig(
        salary=90_000,
        cost_of_living=30_000,
        retirement_cost_of_living=35_000,
        rates=Rates(
            inflation=1.02,
            salary_growth=1.03,
            return_on_investment=1.06,
            employer_match_rate=0.04,
        ),
        constants=Constants(tax_brackets=simple_brackets),
        starting_assets={"rrsp": 20_000, "tfsa": 10_000, "unregistered": 5_000},
    )


@pytest.fixture
def sample_config_path():
    """Path to the sample config.toml shipped at the project root."""
    return PROJECT_ROOT / "config.toml"


@pytest.fixture
def sample_config(sample_config_path):
    return load_config(sample_config_path)
