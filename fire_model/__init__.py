"""
FIRE Projection Model

Year-by-year projection of an individual's income, taxes, tax-deferred,
tax-free and taxable savings, and retirement readiness.
"""

from .errors import ConfigurationError
from .money import Precision
from .tax import TaxBracket, compute_tax, net_income, validate_bracket_table, validate_bracket_tables
from .inflation import Constants, index
from .accounts import AccountDefinition, AccountKind, DEFAULT_ACCOUNTS
from .allocation import Allocation, MatchSplit, allocate, contribution_headroom, employer_match
from .growth import compound, per_period_rate, return_on_investment
from .config import ProjectionConfig, Rates, load_config
from .simulation import FiscalState, Simulation, advance, initial_state
from .metrics import first_period_reaching_goal, goal_reached, passive_income, savings_goal
from .reporting import ProjectionReport
from .uncertainty import ScenarioSweep, SweepResult, UncertaintyFactors

__version__ = "1.0.0"
__all__ = [
    "ConfigurationError",
    "Precision",
    "TaxBracket",
    "compute_tax",
    "net_income",
    "validate_bracket_table",
    "validate_bracket_tables",
    "Constants",
    "index",
    "AccountDefinition",
    "AccountKind",
    "DEFAULT_ACCOUNTS",
    "Allocation",
    "MatchSplit",
    "allocate",
    "contribution_headroom",
    "employer_match",
    "compound",
    "per_period_rate",
    "return_on_investment",
    "ProjectionConfig",
    "Rates",
    "load_config",
    "FiscalState",
    "Simulation",
    "advance",
    "initial_state",
    "first_period_reaching_goal",
    "goal_reached",
    "passive_income",
    "savings_goal",
    "ProjectionReport",
    "ScenarioSweep",
    "SweepResult",
    "UncertaintyFactors",
]
