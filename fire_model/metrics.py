"""
Derived Metrics

Retirement-readiness figures computed on demand from a FiscalState. None of
these are stored on the state itself.
"""

from itertools import islice
from typing import Iterable, Optional, TYPE_CHECKING

from .tax import net_income

if TYPE_CHECKING:
    from .simulation import FiscalState


def passive_income(state: "FiscalState") -> float:
    """
    After-tax income from withdrawing ``withdraw_rate`` of every account.

    Tax-free withdrawals are untaxed, tax-deferred withdrawals are ordinary
    income and taxable-account withdrawals are treated as capital gains.
    """
    w = state.rates.withdraw_rate
    return state.tax_free_assets * w + net_income(
        state.constants.tax_brackets,
        state.deferred_assets * w,
        state.taxable_assets * w,
    )


def savings_goal(state: "FiscalState") -> float:
    """Portfolio size that sustains the retirement cost of living at the withdrawal rate."""
    return state.retirement_cost_of_living * (1.0 / state.rates.withdraw_rate)


def goal_reached(state: "FiscalState") -> bool:
    """True once passive income covers the (indexed) retirement cost of living."""
    return passive_income(state) >= state.retirement_cost_of_living


def first_period_reaching_goal(states: Iterable["FiscalState"],
                               max_periods: int) -> Optional["FiscalState"]:
    """
    Scan at most ``max_periods`` states for the first one meeting the goal.

    Args:
        states: Any iterable of states, typically a Simulation
        max_periods: Upper bound on the number of states inspected

    Returns:
        The first state whose passive income covers retirement spending,
        or None if none does within the bound
    """
    for state in islice(states, max_periods):
        if goal_reached(state):
            return state
    return None
