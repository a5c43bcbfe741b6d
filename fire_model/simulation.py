"""
Fiscal State Machine

A FiscalState is an immutable snapshot of one fiscal period. ``advance``
derives the next period purely from the previous state and the run's
shared config; ``Simulation`` exposes the resulting chain as an unbounded
lazy iterator. Consumers decide how many periods to take.

Example:
    >>> from itertools import islice
    >>> sim = Simulation(config)
    >>> for state in islice(sim, 40):
    ...     print(state.elapsed_periods, state.total_assets)
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from . import metrics
from .accounts import AccountKind
from .allocation import allocate, contribution_headroom
from .config import ProjectionConfig, Rates
from .growth import compound
from .inflation import Constants, index
from .tax import net_income

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FiscalState:
    """
    Snapshot of one fiscal period.

    Attributes:
        salary: Employment income for the period
        dividend_income: Dividends paid out by taxable accounts
        personal_contribution: Employee's tax-deferred contribution
        employer_contribution: Employer match to the tax-deferred account
        contributions: Contribution made to each account this period
        assets: End-of-period balance of each account
        cost_of_living: Indexed spending for the period
        retirement_cost_of_living: Indexed retirement spending target
        elapsed_periods: Periods since the start of the projection
        constants: Caps and brackets indexed to ``elapsed_periods``
        config: Shared run configuration
    """
    salary: float
    dividend_income: float
    personal_contribution: float
    employer_contribution: float
    contributions: Mapping[str, float]
    assets: Mapping[str, float]
    cost_of_living: float
    retirement_cost_of_living: float
    elapsed_periods: int
    constants: Constants
    config: ProjectionConfig = field(repr=False, compare=False)

    @property
    def rates(self) -> Rates:
        return self.config.rates

    @property
    def income(self) -> float:
        """Salary plus dividend income."""
        return self.salary + self.dividend_income

    @property
    def taxable_income(self) -> float:
        return self.income - self.personal_contribution

    @property
    def net_income(self) -> float:
        """Taxable income after provincial and federal tax."""
        return net_income(self.constants.tax_brackets, self.taxable_income)

    @property
    def discretionary_income(self) -> float:
        return self.net_income - self.cost_of_living

    def assets_of_kind(self, kind: AccountKind) -> float:
        return sum(self.assets[a.name] for a in self.config.accounts if a.kind is kind)

    def contribution_of_kind(self, kind: AccountKind) -> float:
        return sum(self.contributions[a.name] for a in self.config.accounts if a.kind is kind)

    @property
    def deferred_assets(self) -> float:
        return self.assets_of_kind(AccountKind.TAX_DEFERRED)

    @property
    def tax_free_assets(self) -> float:
        return self.assets_of_kind(AccountKind.TAX_FREE)

    @property
    def taxable_assets(self) -> float:
        return self.assets_of_kind(AccountKind.TAXABLE)

    @property
    def total_assets(self) -> float:
        return sum(self.assets.values())

    @property
    def total_rrsp_contribution(self) -> float:
        return self.personal_contribution + self.employer_contribution

    @property
    def total_contribution(self) -> float:
        return sum(self.contributions.values())

    @property
    def passive_income(self) -> float:
        return metrics.passive_income(self)

    @property
    def savings_goal(self) -> float:
        return metrics.savings_goal(self)


def initial_state(config: ProjectionConfig) -> FiscalState:
    """
    Period-0 state built directly from nominal config values.

    No contributions are applied; a configured ``rrsp_contribution_headroom``
    is consumed by the first ``advance``.
    """
    zero = MappingProxyType({a.name: 0.0 for a in config.accounts})
    return FiscalState(
        salary=config.precision.quantize(config.salary),
        dividend_income=0.0,
        personal_contribution=0.0,
        employer_contribution=0.0,
        contributions=zero,
        assets=config.starting_assets,
        cost_of_living=config.precision.quantize(config.cost_of_living),
        retirement_cost_of_living=config.precision.quantize(config.retirement_cost_of_living),
        elapsed_periods=0,
        constants=config.constants,
        config=config,
    )


def advance(state: FiscalState) -> FiscalState:
    """
    Derive the next fiscal period from ``state``.

    1. Grow salary, capped at ``salary_cap``.
    2. Pay dividends from the taxable accounts' previous balances.
    3. Allocate contributions using the headroom earned in ``state``.
    4. Index constants by one more period of inflation.
    5. Compound every account with this period's contributions.
    6. Index cost of living figures and step ``elapsed_periods``.
    """
    config = state.config
    rates = config.rates
    q = config.precision.quantize
    period = state.elapsed_periods + 1

    salary = q(min(rates.salary_cap, state.salary * rates.salary_growth))
    dividend_income = q(max(
        0.0, state.taxable_assets * (rates.return_on_investment - 1.0) * rates.dividend_fraction
    ))

    headroom = contribution_headroom(state)
    constants = config.constants.adjust_for_inflation(rates.inflation, period, config.precision)
    cost_of_living = q(index(config.cost_of_living, rates.inflation, period))

    allocation = allocate(
        income=salary + dividend_income,
        salary=salary,
        headroom=headroom,
        match_rate=rates.employer_match_rate,
        cost_of_living=cost_of_living,
        constants=constants,
        accounts=config.accounts,
        precision=config.precision,
    )

    assets = {}
    for account in config.accounts:
        balance = compound(
            state.assets[account.name],
            account.growth_rate(rates),
            allocation.contributions[account.name],
            config.periods_per_year,
            config.precision,
        )
        assets[account.name] = max(0.0, balance)

    logger.debug(
        f"Period {period}: salary ${salary:,.0f}, headroom ${headroom:,.0f}, "
        f"discretionary ${allocation.discretionary_income:,.0f}, "
        f"assets ${sum(assets.values()):,.0f}"
    )

    return FiscalState(
        salary=salary,
        dividend_income=dividend_income,
        personal_contribution=allocation.personal_contribution,
        employer_contribution=allocation.employer_contribution,
        contributions=allocation.contributions,
        assets=MappingProxyType(assets),
        cost_of_living=cost_of_living,
        retirement_cost_of_living=q(index(config.retirement_cost_of_living,
                                          rates.inflation, period)),
        elapsed_periods=period,
        constants=constants,
        config=config,
    )


class Simulation:
    """
    Unbounded, lazy sequence of fiscal states for one config.

    The first ``next()`` returns the period-0 state; each later call derives
    exactly one new state. The iterator cannot be rewound: build a new
    Simulation from the same config for a fresh (identical) sequence.
    """

    def __init__(self, config: ProjectionConfig):
        self.config = config
        self._state = None

    def __iter__(self):
        return self

    def __next__(self) -> FiscalState:
        if self._state is None:
            self._state = initial_state(self.config)
        else:
            self._state = advance(self._state)
        return self._state
