"""
Contribution Allocation Engine

Splits a period's savings across accounts in a fixed priority order:

1. The tax-deferred account receives the contribution headroom, shared
   between the employer match and the employee.
2. Taxes are computed on income net of the personal tax-deferred
   contribution; what is left after cost of living is discretionary.
3. Remaining accounts take discretionary income in priority order, each up
   to its cap; an uncapped account absorbs the rest.

Contributions never go negative: a shortfall is not borrowed from assets.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from .accounts import AccountDefinition, AccountKind
from .inflation import Constants
from .money import Precision
from .tax import net_income

logger = logging.getLogger(__name__)

# Share of earned income that becomes tax-deferred contribution room
DEFAULT_CONTRIBUTION_RATE = 0.18


@dataclass(frozen=True)
class MatchSplit:
    """
    Division of tax-deferred headroom between employer and employee.

    Attributes:
        employer: Employer match deposited on the employee's behalf
        matched_personal: Employee contribution that earns the match
        unmatched_personal: Remaining headroom the employee fills alone
    """
    employer: float
    matched_personal: float
    unmatched_personal: float

    @property
    def personal(self) -> float:
        return self.matched_personal + self.unmatched_personal

    @property
    def total(self) -> float:
        return self.employer + self.personal


@dataclass(frozen=True)
class Allocation:
    """Result of one pass through the contribution waterfall."""
    match: MatchSplit
    taxable_income: float
    net_income: float
    discretionary_income: float
    contributions: Mapping[str, float]

    @property
    def personal_contribution(self) -> float:
        return self.match.personal

    @property
    def employer_contribution(self) -> float:
        return self.match.employer


def contribution_headroom(state) -> float:
    """
    Tax-deferred contribution room generated by ``state``.

    ``min(indexed cap, income * contribution_rate)``. For the first period an
    explicit ``rrsp_contribution_headroom`` from the config takes precedence.
    """
    config = state.config
    if state.elapsed_periods == 0 and config.rrsp_contribution_headroom > 0:
        return config.precision.quantize(config.rrsp_contribution_headroom)

    room = max(0.0, state.income * config.contribution_rate)
    cap = config.deferred_account.cap(state.constants)
    if cap is not None:
        room = min(cap, room)
    return config.precision.quantize(room)


def employer_match(salary: float, headroom: float, match_rate: float) -> MatchSplit:
    """
    Share tax-deferred headroom between employer match and employee.

    The employer matches ``salary * match_rate`` dollar for dollar. When the
    matched pair would not fit in the headroom, the headroom is split evenly
    instead, so the employer share never exceeds half of it.

    Args:
        salary: Salary the match is computed against
        headroom: Tax-deferred contribution room for the period
        match_rate: Employer match as a fraction of salary

    Returns:
        MatchSplit whose total equals ``max(0, headroom)``
    """
    headroom = max(0.0, headroom)
    max_employer_match = max(0.0, salary * match_rate)

    if 2 * max_employer_match > headroom:
        half = headroom / 2
        return MatchSplit(employer=half, matched_personal=half, unmatched_personal=0.0)

    return MatchSplit(
        employer=max_employer_match,
        matched_personal=max_employer_match,
        unmatched_personal=headroom - 2 * max_employer_match,
    )


def allocate(income: float, salary: float, headroom: float, match_rate: float,
             cost_of_living: float, constants: Constants,
             accounts: Sequence[AccountDefinition],
             precision: Precision = Precision.FLOAT) -> Allocation:
    """
    Run the contribution waterfall for one period.

    Args:
        income: Total income (salary plus dividends)
        salary: Salary used for the employer match
        headroom: Tax-deferred contribution room
        match_rate: Employer match rate
        cost_of_living: This period's (indexed) spending
        constants: This period's indexed caps and brackets
        accounts: Accounts sorted by priority
        precision: Rounding applied to each stored amount

    Returns:
        Allocation with one contribution per account
    """
    q = precision.quantize
    headroom = q(max(0.0, headroom))
    split = employer_match(salary, headroom, match_rate)

    # Round the employer share once; the employee takes the exact rest
    employer = q(split.employer)
    matched = q(min(employer, headroom - employer))
    split = MatchSplit(
        employer=employer,
        matched_personal=matched,
        unmatched_personal=q(max(0.0, headroom - employer - matched)),
    )

    taxable_income = income - split.personal
    after_tax = q(net_income(constants.tax_brackets, taxable_income))
    discretionary = after_tax - cost_of_living

    contributions = {}
    remaining = max(0.0, discretionary)
    for account in accounts:
        if account.kind is AccountKind.TAX_DEFERRED:
            contributions[account.name] = q(split.total)
            continue

        cap = account.cap(constants)
        amount = remaining if cap is None else min(cap, remaining)
        amount = q(max(0.0, amount))
        contributions[account.name] = amount
        remaining -= amount

    if discretionary < 0:
        logger.debug(f"Cost of living exceeds net income by ${-discretionary:,.2f}; "
                     "no discretionary contributions")

    return Allocation(
        match=split,
        taxable_income=taxable_income,
        net_income=after_tax,
        discretionary_income=discretionary,
        contributions=MappingProxyType(contributions),
    )
