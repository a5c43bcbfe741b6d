"""
Progressive Income Tax

Marginal tax brackets, bracket-table validation and the progressive tax
calculator. Bracket tables are supplied as data (one per jurisdiction) and
are indexed for inflation by the caller before any lookup.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

import numpy as np

from .errors import ConfigurationError

# Share of capital gains added to the taxable base
CAPITAL_GAINS_INCLUSION_RATE = 0.5


@dataclass(frozen=True)
class TaxBracket:
    """
    A single marginal rate applied to the income between two bounds.

    Attributes:
        lower_bound: Income where the bracket starts
        upper_bound: Income where the bracket ends
        rate: Marginal rate in percent (e.g. 20.5 for 20.5%)
    """
    lower_bound: float
    upper_bound: float
    rate: float

    def __post_init__(self):
        if not self.lower_bound < self.upper_bound:
            raise ConfigurationError(
                f"Tax bracket lower bound {self.lower_bound:,.0f} must be below "
                f"upper bound {self.upper_bound:,.0f}"
            )
        if not 0.0 <= self.rate <= 100.0:
            raise ConfigurationError(f"Tax bracket rate {self.rate} outside [0, 100]")

    @classmethod
    def from_dict(cls, data: Mapping) -> "TaxBracket":
        """
        Build a bracket from a config record.

        Missing bounds default to 0 and ``percentage`` is accepted as an
        alias for ``rate``.
        """
        rate = data.get("rate", data.get("percentage", 0.0))
        return cls(
            lower_bound=float(data.get("lower_bound", 0)),
            upper_bound=float(data.get("upper_bound", 0)),
            rate=float(rate),
        )

    def compute_tax(self, income: float) -> float:
        """Tax owed on the portion of ``income`` falling in this bracket."""
        portion = max(0.0, min(income, self.upper_bound) - self.lower_bound)
        return portion * self.rate / 100.0

    def adjust_for_inflation(self, inflation_rate: float,
                             elapsed_periods: int = 1) -> "TaxBracket":
        """Return a copy with both bounds scaled by ``inflation_rate ** elapsed_periods``."""
        factor = inflation_rate ** elapsed_periods
        return TaxBracket(
            lower_bound=self.lower_bound * factor,
            upper_bound=self.upper_bound * factor,
            rate=self.rate,
        )


def validate_bracket_table(brackets: Iterable[TaxBracket],
                           name: str = "tax") -> tuple[TaxBracket, ...]:
    """
    Check that a table covers income contiguously from zero.

    Args:
        brackets: Brackets ordered from lowest to highest
        name: Table name used in error messages

    Returns:
        The table as a tuple

    Raises:
        ConfigurationError: If the first bracket does not start at 0 or two
            neighbouring brackets leave a gap or overlap
    """
    table = tuple(brackets)
    if not table:
        return table

    if table[0].lower_bound != 0:
        raise ConfigurationError(
            f"{name} brackets must start at 0, first starts at {table[0].lower_bound:,.0f}"
        )

    for previous, current in zip(table, table[1:]):
        if current.lower_bound != previous.upper_bound:
            kind = "gap" if current.lower_bound > previous.upper_bound else "overlap"
            raise ConfigurationError(
                f"{name} brackets have a {kind} between {previous.upper_bound:,.0f} "
                f"and {current.lower_bound:,.0f}"
            )

    return table


def validate_bracket_tables(brackets: Iterable[TaxBracket]) -> tuple[TaxBracket, ...]:
    """
    Validate a concatenation of jurisdiction tables.

    A new table starts at every bracket whose lower bound is 0; each table
    is then checked with ``validate_bracket_table``.

    Returns:
        All brackets as one tuple, in the order given
    """
    tables = []
    for bracket in brackets:
        if not tables or bracket.lower_bound == 0:
            tables.append([])
        tables[-1].append(bracket)

    combined = ()
    for number, table in enumerate(tables, start=1):
        combined += validate_bracket_table(table, name=f"table {number}")
    return combined


def compute_tax(brackets: Sequence[TaxBracket], income: float) -> float:
    """
    Total progressive tax on ``income`` across a bracket table.

    Each bracket taxes ``max(0, min(income, upper) - lower)`` at its rate.
    Several jurisdictions can be passed as one concatenated sequence.
    """
    if income <= 0 or not brackets:
        return 0.0

    lower = np.array([b.lower_bound for b in brackets], dtype=float)
    upper = np.array([b.upper_bound for b in brackets], dtype=float)
    rates = np.array([b.rate for b in brackets], dtype=float)

    portions = np.maximum(0.0, np.minimum(income, upper) - lower)
    return float(np.sum(portions * rates / 100.0))


def net_income(brackets: Sequence[TaxBracket], income: float,
               capital_gains: float = 0.0) -> float:
    """
    After-tax income.

    Only half of ``capital_gains`` enters the taxable base, but the whole
    amount is added back after tax.

    Args:
        brackets: Inflation-adjusted bracket table(s)
        income: Ordinary income
        capital_gains: Gains-like income taxed at the inclusion rate

    Returns:
        ``income + capital_gains - tax``
    """
    taxable = income + capital_gains * CAPITAL_GAINS_INCLUSION_RATE
    return income + capital_gains - compute_tax(brackets, taxable)
