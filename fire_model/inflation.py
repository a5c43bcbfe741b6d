"""
Inflation Indexing

Scales nominal monetary constants (contribution caps, bracket bounds, cost
of living) by the compounded inflation since the start of the projection.
Rates and account balances are never indexed.
"""

from dataclasses import dataclass, field

from .money import Precision
from .tax import TaxBracket, validate_bracket_tables

# Annual limits in force when the bracket data was collected
DEFAULT_RRSP_LIMIT = 26_500.0  # 2019 value
DEFAULT_TFSA_LIMIT = 6_000.0  # 2021 value


def index(amount: float, rate: float, elapsed_periods: int) -> float:
    """
    Inflate ``amount`` by ``rate`` compounded over ``elapsed_periods``.

    ``index(x, r, 0) == x`` for every ``x`` and ``r``.
    """
    if elapsed_periods == 0:
        return amount
    return amount * rate ** elapsed_periods


@dataclass(frozen=True)
class Constants:
    """
    Monetary constants that move with inflation.

    A fresh instance is derived for every period so that every cap and every
    bracket bound shift together. ``tax_brackets`` holds one or more
    jurisdiction tables back to back; each must run contiguously from 0.

    Raises:
        ConfigurationError: If a bracket table has a gap or overlap
    """
    tfsa_limit: float = DEFAULT_TFSA_LIMIT
    rrsp_limit: float = DEFAULT_RRSP_LIMIT
    tax_brackets: tuple[TaxBracket, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # frozen dataclass, normalize in place
        object.__setattr__(self, "tax_brackets", validate_bracket_tables(self.tax_brackets))

    def adjust_for_inflation(self, inflation_rate: float, elapsed_periods: int = 1,
                             precision: Precision = Precision.FLOAT) -> "Constants":
        """Return the constants as they stand ``elapsed_periods`` later."""
        if elapsed_periods == 0:
            return self

        q = precision.quantize
        brackets = []
        for bracket in self.tax_brackets:
            adjusted = bracket.adjust_for_inflation(inflation_rate, elapsed_periods)
            brackets.append(TaxBracket(q(adjusted.lower_bound), q(adjusted.upper_bound),
                                       adjusted.rate))

        return Constants(
            tfsa_limit=q(index(self.tfsa_limit, inflation_rate, elapsed_periods)),
            rrsp_limit=q(index(self.rrsp_limit, inflation_rate, elapsed_periods)),
            tax_brackets=tuple(brackets),
        )
