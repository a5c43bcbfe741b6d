"""
Compounding Growth Model

Applies an annual growth factor to an account balance, either once a year
or split into N sub-annual periods with the contribution spread evenly over
them. The per-period factor ``r`` satisfying ``r ** N == R`` is extracted
with Newton's method.
"""

import logging

from .money import Precision

logger = logging.getLogger(__name__)

# Relative step size at which Newton's iteration is considered converged
CONVERGENCE_EPSILON = 1e-9
MAX_ITERATIONS = 1000


def per_period_rate(annual_rate: float, periods_per_year: int) -> float:
    """
    Solve ``r ** N == R`` for the per-period growth factor.

    Iterates ``x1 = ((N - 1) * x0 + R / x0 ** (N - 1)) / N`` until
    ``|x1 - x0| < epsilon * |x0|``. The starting guess is ``R / N`` raised
    to at least 1.0: from there the iterates never underflow and approach
    the root from above after at most one step.

    Args:
        annual_rate: Annual growth factor R (1.07 for a 7% return)
        periods_per_year: Number of compounding periods N

    Returns:
        Per-period growth factor r

    Raises:
        ArithmeticError: If no real positive root exists or the iteration
            does not converge within MAX_ITERATIONS
    """
    n = periods_per_year
    if n < 1:
        raise ArithmeticError(f"periods_per_year must be at least 1, got {n}")
    if n == 1:
        return annual_rate
    if annual_rate == 0:
        return 0.0
    if annual_rate < 0:
        raise ArithmeticError(
            f"No real per-period growth factor for annual rate {annual_rate} over {n} periods"
        )

    x0 = max(annual_rate / n, 1.0)
    for iteration in range(1, MAX_ITERATIONS + 1):
        x1 = ((n - 1) * x0 + annual_rate / x0 ** (n - 1)) / n
        if abs(x1 - x0) < CONVERGENCE_EPSILON * abs(x0):
            logger.debug(f"Per-period rate {x1:.12f} for R={annual_rate}, N={n} "
                         f"after {iteration} iterations")
            return x1
        x0 = x1

    raise ArithmeticError(
        f"Per-period rate for R={annual_rate}, N={n} did not converge "
        f"after {MAX_ITERATIONS} iterations"
    )


def compound(balance: float, annual_rate: float, contribution: float = 0.0,
             periods_per_year: int = 1,
             precision: Precision = Precision.FLOAT) -> float:
    """
    Grow ``balance`` for one year and add ``contribution``.

    With one period this is ``balance + balance * (R - 1) + contribution``.
    With N periods, each step adds ``balance * (r - 1) + contribution / N``.
    """
    q = precision.quantize
    if periods_per_year == 1:
        return q(balance + balance * (annual_rate - 1.0) + contribution)

    rate = per_period_rate(annual_rate, periods_per_year)
    installment = contribution / periods_per_year
    for _ in range(periods_per_year):
        balance = q(balance + balance * (rate - 1.0) + installment)
    return balance


def return_on_investment(balance: float, annual_rate: float,
                         periods_per_year: int = 1) -> float:
    """
    Growth earned by ``balance`` over one year with no new contributions.

    Equals ``balance * (R - 1)`` for a single period.
    """
    if periods_per_year == 1:
        return balance * (annual_rate - 1.0)
    return compound(balance, annual_rate, 0.0, periods_per_year) - balance
