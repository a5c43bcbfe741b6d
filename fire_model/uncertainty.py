"""
Uncertainty Analysis Module

Monte Carlo sweeps over rate assumptions. Each scenario draws its own
return and inflation factors, gets its own immutable config and runs an
independent projection chain.
"""

import logging
from dataclasses import dataclass, replace
from itertools import islice
from typing import Optional

import numpy as np
from scipy import stats

from .config import ProjectionConfig
from .metrics import goal_reached
from .simulation import Simulation

logger = logging.getLogger(__name__)


@dataclass
class UncertaintyFactors:
    """
    Spread of the rate assumptions across scenarios.
    """
    return_std: float = 0.02  # Std dev of the annual return factor
    inflation_std: float = 0.01  # Std dev of the annual inflation factor
    salary_growth_std: float = 0.0


@dataclass
class SweepResult:
    """
    Outcome of a scenario sweep.

    Attributes:
        returns: Return factor drawn for each scenario
        inflation: Inflation factor drawn for each scenario
        periods_to_goal: Periods until passive income covers retirement
            spending (NaN when not reached within the horizon)
        final_assets: Total assets at the end of the horizon
        horizon: Periods projected per scenario
    """
    returns: np.ndarray
    inflation: np.ndarray
    periods_to_goal: np.ndarray
    final_assets: np.ndarray
    horizon: int

    @property
    def n_scenarios(self) -> int:
        return len(self.final_assets)

    @property
    def success_rate(self) -> float:
        """Share of scenarios reaching the goal within the horizon."""
        return float(np.mean(~np.isnan(self.periods_to_goal)))

    def goal_percentiles(self, percentiles=(10, 50, 90)) -> dict:
        """Percentiles of periods-to-goal among scenarios that reach it."""
        reached = self.periods_to_goal[~np.isnan(self.periods_to_goal)]
        if reached.size == 0:
            return {p: np.nan for p in percentiles}
        return {p: float(np.percentile(reached, p)) for p in percentiles}

    def final_assets_interval(self, percentile: float = 0.9) -> tuple[float, float]:
        """Normal-approximation confidence interval for mean final assets."""
        z_score = stats.norm.ppf((1 + percentile) / 2)
        mean = np.mean(self.final_assets)
        sem = np.std(self.final_assets, ddof=1) / np.sqrt(self.n_scenarios) \
            if self.n_scenarios > 1 else 0.0
        return (float(mean - z_score * sem), float(mean + z_score * sem))


class ScenarioSweep:
    """
    Monte Carlo projection over uncertain rate assumptions.

    Args:
        config: Central-case configuration
        factors: Spread of the sampled rates
        seed: Seed for the random generator (same seed, same sweep)
    """

    def __init__(self, config: ProjectionConfig,
                 factors: Optional[UncertaintyFactors] = None,
                 seed: Optional[int] = None):
        self.config = config
        self.factors = factors or UncertaintyFactors()
        self.rng = np.random.default_rng(seed)

    def sample_configs(self, n_scenarios: int) -> list[ProjectionConfig]:
        """Draw ``n_scenarios`` configs, one immutable copy per scenario."""
        rates = self.config.rates
        returns = self.rng.normal(rates.return_on_investment, self.factors.return_std, n_scenarios)
        inflation = self.rng.normal(rates.inflation, self.factors.inflation_std, n_scenarios)
        growth = self.rng.normal(rates.salary_growth, self.factors.salary_growth_std, n_scenarios)

        # Factors must stay positive for indexing and root extraction
        returns = np.maximum(returns, 0.0)
        inflation = np.maximum(inflation, 1e-6)
        growth = np.maximum(growth, 0.0)

        return [
            replace(self.config, rates=replace(
                rates,
                return_on_investment=float(r),
                inflation=float(i),
                salary_growth=float(g),
            ))
            for r, i, g in zip(returns, inflation, growth)
        ]

    def run(self, n_scenarios: int = 500, horizon: int = 40) -> SweepResult:
        """
        Project every sampled scenario for ``horizon`` periods.
        """
        if horizon < 1:
            raise ValueError(f"horizon must be at least 1, got {horizon}")

        configs = self.sample_configs(n_scenarios)
        periods_to_goal = np.full(n_scenarios, np.nan)
        final_assets = np.zeros(n_scenarios)

        for i, config in enumerate(configs):
            last = None
            for last in islice(Simulation(config), horizon):
                if np.isnan(periods_to_goal[i]) and goal_reached(last):
                    periods_to_goal[i] = last.elapsed_periods
            final_assets[i] = last.total_assets

        result = SweepResult(
            returns=np.array([c.rates.return_on_investment for c in configs]),
            inflation=np.array([c.rates.inflation for c in configs]),
            periods_to_goal=periods_to_goal,
            final_assets=final_assets,
            horizon=horizon,
        )
        logger.info(f"Scenario sweep: {n_scenarios} scenarios, "
                    f"{result.success_rate:.0%} reach the goal within {horizon} periods")
        return result
