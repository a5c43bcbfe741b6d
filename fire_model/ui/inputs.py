"""
Sidebar input rendering.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from ..config import ProjectionConfig
from ..money import Precision


def render_sidebar_inputs(st_module: Any, base_config: ProjectionConfig) -> dict[str, Any]:
    """
    Render projection inputs seeded from ``base_config`` and return the values.
    """
    rates = base_config.rates

    st_module.subheader("Income & Spending")
    salary = st_module.number_input("Salary ($)", min_value=0.0, value=base_config.salary, step=1000.0)
    cost_of_living = st_module.number_input(
        "Cost of living ($/yr)", min_value=0.0, value=base_config.cost_of_living, step=1000.0
    )
    retirement_cost_of_living = st_module.number_input(
        "Retirement cost of living ($/yr, today's dollars)",
        min_value=0.0,
        value=base_config.retirement_cost_of_living,
        step=1000.0,
    )

    st_module.subheader("Rates")
    inflation_pct = st_module.slider("Inflation (%)", 0.0, 10.0, (rates.inflation - 1) * 100, 0.1)
    salary_growth_pct = st_module.slider(
        "Salary growth (%)", 0.0, 20.0, (rates.salary_growth - 1) * 100, 0.5
    )
    return_pct = st_module.slider(
        "Return on investment (%)", -10.0, 20.0, (rates.return_on_investment - 1) * 100, 0.5
    )
    match_pct = st_module.slider("Employer RRSP match (% of salary)", 0.0, 10.0,
                                 rates.employer_match_rate * 100, 0.5)
    withdraw_pct = st_module.slider("Withdrawal rate (%)", 1.0, 10.0, rates.withdraw_rate * 100, 0.25,
                                    help="Share of the portfolio withdrawn each year in retirement")
    dividend_pct = st_module.slider(
        "Share of taxable return paid as dividends (%)", 0, 100,
        int(round(rates.dividend_fraction * 100)), 5,
    )

    st_module.subheader("Projection")
    number_of_years = st_module.slider("Years to project", 1, 60, 40)
    base_year = st_module.number_input("Base year", min_value=0, value=2024, step=1)
    periods_per_year = st_module.selectbox(
        "Compounding periods per year", [1, 12, 26, 52],
        index=0,
        help="Spread contributions over pay periods with sub-annual compounding",
    )
    precision = st_module.selectbox("Money precision", [p.value for p in Precision], index=0)

    return {
        "salary": salary,
        "cost_of_living": cost_of_living,
        "retirement_cost_of_living": retirement_cost_of_living,
        "inflation": 1 + inflation_pct / 100,
        "salary_growth": 1 + salary_growth_pct / 100,
        "return_on_investment": 1 + return_pct / 100,
        "employer_match_rate": match_pct / 100,
        "withdraw_rate": withdraw_pct / 100,
        "dividend_fraction": dividend_pct / 100,
        "number_of_years": int(number_of_years),
        "base_year": int(base_year),
        "periods_per_year": int(periods_per_year),
        "precision": precision,
    }


def build_config_from_inputs(inputs: dict[str, Any], base_config: ProjectionConfig) -> ProjectionConfig:
    """
    Overlay sidebar values on ``base_config``; brackets and balances are kept.
    """
    rates = replace(
        base_config.rates,
        inflation=inputs["inflation"],
        salary_growth=inputs["salary_growth"],
        return_on_investment=inputs["return_on_investment"],
        employer_match_rate=inputs["employer_match_rate"],
        withdraw_rate=inputs["withdraw_rate"],
        dividend_fraction=inputs["dividend_fraction"],
    )
    return replace(
        base_config,
        salary=inputs["salary"],
        cost_of_living=inputs["cost_of_living"],
        retirement_cost_of_living=inputs["retirement_cost_of_living"],
        rates=rates,
        periods_per_year=inputs["periods_per_year"],
        precision=Precision.parse(inputs["precision"]),
    )
