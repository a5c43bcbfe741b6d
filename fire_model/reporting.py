"""
Reporting and Visualization Module

Turns a bounded run of fiscal states into a year-by-year table, CSV text,
a plain-text summary and an asset chart.
"""

import logging
from itertools import islice
from typing import Iterable, Optional

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import numpy as np
import pandas as pd

from .accounts import AccountKind
from .metrics import goal_reached
from .simulation import FiscalState

logger = logging.getLogger(__name__)

COLUMNS = [
    "Year",
    "Salary",
    "Dividend Income",
    "Income",
    "Taxable Income",
    "Net Income",
    "Cost of Living",
    "Personal RRSP Contribution",
    "Contribution to Employer RRSP",
    "RRSP Contribution",
    "TFSA Contribution",
    "Unregistered Contribution",
    "Total Contribution",
    "RRSP Assets",
    "TFSA Assets",
    "Unregistered Assets",
    "Total Assets",
    "Goal",
    "Passive Income",
    "Retirement Cost of Living",
]

# Amounts at or above this get a thousands separator
SEPARATOR_THRESHOLD = 10_000


def format_amount(value: float) -> str:
    """
    Truncate to whole dollars; use ``_`` as thousands separator from 10_000 up.

    >>> format_amount(9999.9)
    '9999'
    >>> format_amount(140000)
    '140_000'
    """
    n = int(value)
    if n >= SEPARATOR_THRESHOLD:
        return f"{n:_}"
    return str(n)


def state_to_row(state: FiscalState, base_year: int = 0) -> dict:
    """One report row for ``state``; Year is ``base_year + elapsed_periods + 1``."""
    return {
        "Year": base_year + state.elapsed_periods + 1,
        "Salary": state.salary,
        "Dividend Income": state.dividend_income,
        "Income": state.income,
        "Taxable Income": state.taxable_income,
        "Net Income": state.net_income,
        "Cost of Living": state.cost_of_living,
        "Personal RRSP Contribution": state.personal_contribution,
        "Contribution to Employer RRSP": state.employer_contribution,
        "RRSP Contribution": state.total_rrsp_contribution,
        "TFSA Contribution": state.contribution_of_kind(AccountKind.TAX_FREE),
        "Unregistered Contribution": state.contribution_of_kind(AccountKind.TAXABLE),
        "Total Contribution": state.total_contribution,
        "RRSP Assets": state.deferred_assets,
        "TFSA Assets": state.tax_free_assets,
        "Unregistered Assets": state.taxable_assets,
        "Total Assets": state.total_assets,
        "Goal": state.savings_goal,
        "Passive Income": state.passive_income,
        "Retirement Cost of Living": state.retirement_cost_of_living,
    }


class ProjectionReport:
    """
    Generate reports for the first ``number_of_years`` states of a run.

    Args:
        states: Any iterable of states, typically a Simulation
        number_of_years: Number of states to take from ``states``
        base_year: Offset added to the period index in the Year column
    """

    def __init__(self, states: Iterable[FiscalState], number_of_years: int = 20,
                 base_year: int = 0):
        self.states = list(islice(states, number_of_years))
        self.base_year = base_year
        logger.info(f"Projection report over {len(self.states)} years from {base_year + 1}")

    def to_dataframe(self) -> pd.DataFrame:
        """Year-by-year figures as a DataFrame with the report columns."""
        rows = [state_to_row(s, self.base_year) for s in self.states]
        return pd.DataFrame(rows, columns=COLUMNS)

    def to_csv(self) -> str:
        """CSV text with truncated, separator-formatted amounts."""
        df = self.to_dataframe()
        lines = [",".join(COLUMNS)]
        for row in df.itertuples(index=False):
            year, *amounts = row
            lines.append(",".join([str(int(year))] + [format_amount(v) for v in amounts]))
        return "\n".join(lines) + "\n"

    def first_goal_year(self) -> Optional[int]:
        """Report year in which passive income first covers retirement spending."""
        for state in self.states:
            if goal_reached(state):
                return self.base_year + state.elapsed_periods + 1
        return None

    def generate_text_report(self) -> str:
        """Generate a short text summary of the projection."""
        lines = []

        lines.append("=" * 60)
        lines.append("FINANCIAL INDEPENDENCE PROJECTION")
        lines.append("=" * 60)
        lines.append("")

        if not self.states:
            lines.append("No years projected.")
            return "\n".join(lines)

        first, last = self.states[0], self.states[-1]
        lines.append(f"Years projected:            {len(self.states):>12}")
        lines.append(f"Starting salary:            {first.salary:>12,.0f}")
        lines.append(f"Final salary:               {last.salary:>12,.0f}")
        lines.append(f"Final total assets:         {last.total_assets:>12,.0f}")
        lines.append(f"Final savings goal:         {last.savings_goal:>12,.0f}")
        lines.append(f"Final passive income:       {last.passive_income:>12,.0f}")
        lines.append("")

        goal_year = self.first_goal_year()
        if goal_year is None:
            lines.append("Passive income does not cover retirement spending "
                         "within the projection.")
        else:
            lines.append(f"Passive income covers retirement spending in year {goal_year}.")
        lines.append("")

        return "\n".join(lines)

    def plot_assets(self, save_path: Optional[str] = None,
                    show: bool = True) -> plt.Figure:
        """
        Stacked account balances against the savings goal.
        """
        df = self.to_dataframe()
        fig, ax = plt.subplots(figsize=(12, 6))

        years = df["Year"].to_numpy()
        balances = np.vstack([
            df["RRSP Assets"].to_numpy(),
            df["TFSA Assets"].to_numpy(),
            df["Unregistered Assets"].to_numpy(),
        ])
        ax.stackplot(years, balances, labels=["RRSP", "TFSA", "Unregistered"], alpha=0.7)
        ax.plot(years, df["Goal"], 'k--', linewidth=1.5, label='Savings goal')

        ax.set_xlabel('Year')
        ax.set_ylabel('Assets ($)')
        ax.set_title('Projected Assets')
        ax.legend(loc='upper left')
        ax.yaxis.set_major_formatter(mticker.StrMethodFormatter('${x:,.0f}'))
        ax.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
        if show:
            plt.show()

        return fig
