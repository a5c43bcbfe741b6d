"""
Projection results renderer.
"""

from __future__ import annotations

from typing import Any

import pandas as pd
import plotly.graph_objects as go

from ..reporting import ProjectionReport

ACCOUNT_COLUMNS = {
    "RRSP Assets": "RRSP",
    "TFSA Assets": "TFSA",
    "Unregistered Assets": "Unregistered",
}


def build_assets_figure(df: pd.DataFrame) -> go.Figure:
    """
    Stacked account balances with the savings goal overlaid.
    """
    fig = go.Figure()
    for column, label in ACCOUNT_COLUMNS.items():
        fig.add_trace(go.Scatter(
            x=df["Year"],
            y=df[column],
            name=label,
            stackgroup="assets",
            mode="lines",
        ))
    fig.add_trace(go.Scatter(
        x=df["Year"],
        y=df["Goal"],
        name="Savings goal",
        mode="lines",
        line=dict(color="black", dash="dash"),
    ))
    fig.update_layout(
        xaxis_title="Year",
        yaxis_title="Assets ($)",
        yaxis_tickformat="$,.0f",
        hovermode="x unified",
    )
    return fig


def render_projection_results(st_module: Any, report: ProjectionReport) -> None:
    """
    Render headline metrics, the asset chart and the year-by-year table.
    """
    df = report.to_dataframe()
    if df.empty:
        st_module.info("No years projected.")
        return

    last = df.iloc[-1]
    goal_year = report.first_goal_year()

    col1, col2, col3 = st_module.columns(3)
    with col1:
        st_module.metric("Final Total Assets", f"${last['Total Assets']:,.0f}")
    with col2:
        st_module.metric("Final Passive Income", f"${last['Passive Income']:,.0f}")
    with col3:
        st_module.metric("Goal Reached", str(goal_year) if goal_year is not None else "Not yet")

    st_module.plotly_chart(build_assets_figure(df), use_container_width=True)

    st_module.subheader("Year-by-Year Projection")
    st_module.dataframe(df.style.format("{:,.0f}", subset=df.columns[1:]), use_container_width=True)

    st_module.download_button(
        "Download CSV",
        data=report.to_csv(),
        file_name="projection.csv",
        mime="text/csv",
    )
