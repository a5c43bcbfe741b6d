"""
Regression tests for package wiring and the Streamlit helpers.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import fire_model
from fire_model.money import Precision
from fire_model.reporting import ProjectionReport
from fire_model.simulation import Simulation
from fire_model.ui import (
    build_assets_figure,
    build_config_from_inputs,
    load_base_config,
    render_projection_results,
    run_main_app,
)
from fire_model.ui.app_controller import FALLBACK_CONFIG


class DummyStreamlit:
    """Records every call; widgets return their default value."""

    def __init__(self):
        self.calls = []
        self.sidebar = self

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def __getattr__(self, name):
        def _record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
        return _record

    def called(self, name):
        return [c for c in self.calls if c[0] == name]

    def columns(self, n):
        self.calls.append(("columns", (n,), {}))
        return [self for _ in range(n)]

    def number_input(self, label, **kwargs):
        return kwargs["value"]

    def slider(self, label, min_value, max_value, value, step=None, **kwargs):
        return value

    def selectbox(self, label, options, index=0, **kwargs):
        return options[index]


def test_package_exports():
    for name in fire_model.__all__:
        assert hasattr(fire_model, name), name
    assert fire_model.__version__


def test_build_config_from_inputs_mapping(sample_config):
    inputs = {
        "salary": 100_000.0,
        "cost_of_living": 40_000.0,
        "retirement_cost_of_living": 45_000.0,
        "inflation": 1.03,
        "salary_growth": 1.02,
        "return_on_investment": 1.05,
        "employer_match_rate": 0.02,
        "withdraw_rate": 0.035,
        "dividend_fraction": 0.25,
        "number_of_years": 30,
        "base_year": 2024,
        "periods_per_year": 26,
        "precision": "cents",
    }
    config = build_config_from_inputs(inputs, sample_config)

    assert config.salary == 100_000
    assert config.rates.inflation == 1.03
    assert config.rates.dividend_fraction == 0.25
    assert config.periods_per_year == 26
    assert config.precision is Precision.CENTS
    # Brackets and balances come from the base config
    assert config.constants == sample_config.constants
    assert config.starting_assets == sample_config.starting_assets


def test_load_base_config_fallback(tmp_path):
    config = load_base_config(tmp_path)
    assert config.salary == FALLBACK_CONFIG["salary"]


def test_load_base_config_reads_file(sample_config_path):
    config = load_base_config(sample_config_path.parent)
    assert config.salary == 140_000


def test_build_assets_figure(taxed_config):
    df = ProjectionReport(Simulation(taxed_config), number_of_years=5).to_dataframe()
    fig = build_assets_figure(df)

    assert len(fig.data) == 4
    assert [trace.name for trace in fig.data] == ["RRSP", "TFSA", "Unregistered", "Savings goal"]


def test_render_projection_results(taxed_config):
    st = DummyStreamlit()
    report = ProjectionReport(Simulation(taxed_config), number_of_years=5, base_year=2024)

    render_projection_results(st_module=st, report=report)

    assert len(st.called("metric")) == 3
    assert len(st.called("plotly_chart")) == 1
    assert len(st.called("dataframe")) == 1
    download = st.called("download_button")[0]
    assert download[2]["data"] == report.to_csv()


def test_render_projection_results_empty(taxed_config):
    st = DummyStreamlit()
    render_projection_results(st_module=st,
                              report=ProjectionReport(Simulation(taxed_config), 0))

    assert st.called("info")
    assert not st.called("metric")


def test_run_main_app_smoke(sample_config_path):
    st = DummyStreamlit()
    run_main_app(st_module=st, app_root=sample_config_path.parent)

    assert st.called("title")
    assert not st.called("error")
    assert len(st.called("metric")) == 3


def test_run_main_app_reports_invalid_inputs(sample_config_path, monkeypatch):
    st = DummyStreamlit()
    # Zero withdrawal rate is rejected by Rates
    monkeypatch.setattr(DummyStreamlit, "slider",
                        lambda self, label, lo, hi, value, step=None, **kw:
                        0.0 if label.startswith("Withdrawal") else value)

    run_main_app(st_module=st, app_root=sample_config_path.parent)

    assert st.called("error")
    assert not st.called("metric")


def test_cli_entry_point_importable():
    from fire_model.cli import main
    assert callable(main)
