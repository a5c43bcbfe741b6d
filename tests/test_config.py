"""
Tests for configuration parsing, validation and TOML loading.
"""

import logging

import pytest

from fire_model.accounts import RRSP, TFSA, AccountDefinition, AccountKind
from fire_model.config import (
    DEFAULT_SALARY_CAP,
    DEFAULT_WITHDRAW_RATE,
    ProjectionConfig,
    Rates,
    load_config,
)
from fire_model.errors import ConfigurationError
from fire_model.inflation import Constants
from fire_model.money import Precision
from fire_model.tax import TaxBracket


@pytest.fixture
def minimal_data():
    return {
        "inflation": 1.02,
        "salary_growth": 1.03,
        "return_on_investment": 1.07,
        "salary": 80_000,
        "cost_of_living": 30_000,
        "retirement_cost_of_living": 35_000,
    }


class TestFromDict:
    """Mapping -> ProjectionConfig."""

    def test_defaults(self, minimal_data):
        config = ProjectionConfig.from_dict(minimal_data)

        assert config.rates.salary_cap == DEFAULT_SALARY_CAP
        assert config.rates.withdraw_rate == DEFAULT_WITHDRAW_RATE
        assert config.rates.employer_match_rate == 0.0
        assert config.rates.dividend_fraction == 0.0
        assert config.periods_per_year == 1
        assert config.precision is Precision.FLOAT
        assert config.constants.tax_brackets == ()
        assert dict(config.starting_assets) == {"rrsp": 0.0, "tfsa": 0.0, "unregistered": 0.0}

    def test_balances_and_match(self, minimal_data):
        minimal_data.update(employer_rrsp_match=0.05, rrsp_assets=1_000, tfsa_assets=2_000)
        config = ProjectionConfig.from_dict(minimal_data)

        assert config.rates.employer_match_rate == 0.05
        assert config.starting_assets["rrsp"] == 1_000
        assert config.starting_assets["tfsa"] == 2_000

    @pytest.mark.parametrize("missing", ["inflation", "salary", "retirement_cost_of_living"])
    def test_missing_required_key(self, minimal_data, missing):
        del minimal_data[missing]
        with pytest.raises(ConfigurationError, match=missing):
            ProjectionConfig.from_dict(minimal_data)

    def test_bracket_aliases(self, minimal_data):
        minimal_data["state_tax_brackets"] = [
            {"lower_bound": 0, "upper_bound": 10_000, "percentage": 0},
            {"lower_bound": 10_000, "upper_bound": 999_999, "percentage": 10},
        ]
        minimal_data["federal_tax_brackets"] = [
            {"lower_bound": 0, "upper_bound": 999_999, "rate": 15},
        ]
        config = ProjectionConfig.from_dict(minimal_data)

        brackets = config.constants.tax_brackets
        assert len(brackets) == 3
        assert brackets[1].rate == 10.0
        assert brackets[2].rate == 15.0

    def test_bracket_gap_rejected(self, minimal_data):
        minimal_data["federal_tax_brackets"] = [
            {"lower_bound": 0, "upper_bound": 10_000, "rate": 0},
            {"lower_bound": 12_000, "upper_bound": 999_999, "rate": 15},
        ]
        with pytest.raises(ConfigurationError, match="gap"):
            ProjectionConfig.from_dict(minimal_data)

    def test_precision_option(self, minimal_data):
        minimal_data["precision"] = "cents"
        assert ProjectionConfig.from_dict(minimal_data).precision is Precision.CENTS

    def test_invalid_precision(self, minimal_data):
        minimal_data["precision"] = "bitcoin"
        with pytest.raises(ConfigurationError, match="precision"):
            ProjectionConfig.from_dict(minimal_data)

    def test_non_numeric_value(self, minimal_data):
        minimal_data["salary"] = "lots"
        with pytest.raises(ConfigurationError, match="Invalid config value"):
            ProjectionConfig.from_dict(minimal_data)

    def test_unknown_key_warns(self, minimal_data, caplog):
        minimal_data["favourite_colour"] = "green"
        with caplog.at_level(logging.WARNING, logger="fire_model.config"):
            ProjectionConfig.from_dict(minimal_data)

        assert "favourite_colour" in caplog.text


class TestValidation:
    """Values rejected at construction."""

    def _rates(self, **kwargs):
        params = dict(inflation=1.02, salary_growth=1.0, return_on_investment=1.05)
        params.update(kwargs)
        return Rates(**params)

    @pytest.mark.parametrize("kwargs", [
        {"inflation": 0.0},
        {"withdraw_rate": 0.0},
        {"dividend_fraction": 1.5},
        {"dividend_fraction": -0.1},
    ])
    def test_invalid_rates(self, kwargs):
        with pytest.raises(ConfigurationError):
            self._rates(**kwargs)

    @pytest.mark.parametrize("kwargs", [
        {"starting_assets": {"rrsp": -1.0}},
        {"starting_assets": {"crypto": 100.0}},
        {"periods_per_year": 0},
        {"contribution_rate": -0.18},
        {"rrsp_contribution_headroom": -1.0},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ConfigurationError):
            ProjectionConfig(salary=50_000, cost_of_living=20_000,
                             retirement_cost_of_living=20_000, rates=self._rates(), **kwargs)

    def test_gapped_brackets_rejected_without_from_dict(self):
        with pytest.raises(ConfigurationError, match="gap"):
            ProjectionConfig(
                salary=90_000, cost_of_living=20_000, retirement_cost_of_living=20_000,
                rates=self._rates(),
                constants=Constants(tax_brackets=(TaxBracket(0, 10_000, 0.0),
                                                  TaxBracket(40_000, 999_999, 30.0))),
            )

    def test_two_deferred_accounts_rejected(self):
        second = AccountDefinition("rpp", AccountKind.TAX_DEFERRED, priority=5)
        with pytest.raises(ConfigurationError, match="Exactly one"):
            ProjectionConfig(salary=50_000, cost_of_living=20_000,
                             retirement_cost_of_living=20_000, rates=self._rates(),
                             accounts=(RRSP, TFSA, second))

    def test_duplicate_account_names_rejected(self):
        clash = AccountDefinition("tfsa", AccountKind.TAXABLE, priority=5)
        with pytest.raises(ConfigurationError, match="unique"):
            ProjectionConfig(salary=50_000, cost_of_living=20_000,
                             retirement_cost_of_living=20_000, rates=self._rates(),
                             accounts=(RRSP, TFSA, clash))

    def test_accounts_sorted_by_priority(self):
        config = ProjectionConfig(salary=50_000, cost_of_living=20_000,
                                  retirement_cost_of_living=20_000, rates=self._rates(),
                                  accounts=(TFSA, RRSP))
        assert [a.name for a in config.accounts] == ["rrsp", "tfsa"]
        assert config.deferred_account is RRSP


class TestLoadConfig:
    """TOML files."""

    def test_sample_config(self, sample_config):
        assert sample_config.salary == 140_000
        assert sample_config.rates.employer_match_rate == 0.06
        assert sample_config.rrsp_contribution_headroom == 14_400
        assert len(sample_config.constants.tax_brackets) == 11
        assert sample_config.starting_assets["tfsa"] == 24_000

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("salary = = 3\n")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(path)

    def test_missing_keys_in_file(self, tmp_path):
        path = tmp_path / "partial.toml"
        path.write_text("salary = 50000\n")
        with pytest.raises(ConfigurationError, match="Missing required"):
            load_config(path)
