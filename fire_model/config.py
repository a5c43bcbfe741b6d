"""
Projection Configuration

Immutable, validated inputs for one projection run: starting values, rate
assumptions, indexed constants and the account list. Configs are built once
(from keyword arguments, a mapping or a TOML file) and shared by reference
by every FiscalState of the run.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .accounts import AccountDefinition, AccountKind, DEFAULT_ACCOUNTS, validate_accounts
from .allocation import DEFAULT_CONTRIBUTION_RATE
from .errors import ConfigurationError
from .inflation import Constants, DEFAULT_RRSP_LIMIT, DEFAULT_TFSA_LIMIT
from .money import Precision
from .tax import TaxBracket, validate_bracket_table

logger = logging.getLogger(__name__)

DEFAULT_SALARY_CAP = 999_999.0
DEFAULT_WITHDRAW_RATE = 0.04

REQUIRED_KEYS = (
    "inflation",
    "salary_growth",
    "return_on_investment",
    "salary",
    "cost_of_living",
    "retirement_cost_of_living",
)

# Config-file key -> account name for starting balances
BALANCE_KEYS = {
    "rrsp_assets": "rrsp",
    "tfsa_assets": "tfsa",
    "unregistered_assets": "unregistered",
}

OPTIONAL_KEYS = {
    "employer_rrsp_match",
    "employer_match_rate",
    "salary_cap",
    "withdraw_rate",
    "dividend_fraction",
    "rrsp_contribution_headroom",
    "tfsa_limit",
    "rrsp_limit",
    "contribution_rate",
    "periods_per_year",
    "precision",
    "provincial_tax_brackets",
    "state_tax_brackets",
    "federal_tax_brackets",
    *BALANCE_KEYS,
}


@dataclass(frozen=True)
class Rates:
    """
    Rate assumptions, constant for the life of a run.

    Growth-type rates are factors (1.02 for 2% inflation); the match,
    withdrawal and dividend rates are fractions.
    """
    inflation: float
    salary_growth: float
    return_on_investment: float
    employer_match_rate: float = 0.0
    salary_cap: float = DEFAULT_SALARY_CAP
    withdraw_rate: float = DEFAULT_WITHDRAW_RATE
    dividend_fraction: float = 0.0

    def __post_init__(self):
        if self.inflation <= 0:
            raise ConfigurationError(f"inflation must be a positive factor, got {self.inflation}")
        if self.withdraw_rate <= 0:
            raise ConfigurationError(f"withdraw_rate must be positive, got {self.withdraw_rate}")
        if not 0.0 <= self.dividend_fraction <= 1.0:
            raise ConfigurationError(
                f"dividend_fraction must be within [0, 1], got {self.dividend_fraction}"
            )


@dataclass(frozen=True)
class ProjectionConfig:
    """
    Everything needed to build the period-0 state.

    Attributes:
        salary: Starting salary
        cost_of_living: Starting annual spending
        retirement_cost_of_living: Annual spending targeted in retirement
            (today's dollars)
        rates: Rate assumptions shared by every state
        constants: Nominal caps and brackets (period 0)
        starting_assets: Opening balance per account name (missing = 0)
        rrsp_contribution_headroom: Tax-deferred room available in period 0;
            0 means derive it from the starting salary
        contribution_rate: Share of income that becomes tax-deferred room
        periods_per_year: Compounding periods per year (1 = annual)
        precision: Monetary representation
        accounts: Accounts in waterfall order
    """
    salary: float
    cost_of_living: float
    retirement_cost_of_living: float
    rates: Rates
    constants: Constants = field(default_factory=Constants)
    starting_assets: Mapping[str, float] = field(default_factory=dict)
    rrsp_contribution_headroom: float = 0.0
    contribution_rate: float = DEFAULT_CONTRIBUTION_RATE
    periods_per_year: int = 1
    precision: Precision = Precision.FLOAT
    accounts: tuple[AccountDefinition, ...] = DEFAULT_ACCOUNTS

    def __post_init__(self):
        # frozen dataclass, normalize in place
        object.__setattr__(self, "accounts", validate_accounts(self.accounts))
        object.__setattr__(self, "precision", Precision.parse(self.precision))

        names = {a.name for a in self.accounts}
        unknown = set(self.starting_assets) - names
        if unknown:
            raise ConfigurationError(f"Starting balances for unknown accounts: {sorted(unknown)}")
        for name, balance in self.starting_assets.items():
            if balance < 0:
                raise ConfigurationError(f"Starting balance for {name} is negative: {balance}")
        object.__setattr__(
            self, "starting_assets",
            MappingProxyType({a.name: float(self.starting_assets.get(a.name, 0.0))
                              for a in self.accounts}),
        )

        if self.periods_per_year < 1:
            raise ConfigurationError(
                f"periods_per_year must be at least 1, got {self.periods_per_year}"
            )
        if self.contribution_rate < 0:
            raise ConfigurationError(
                f"contribution_rate must be non-negative, got {self.contribution_rate}"
            )
        if self.rrsp_contribution_headroom < 0:
            raise ConfigurationError("rrsp_contribution_headroom must be non-negative")

    @property
    def deferred_account(self) -> AccountDefinition:
        """The single tax-deferred account."""
        return next(a for a in self.accounts if a.kind is AccountKind.TAX_DEFERRED)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any],
                  accounts: Optional[tuple[AccountDefinition, ...]] = None) -> "ProjectionConfig":
        """
        Build a config from a flat mapping laid out like ``config.toml``.

        Unspecified numeric fields default to 0, ``salary_cap`` to 999,999 and
        ``withdraw_rate`` to 0.04. Unknown keys are ignored with a warning.

        Raises:
            ConfigurationError: If a required key is missing or a value is invalid
        """
        missing = [key for key in REQUIRED_KEYS if key not in data]
        if missing:
            raise ConfigurationError(f"Missing required config keys: {missing}")

        ignored = set(data) - set(REQUIRED_KEYS) - OPTIONAL_KEYS
        if ignored:
            logger.warning(f"Ignoring unknown config keys: {sorted(ignored)}")

        try:
            rates = Rates(
                inflation=float(data["inflation"]),
                salary_growth=float(data["salary_growth"]),
                return_on_investment=float(data["return_on_investment"]),
                employer_match_rate=float(
                    data.get("employer_rrsp_match", data.get("employer_match_rate", 0.0))
                ),
                salary_cap=float(data.get("salary_cap", DEFAULT_SALARY_CAP)),
                withdraw_rate=float(data.get("withdraw_rate", DEFAULT_WITHDRAW_RATE)),
                dividend_fraction=float(data.get("dividend_fraction", 0.0)),
            )

            provincial = validate_bracket_table(
                (TaxBracket.from_dict(b) for b in
                 data.get("provincial_tax_brackets", data.get("state_tax_brackets", []))),
                name="provincial",
            )
            federal = validate_bracket_table(
                (TaxBracket.from_dict(b) for b in data.get("federal_tax_brackets", [])),
                name="federal",
            )

            constants = Constants(
                tfsa_limit=float(data.get("tfsa_limit", DEFAULT_TFSA_LIMIT)),
                rrsp_limit=float(data.get("rrsp_limit", DEFAULT_RRSP_LIMIT)),
                tax_brackets=provincial + federal,
            )

            starting_assets = {name: float(data.get(key, 0.0))
                               for key, name in BALANCE_KEYS.items()}
            config_accounts = accounts if accounts is not None else DEFAULT_ACCOUNTS
            known = {a.name for a in config_accounts}
            starting_assets = {k: v for k, v in starting_assets.items() if k in known or v}

            return cls(
                salary=float(data["salary"]),
                cost_of_living=float(data["cost_of_living"]),
                retirement_cost_of_living=float(data["retirement_cost_of_living"]),
                rates=rates,
                constants=constants,
                starting_assets=starting_assets,
                rrsp_contribution_headroom=float(data.get("rrsp_contribution_headroom", 0.0)),
                contribution_rate=float(data.get("contribution_rate", DEFAULT_CONTRIBUTION_RATE)),
                periods_per_year=int(data.get("periods_per_year", 1)),
                precision=Precision.parse(data.get("precision", Precision.FLOAT)),
                accounts=config_accounts,
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid config value: {e}") from e


def load_config(path: Union[str, Path]) -> ProjectionConfig:
    """
    Read and validate a TOML configuration file.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ConfigurationError: If the TOML is invalid or fails validation
    """
    path = Path(path)
    with path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in config file {path}: {e}") from e

    config = ProjectionConfig.from_dict(data)
    logger.info(
        f"Loaded config from {path}: salary ${config.salary:,.0f}, "
        f"{len(config.constants.tax_brackets)} tax brackets"
    )
    return config
