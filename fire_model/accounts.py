"""
Savings Account Definitions

Describes the savings vehicles the allocation engine fills, in priority
order. The engine itself is account-agnostic: each definition carries its
own contribution cap and growth-rate source.

Default accounts (Canadian naming):
- rrsp: tax-deferred, filled from pre-tax contribution headroom
- tfsa: tax-free, capped by the indexed annual TFSA limit
- unregistered: taxable, absorbs whatever surplus is left
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, TYPE_CHECKING

from .errors import ConfigurationError
from .inflation import Constants

if TYPE_CHECKING:
    from .config import Rates


class AccountKind(Enum):
    """Tax treatment of an account."""
    TAX_DEFERRED = "tax_deferred"
    TAX_FREE = "tax_free"
    TAXABLE = "taxable"


def _uncapped(constants: Constants) -> Optional[float]:
    return None


def _tfsa_cap(constants: Constants) -> Optional[float]:
    return constants.tfsa_limit


def _rrsp_cap(constants: Constants) -> Optional[float]:
    return constants.rrsp_limit


def full_return(rates: "Rates") -> float:
    """Growth factor when the whole return stays invested."""
    return rates.return_on_investment


def retained_return(rates: "Rates") -> float:
    """
    Growth factor net of the share of the return paid out as dividends.

    With ``dividend_fraction = 0.25`` a 1.08 return compounds at 1.06 and the
    remaining 2% is reported as dividend income.
    """
    return 1.0 + (rates.return_on_investment - 1.0) * (1.0 - rates.dividend_fraction)


@dataclass(frozen=True)
class AccountDefinition:
    """
    One savings vehicle in the contribution waterfall.

    Attributes:
        name: Key used for balances and contributions
        kind: Tax treatment
        priority: Lower values are filled first
        cap: Annual contribution cap for the period's constants (None = uncapped)
        growth_rate: Effective annual growth factor for the run's rates
    """
    name: str
    kind: AccountKind
    priority: int
    cap: Callable[[Constants], Optional[float]] = _uncapped
    growth_rate: Callable[["Rates"], float] = full_return


RRSP = AccountDefinition("rrsp", AccountKind.TAX_DEFERRED, 0, _rrsp_cap, full_return)
TFSA = AccountDefinition("tfsa", AccountKind.TAX_FREE, 1, _tfsa_cap, full_return)
UNREGISTERED = AccountDefinition("unregistered", AccountKind.TAXABLE, 2, _uncapped,
                                 retained_return)

DEFAULT_ACCOUNTS = (RRSP, TFSA, UNREGISTERED)


def validate_accounts(accounts: Iterable[AccountDefinition]) -> tuple[AccountDefinition, ...]:
    """
    Sort accounts by priority and check the list is usable.

    Raises:
        ConfigurationError: If the list is empty, names repeat, or there is
            not exactly one tax-deferred account
    """
    ordered = tuple(sorted(accounts, key=lambda a: a.priority))
    if not ordered:
        raise ConfigurationError("At least one account is required")

    names = [a.name for a in ordered]
    if len(set(names)) != len(names):
        raise ConfigurationError(f"Account names must be unique: {names}")

    deferred = [a for a in ordered if a.kind is AccountKind.TAX_DEFERRED]
    if len(deferred) != 1:
        raise ConfigurationError(
            f"Exactly one tax-deferred account is required, found {len(deferred)}"
        )

    return ordered
