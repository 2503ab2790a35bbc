"""Shared data models for the ledger.

CRITICAL: All amounts, rates and valuations use Decimal. Never use float.
Every model is a value owned by a single request and never mutated.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class TransactionKind(str, Enum):
    """Classification of an uploaded record set."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class ProfitStatus(str, Enum):
    """Sign of a profit/loss figure."""

    PROFIT = "Profit"
    LOSS = "Loss"


@dataclass(frozen=True)
class Transaction:
    """A single validated deposit or withdrawal row."""

    currency: str  # lowercase ticker
    amount: Decimal  # finite, sign as recorded


@dataclass(frozen=True)
class CurrencyValuation:
    """Reference-currency value of one currency's summed amounts."""

    currency: str
    amount: Decimal  # sum of absolute amounts
    rate: Decimal | None  # None when the symbol could not be resolved
    value: Decimal  # amount * rate, 2dp; zero when rate is None


#: Currency symbol -> valuation, for one user and one kind.
AggregateResult = dict[str, CurrencyValuation]


@dataclass(frozen=True)
class SummaryResult:
    """Deposit vs withdrawal totals in the reference currency."""

    total_deposited: Decimal
    total_withdrawn: Decimal
    profit_or_loss: Decimal  # withdrawn - deposited
    status: ProfitStatus


@dataclass(frozen=True)
class CurrencyBreakdown:
    """Per-currency line of the detailed breakdown."""

    currency: str
    deposited: Decimal
    withdrawn: Decimal
    profit_or_loss: Decimal
