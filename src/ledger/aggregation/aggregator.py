"""Currency aggregation: sum amounts per currency and value them.

Every transaction contributes its absolute amount; the sign of a row
carries no meaning. Totals are valued with one batched rate lookup and
rounded half-up to 2 decimal places.

CRITICAL: All computations use Decimal. Never use float.
"""

from collections import defaultdict
from collections.abc import Iterable
from decimal import MAX_PREC, ROUND_HALF_UP, Decimal, localcontext

from ledger.logging import get_logger
from ledger.models import AggregateResult, CurrencyValuation, Transaction
from ledger.rates.provider import RateProvider

logger = get_logger(__name__)

_TWO_PLACES = Decimal("0.01")


def round_value(value: Decimal) -> Decimal:
    """Round a reference-currency value to 2 decimal places, half-up.

    Runs without a precision cap so values wider than the default 28
    digits still quantize.
    """
    with localcontext(prec=MAX_PREC):
        return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def value_of(amount: Decimal, rate: Decimal) -> Decimal:
    """Exact amount * rate, rounded to cents."""
    with localcontext(prec=MAX_PREC):
        return round_value(amount * rate)


def sum_by_currency(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Sum abs(amount) per lowercase currency.

    Consumes the iterable once, so it accepts the lazy output of
    parse_records directly.
    """
    totals: dict[str, Decimal] = defaultdict(Decimal)
    with localcontext(prec=MAX_PREC):
        for tx in transactions:
            totals[tx.currency.lower()] += abs(tx.amount)
    return dict(totals)


class CurrencyAggregator:
    """Turns transactions into an AggregateResult.

    Args:
        rate_provider: Source of reference-currency rates. Called at most
            once per aggregation.
    """

    def __init__(self, rate_provider: RateProvider) -> None:
        self._rate_provider = rate_provider

    async def aggregate(self, transactions: Iterable[Transaction]) -> AggregateResult:
        """Sum and value a sequence of transactions."""
        return await self.value_totals(sum_by_currency(transactions))

    async def value_totals(self, totals: dict[str, Decimal]) -> AggregateResult:
        """Value per-currency totals in the reference currency.

        A currency without a resolved rate is valued at zero and kept in
        the result. No totals means an empty result and no rate lookup.
        """
        if not totals:
            return {}

        rates = await self._rate_provider.fetch_rates(set(totals))

        result: AggregateResult = {}
        for currency, amount in totals.items():
            rate = rates.get(currency)
            value = value_of(amount, rate) if rate is not None else Decimal("0.00")
            result[currency] = CurrencyValuation(
                currency=currency,
                amount=amount,
                rate=rate,
                value=value,
            )

        unresolved = sorted(c for c, v in result.items() if v.rate is None)
        logger.debug(
            "currencies_aggregated",
            currencies=len(result),
            unresolved=unresolved,
        )
        return result
