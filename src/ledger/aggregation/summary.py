"""Deposit vs withdrawal summary and per-currency breakdown.

Pure functions over two AggregateResults. Profit is always
withdrawn - deposited; zero counts as profit.
"""

from decimal import MAX_PREC, Decimal, localcontext

from ledger.models import (
    AggregateResult,
    CurrencyBreakdown,
    ProfitStatus,
    SummaryResult,
)


def aggregate_total(result: AggregateResult) -> Decimal:
    """Sum the reference-currency values of an aggregate, exactly."""
    with localcontext(prec=MAX_PREC):
        return sum((v.value for v in result.values()), Decimal("0.00"))


def summarize(deposits: AggregateResult, withdrawals: AggregateResult) -> SummaryResult:
    """Combine deposit and withdrawal aggregates into totals and profit/loss.

    Args:
        deposits: Aggregate of the user's deposit record set.
        withdrawals: Aggregate of the user's withdrawal record set.

    Returns:
        SummaryResult with status PROFIT when profit_or_loss >= 0.
    """
    total_deposited = aggregate_total(deposits)
    total_withdrawn = aggregate_total(withdrawals)
    with localcontext(prec=MAX_PREC):
        profit_or_loss = total_withdrawn - total_deposited

    return SummaryResult(
        total_deposited=total_deposited,
        total_withdrawn=total_withdrawn,
        profit_or_loss=profit_or_loss,
        status=ProfitStatus.PROFIT if profit_or_loss >= 0 else ProfitStatus.LOSS,
    )


def breakdown(
    deposits: AggregateResult, withdrawals: AggregateResult
) -> list[CurrencyBreakdown]:
    """Per-currency deposited/withdrawn/profit, sorted by currency.

    Covers every currency present in either aggregate; a side without
    the currency counts as zero.
    """
    zero = Decimal("0.00")
    lines = []
    for currency in sorted(deposits.keys() | withdrawals.keys()):
        deposited = deposits[currency].value if currency in deposits else zero
        withdrawn = withdrawals[currency].value if currency in withdrawals else zero
        with localcontext(prec=MAX_PREC):
            profit_or_loss = withdrawn - deposited
        lines.append(
            CurrencyBreakdown(
                currency=currency,
                deposited=deposited,
                withdrawn=withdrawn,
                profit_or_loss=profit_or_loss,
            )
        )
    return lines
