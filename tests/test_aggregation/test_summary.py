"""Tests for summarize, breakdown and aggregate_total."""

from decimal import Decimal

from ledger.aggregation.summary import aggregate_total, breakdown, summarize
from ledger.models import (
    AggregateResult,
    CurrencyBreakdown,
    CurrencyValuation,
    ProfitStatus,
)


def _aggregate(**values: str) -> AggregateResult:
    """Build an AggregateResult from currency=value keyword args."""
    return {
        currency: CurrencyValuation(
            currency=currency,
            amount=Decimal("1"),
            rate=Decimal(value) if Decimal(value) else None,
            value=Decimal(value),
        )
        for currency, value in values.items()
    }


class TestAggregateTotal:
    """Tests for aggregate_total."""

    def test_sums_values(self) -> None:
        assert aggregate_total(_aggregate(btc="600.10", eth="399.90")) == Decimal("1000.00")

    def test_empty_is_zero(self) -> None:
        assert aggregate_total({}) == Decimal("0")


class TestSummarize:
    """Tests for summarize."""

    def test_profit(self) -> None:
        summary = summarize(
            _aggregate(btc="600.00", eth="400.00"),
            _aggregate(btc="1200.00"),
        )

        assert summary.total_deposited == Decimal("1000.00")
        assert summary.total_withdrawn == Decimal("1200.00")
        assert summary.profit_or_loss == Decimal("200.00")
        assert summary.status == ProfitStatus.PROFIT

    def test_loss_is_signed(self) -> None:
        summary = summarize(_aggregate(btc="500.00"), _aggregate(btc="125.25"))

        assert summary.profit_or_loss == Decimal("-374.75")
        assert summary.status == ProfitStatus.LOSS

    def test_break_even_counts_as_profit(self) -> None:
        summary = summarize(_aggregate(btc="10.00"), _aggregate(eth="10.00"))

        assert summary.profit_or_loss == Decimal("0")
        assert summary.status == ProfitStatus.PROFIT

    def test_both_empty(self) -> None:
        summary = summarize({}, {})

        assert summary.total_deposited == Decimal("0")
        assert summary.total_withdrawn == Decimal("0")
        assert summary.status == ProfitStatus.PROFIT


class TestBreakdown:
    """Tests for the per-currency breakdown."""

    def test_union_of_currencies_sorted(self) -> None:
        lines = breakdown(
            _aggregate(eth="100.00", btc="50.00"),
            _aggregate(btc="80.00", sol="5.00"),
        )

        assert lines == [
            CurrencyBreakdown("btc", Decimal("50.00"), Decimal("80.00"), Decimal("30.00")),
            CurrencyBreakdown("eth", Decimal("100.00"), Decimal("0.00"), Decimal("-100.00")),
            CurrencyBreakdown("sol", Decimal("0.00"), Decimal("5.00"), Decimal("5.00")),
        ]

    def test_unresolved_currency_appears_with_zero(self) -> None:
        lines = breakdown(_aggregate(xyz="0.00"), {})

        assert lines == [
            CurrencyBreakdown("xyz", Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))
        ]

    def test_empty(self) -> None:
        assert breakdown({}, {}) == []


class TestWideValues:
    """Totals wider than the default 28-digit precision stay exact."""

    def test_summary_keeps_cents(self) -> None:
        summary = summarize(
            _aggregate(btc="50000000000000000000000000000000000.00"),
            _aggregate(btc="50000000000000000000000000000000000.01"),
        )

        assert summary.profit_or_loss == Decimal("0.01")
        assert summary.status == ProfitStatus.PROFIT

    def test_breakdown_keeps_cents(self) -> None:
        lines = breakdown(
            _aggregate(btc="99999999999999999999999999999999.99"),
            _aggregate(btc="0.01"),
        )

        assert lines[0].profit_or_loss == Decimal("-99999999999999999999999999999999.98")
