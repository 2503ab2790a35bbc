"""Tests for CurrencyAggregator.

All test cases use exact Decimal values and a FakeRateProvider.
"""

from decimal import Decimal

import pytest

from conftest import FakeRateProvider
from ledger.aggregation.aggregator import (
    CurrencyAggregator,
    round_value,
    sum_by_currency,
    value_of,
)
from ledger.models import CurrencyValuation, Transaction


def _tx(currency: str, amount: str) -> Transaction:
    return Transaction(currency=currency, amount=Decimal(amount))


class TestSumByCurrency:
    """Tests for sum_by_currency."""

    def test_sums_absolute_amounts(self) -> None:
        totals = sum_by_currency([_tx("btc", "1.5"), _tx("btc", "-0.5"), _tx("eth", "-2")])
        assert totals == {"btc": Decimal("2.0"), "eth": Decimal("2")}

    def test_consumes_generator(self) -> None:
        totals = sum_by_currency(_tx("doge", str(i)) for i in range(1, 5))
        assert totals == {"doge": Decimal("10")}

    def test_empty(self) -> None:
        assert sum_by_currency([]) == {}

    def test_wide_sum_is_exact(self) -> None:
        totals = sum_by_currency([_tx("btc", "1e30"), _tx("btc", "0.000001")])
        assert totals == {"btc": Decimal("1000000000000000000000000000000.000001")}


class TestRoundValue:
    """Half-up rounding to cents."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("0.125", "0.13"),
            ("0.135", "0.14"),
            ("0.005", "0.01"),
            ("0.004", "0.00"),
            ("100000", "100000.00"),
        ],
    )
    def test_half_up(self, value: str, expected: str) -> None:
        assert str(round_value(Decimal(value))) == expected

    def test_wider_than_default_precision(self) -> None:
        value = Decimal("12345678901234567890123456789012.345")
        assert str(round_value(value)) == "12345678901234567890123456789012.35"

    def test_value_of_huge_product_is_exact(self) -> None:
        assert value_of(Decimal("1e30"), Decimal("50000")) == Decimal("5e34")
        assert str(value_of(Decimal("1.000000000000000000000000000001"), Decimal("3"))) == "3.00"


class TestAggregate:
    """Tests for aggregate / value_totals."""

    @pytest.mark.asyncio
    async def test_absolute_amounts_times_rate(self) -> None:
        """1.5 + |-0.5| = 2.0 BTC at 50,000 = 100,000.00."""
        provider = FakeRateProvider({"btc": Decimal("50000")})
        aggregator = CurrencyAggregator(provider)

        result = await aggregator.aggregate([_tx("btc", "1.5"), _tx("btc", "-0.5")])

        assert result == {
            "btc": CurrencyValuation(
                currency="btc",
                amount=Decimal("2.0"),
                rate=Decimal("50000"),
                value=Decimal("100000.00"),
            )
        }

    @pytest.mark.asyncio
    async def test_unresolved_currency_is_zero_not_omitted(self) -> None:
        aggregator = CurrencyAggregator(FakeRateProvider({"btc": Decimal("50000")}))

        result = await aggregator.aggregate([_tx("xyz", "10"), _tx("btc", "0.001")])

        assert result["xyz"].rate is None
        assert result["xyz"].value == Decimal("0.00")
        assert str(result["xyz"].value) == "0.00"
        assert result["btc"].value == Decimal("50.00")

    @pytest.mark.asyncio
    async def test_rate_service_down_values_everything_at_zero(self) -> None:
        aggregator = CurrencyAggregator(FakeRateProvider({}))

        result = await aggregator.aggregate([_tx("btc", "1"), _tx("eth", "1")])

        assert {c: v.value for c, v in result.items()} == {
            "btc": Decimal("0.00"),
            "eth": Decimal("0.00"),
        }

    @pytest.mark.asyncio
    async def test_empty_input_skips_rate_lookup(self) -> None:
        provider = FakeRateProvider({"btc": Decimal("1")})
        aggregator = CurrencyAggregator(provider)

        assert await aggregator.aggregate([]) == {}
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_one_batched_lookup_for_all_currencies(self) -> None:
        provider = FakeRateProvider({"btc": Decimal("1"), "eth": Decimal("1")})
        aggregator = CurrencyAggregator(provider)

        await aggregator.aggregate(
            [_tx("btc", "1"), _tx("eth", "1"), _tx("btc", "2"), _tx("sol", "3")]
        )

        assert provider.calls == [{"btc", "eth", "sol"}]

    @pytest.mark.asyncio
    async def test_currency_case_does_not_matter(self) -> None:
        provider = FakeRateProvider({"btc": Decimal("42000.123")})
        aggregator = CurrencyAggregator(provider)

        upper = await aggregator.aggregate([_tx("BTC", "0.3333")])
        lower = await aggregator.aggregate([_tx("btc", "0.3333")])

        assert upper == lower
        assert list(upper) == ["btc"]

    @pytest.mark.asyncio
    async def test_value_is_rounded_half_up(self) -> None:
        aggregator = CurrencyAggregator(FakeRateProvider({"usdt": Decimal("0.125")}))

        result = await aggregator.aggregate([_tx("usdt", "1")])

        assert result["usdt"].value == Decimal("0.13")

    @pytest.mark.asyncio
    async def test_total_matches_per_currency_products(self) -> None:
        rates = {"btc": Decimal("50123.45"), "eth": Decimal("2345.67")}
        aggregator = CurrencyAggregator(FakeRateProvider(rates))
        transactions = [
            _tx("btc", "0.0123"),
            _tx("eth", "-1.5"),
            _tx("btc", "0.0077"),
            _tx("xrp", "500"),
        ]

        result = await aggregator.aggregate(transactions)

        expected = {
            "btc": round_value(Decimal("0.0200") * rates["btc"]),
            "eth": round_value(Decimal("1.5") * rates["eth"]),
            "xrp": Decimal("0.00"),
        }
        assert {c: v.value for c, v in result.items()} == expected

    @pytest.mark.asyncio
    async def test_extreme_amount_does_not_abort_aggregate(self) -> None:
        aggregator = CurrencyAggregator(FakeRateProvider({"btc": Decimal("50000"), "eth": Decimal("2")}))

        result = await aggregator.aggregate([_tx("btc", "1e30"), _tx("eth", "1")])

        assert result["btc"].value == Decimal("50000000000000000000000000000000000.00")
        assert result["eth"].value == Decimal("2.00")
