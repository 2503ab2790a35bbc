"""Shared test fixtures for the ledger."""

from collections.abc import Callable, Collection
from decimal import Decimal
from pathlib import Path

import pytest

from ledger.aggregation.aggregator import CurrencyAggregator
from ledger.config import RateSettings
from ledger.rates.provider import RateProvider
from ledger.records.store import RecordStore
from ledger.service import LedgerService


class FakeRateProvider(RateProvider):
    """In-memory RateProvider that records every lookup."""

    def __init__(self, rates: dict[str, Decimal] | None = None) -> None:
        self.rates = rates or {}
        self.calls: list[set[str]] = []

    async def fetch_rates(self, symbols: Collection[str]) -> dict[str, Decimal]:
        self.calls.append(set(symbols))
        return {s: self.rates[s] for s in symbols if s in self.rates}


@pytest.fixture
def rate_settings() -> RateSettings:
    """CoinGecko settings with a short timeout and no cache."""
    return RateSettings(
        base_url="https://api.coingecko.test/api/v3",
        vs_currency="eur",
        timeout_seconds=1.0,
        cache_ttl_seconds=0.0,
    )


@pytest.fixture
def rate_provider() -> FakeRateProvider:
    """Fake provider knowing BTC and ETH in EUR."""
    return FakeRateProvider({"btc": Decimal("50000"), "eth": Decimal("2500")})


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    """RecordStore over an empty temporary directory."""
    return RecordStore(tmp_path / "user_files")


@pytest.fixture
def service(store: RecordStore, rate_provider: FakeRateProvider) -> LedgerService:
    """LedgerService wired to the temporary store and fake rates."""
    return LedgerService(store, CurrencyAggregator(rate_provider))


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing CSV text to a file under tmp_path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
