"""Reference-currency exchange rates for currency tickers."""

from ledger.rates.coingecko import SYMBOL_TO_COINGECKO, CoinGeckoRateProvider
from ledger.rates.provider import RateProvider

__all__ = [
    "CoinGeckoRateProvider",
    "RateProvider",
    "SYMBOL_TO_COINGECKO",
]
