"""Abstract rate provider interface.

Aggregation depends ONLY on this interface. The concrete provider
(CoinGecko in production, a fake in tests) is injected at startup.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection
from decimal import Decimal


class RateProvider(ABC):
    """Maps currency symbols to a reference-currency rate."""

    @abstractmethod
    async def fetch_rates(self, symbols: Collection[str]) -> dict[str, Decimal]:
        """Return the reference-currency rate for each resolvable symbol.

        Implementations must never raise for unknown symbols or service
        failures. Unresolved symbols are simply absent from the result,
        and a total failure yields an empty dict.

        Args:
            symbols: Lowercase currency tickers (e.g. {"btc", "eth"}).

        Returns:
            Dict mapping symbol -> positive Decimal rate.
        """
        ...
