"""CoinGecko spot price lookup for ledger valuation.

Fetches reference-currency prices via the CoinGecko free API
``/simple/price`` endpoint in a single batched request per call. Uses
urllib.request (stdlib) in a worker thread so the event loop never
blocks on the network.

The service is third-party and treated as unreliable: timeouts, HTTP
errors and malformed payloads all degrade to "no rate" rather than an
exception. Results can optionally be cached in memory with a short TTL.
"""

import asyncio
import json
import time
import urllib.parse
import urllib.request
from collections.abc import Collection
from decimal import Decimal, InvalidOperation

from ledger.config import RateSettings
from ledger.logging import get_logger
from ledger.rates.provider import RateProvider

logger = get_logger(__name__)

# Static mapping from lowercase tickers to CoinGecko coin IDs.
# Supporting a new currency means adding a row here.
SYMBOL_TO_COINGECKO: dict[str, str] = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "ltc": "litecoin",
    "usdt": "tether",
    "sol": "solana",
    "doge": "dogecoin",
    "bch": "bitcoin-cash",
    "xrp": "ripple",
    "trx": "tron",
    "eos": "eos",
    "bnb": "binancecoin",
    "usdc": "usd-coin",
    "ape": "apecoin",
    "busd": "binance-usd",
    "dai": "dai",
    "cro": "crypto-com-chain",
    "sand": "the-sandbox",
    "link": "chainlink",
    "shib": "shiba-inu",
    "uni": "uniswap",
    "pol": "polkadot",
    "trump": "official-trump",
}


def _to_rate(value: object) -> Decimal | None:
    """Convert a JSON price to a positive Decimal, or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        rate = Decimal(str(value))
    except InvalidOperation:
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


class CoinGeckoRateProvider(RateProvider):
    """Batched CoinGecko price lookups with an optional TTL cache.

    Args:
        settings: Endpoint, reference currency, timeout and cache TTL.
    """

    def __init__(self, settings: RateSettings) -> None:
        self._base_url = settings.base_url.rstrip("/")
        self._vs_currency = settings.vs_currency.lower()
        self._timeout = settings.timeout_seconds
        self._ttl = settings.cache_ttl_seconds
        self._api_key = settings.api_key.get_secret_value()
        self._cache: dict[str, tuple[Decimal, float]] = {}
        self._fill_lock = asyncio.Lock()

    async def fetch_rates(self, symbols: Collection[str]) -> dict[str, Decimal]:
        """Resolve symbols through SYMBOL_TO_COINGECKO and fetch their prices.

        Symbols missing from the table are dropped before the request.
        At most one HTTP request is made, covering every resolvable
        identifier not already fresh in the cache. With the cache on,
        concurrent callers fill it one at a time, so ids fetched by one
        request are served from the cache to the next.
        """
        resolvable: dict[str, str] = {}
        unknown: list[str] = []
        for symbol in symbols:
            cg_id = SYMBOL_TO_COINGECKO.get(symbol.lower())
            if cg_id:
                resolvable[symbol.lower()] = cg_id
            else:
                unknown.append(symbol)

        if unknown:
            logger.debug("unresolvable_symbols", symbols=sorted(unknown))
        if not resolvable:
            return {}

        coin_ids = set(resolvable.values())
        prices = self._cached_prices(coin_ids)
        if prices.keys() < coin_ids:
            if self._ttl > 0:
                async with self._fill_lock:
                    # re-read: the previous holder may have fetched these ids
                    prices = self._cached_prices(coin_ids)
                    await self._fill_missing(coin_ids, prices)
            else:
                await self._fill_missing(coin_ids, prices)

        return {
            symbol: prices[cg_id]
            for symbol, cg_id in resolvable.items()
            if cg_id in prices
        }

    async def _fill_missing(self, coin_ids: set[str], prices: dict[str, Decimal]) -> None:
        missing = sorted(coin_ids - prices.keys())
        if not missing:
            return
        fetched = await self._fetch_with_timeout(missing)
        self._store(fetched)
        prices.update(fetched)

    async def _fetch_with_timeout(self, coin_ids: list[str]) -> dict[str, Decimal]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._fetch_prices, coin_ids),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "rate_fetch_timeout",
                timeout_seconds=self._timeout,
                ids=len(coin_ids),
            )
            return {}

    def _fetch_prices(self, coin_ids: list[str]) -> dict[str, Decimal]:
        """Fetch prices from CoinGecko using stdlib urllib."""
        query = urllib.parse.urlencode(
            {"ids": ",".join(coin_ids), "vs_currencies": self._vs_currency}
        )
        url = f"{self._base_url}/simple/price?{query}"

        headers = {"Accept": "application/json", "User-Agent": "StakeLedger/1.0"}
        if self._api_key:
            headers["x-cg-demo-api-key"] = self._api_key
        req = urllib.request.Request(url, headers=headers)

        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                data = json.loads(resp.read())
        except Exception as e:
            logger.warning("rate_fetch_failed", error=str(e), ids=len(coin_ids))
            return {}

        if not isinstance(data, dict):
            logger.warning("rate_fetch_unexpected_payload", payload_type=type(data).__name__)
            return {}

        prices: dict[str, Decimal] = {}
        for cg_id in coin_ids:
            entry = data.get(cg_id)
            if not isinstance(entry, dict):
                continue
            rate = _to_rate(entry.get(self._vs_currency))
            if rate is not None:
                prices[cg_id] = rate

        logger.debug("rates_fetched", requested=len(coin_ids), resolved=len(prices))
        return prices

    def _cached_prices(self, coin_ids: Collection[str]) -> dict[str, Decimal]:
        """Return fresh cache entries, evicting expired ones on read."""
        if self._ttl <= 0:
            return {}

        now = time.time()
        fresh: dict[str, Decimal] = {}
        for cg_id in coin_ids:
            entry = self._cache.get(cg_id)
            if entry is None:
                continue
            if now - entry[1] < self._ttl:
                fresh[cg_id] = entry[0]
            else:
                del self._cache[cg_id]
        return fresh

    def _store(self, prices: dict[str, Decimal]) -> None:
        if self._ttl <= 0:
            return
        now = time.time()
        for cg_id, rate in prices.items():
            self._cache[cg_id] = (rate, now)
