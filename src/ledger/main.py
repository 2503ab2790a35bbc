"""Entry point for the ledger service.

Wires all components together and serves the HTTP API with uvicorn on a
single asyncio event loop. The record store is scanned from disk in the
FastAPI lifespan, before the first request is accepted.

Component wiring order (in build_service):
1. RecordStore (shared record set index)
2. CoinGeckoRateProvider (external prices)
3. CurrencyAggregator (valuation)
4. LedgerService (request API)
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ledger.aggregation.aggregator import CurrencyAggregator
from ledger.api.app import create_app
from ledger.config import AppSettings
from ledger.logging import get_logger, setup_logging
from ledger.rates.coingecko import CoinGeckoRateProvider
from ledger.records.store import RecordStore
from ledger.service import LedgerService


def build_service(settings: AppSettings) -> tuple[RecordStore, LedgerService]:
    """Build the component graph from settings.

    Does NOT scan the storage directory -- that happens in the lifespan.
    """
    store = RecordStore(settings.storage.user_files_dir)
    rate_provider = CoinGeckoRateProvider(settings.rates)
    aggregator = CurrencyAggregator(rate_provider)
    return store, LedgerService(store, aggregator)


def make_lifespan(store: RecordStore):
    """Return a lifespan that loads the record store on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = get_logger("ledger.main")
        count = await store.load()
        logger.info("lifespan_started", record_sets=count)
        yield
        logger.info("ledger_stopped")

    return lifespan


async def run() -> None:
    """Run the ledger HTTP service until interrupted."""
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("ledger.main")

    store, service = build_service(settings)
    app = create_app(
        service,
        lifespan=make_lifespan(store),
        max_upload_bytes=settings.api.max_upload_bytes,
    )

    logger.info(
        "starting_ledger_api",
        host=settings.api.host,
        port=settings.api.port,
        storage=settings.storage.user_files_dir,
        vs_currency=settings.rates.vs_currency,
    )

    config = uvicorn.Config(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_config=None,  # keep the structlog handlers from setup_logging
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
