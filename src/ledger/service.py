"""Core request API: aggregate, summarize, break down and clear a user's ledger.

Wires RecordStore -> parser -> CurrencyAggregator -> summary. Nothing is
persisted; every request recomputes from the uploaded record sets with
live rates.
"""

import asyncio
from decimal import Decimal
from pathlib import Path

from ledger.aggregation.aggregator import CurrencyAggregator, sum_by_currency
from ledger.aggregation.summary import breakdown, summarize
from ledger.logging import get_logger, request_context
from ledger.models import AggregateResult, CurrencyBreakdown, SummaryResult, TransactionKind
from ledger.records.parser import parse_records
from ledger.records.store import RecordStore

logger = get_logger(__name__)


def _read_totals(location: Path) -> dict[str, Decimal]:
    return sum_by_currency(parse_records(location))


class LedgerService:
    """Entry point for the presentation layer.

    Args:
        store: Shared record set index, constructed once per process.
        aggregator: Values per-currency totals with live rates.
    """

    def __init__(self, store: RecordStore, aggregator: CurrencyAggregator) -> None:
        self._store = store
        self._aggregator = aggregator

    async def compute_aggregate(self, user_id: str, kind: TransactionKind) -> AggregateResult:
        """Aggregate one of a user's record sets.

        The file read and summation run in a worker thread so a slow
        parse never stalls other requests.

        Raises:
            NoRecordsError: If no record set is registered.
            SourceUnavailable: If the record set cannot be read.
        """
        with request_context(user_id=user_id, kind=kind.value):
            location = await self._store.locate(user_id, kind)
            totals = await asyncio.to_thread(_read_totals, location)
            result = await self._aggregator.value_totals(totals)

            logger.info("aggregate_computed", currencies=len(result))
            return result

    async def compute_summary(self, user_id: str) -> SummaryResult:
        """Deposit vs withdrawal totals and profit/loss for a user.

        Raises:
            NoRecordsError: For the first missing kind, deposits checked first.
            SourceUnavailable: If a record set cannot be read.
        """
        deposits, withdrawals = await self._both_aggregates(user_id)
        summary = summarize(deposits, withdrawals)

        logger.info(
            "summary_computed",
            user_id=user_id,
            total_deposited=str(summary.total_deposited),
            total_withdrawn=str(summary.total_withdrawn),
            status=summary.status.value,
        )
        return summary

    async def compute_breakdown(self, user_id: str) -> list[CurrencyBreakdown]:
        """Per-currency deposited/withdrawn/profit for a user.

        Raises:
            NoRecordsError: For the first missing kind, deposits checked first.
            SourceUnavailable: If a record set cannot be read.
        """
        deposits, withdrawals = await self._both_aggregates(user_id)
        return breakdown(deposits, withdrawals)

    async def upload(self, user_id: str, kind: TransactionKind, data: bytes) -> Path:
        """Store a new record set for a user, replacing any previous one."""
        return await self._store.save(user_id, kind, data)

    async def clear(self, user_id: str) -> int:
        """Remove both record sets of a user. Returns how many were removed."""
        return await self._store.clear(user_id)

    async def _both_aggregates(self, user_id: str) -> tuple[AggregateResult, AggregateResult]:
        deposits = await self.compute_aggregate(user_id, TransactionKind.DEPOSIT)
        withdrawals = await self.compute_aggregate(user_id, TransactionKind.WITHDRAWAL)
        return deposits, withdrawals
