"""Per-currency valuation and deposit/withdrawal summaries."""

from ledger.aggregation.aggregator import (
    CurrencyAggregator,
    round_value,
    sum_by_currency,
    value_of,
)
from ledger.aggregation.summary import aggregate_total, breakdown, summarize

__all__ = [
    "CurrencyAggregator",
    "aggregate_total",
    "breakdown",
    "round_value",
    "sum_by_currency",
    "summarize",
    "value_of",
]
