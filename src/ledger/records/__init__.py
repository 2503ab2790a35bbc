"""Uploaded record sets: the per-user index and the CSV row parser."""

from ledger.records.parser import parse_records, parse_row
from ledger.records.store import RecordStore

__all__ = [
    "RecordStore",
    "parse_records",
    "parse_row",
]
