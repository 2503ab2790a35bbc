"""CSV row parser turning uploaded record sets into Transactions.

Rows with an empty currency or a non-numeric amount are skipped and
logged. Failing to read the source itself raises SourceUnavailable.
"""

import csv
from collections.abc import Iterator, Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TextIO

from ledger.exceptions import SourceUnavailable
from ledger.logging import get_logger
from ledger.models import Transaction

logger = get_logger(__name__)


def parse_row(row: Mapping[str, str | None]) -> Transaction | None:
    """Convert one CSV row to a Transaction, or None if it is malformed.

    Only the ``currency`` and ``amount`` columns are read. The currency is
    normalized to lowercase; the amount must parse as a finite Decimal.
    """
    currency = (row.get("currency") or "").strip().lower()
    if not currency:
        return None

    try:
        amount = Decimal((row.get("amount") or "").strip())
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None

    return Transaction(currency=currency, amount=amount)


def parse_records(location: Path) -> Iterator[Transaction]:
    """Open a record set and return a lazy iterator of its Transactions.

    The file is opened eagerly so an unreadable source fails this call
    rather than the first iteration. The iterator closes the file once
    exhausted and cannot be restarted.

    Raises:
        SourceUnavailable: If the file cannot be opened (or, during
            iteration, decoded as CSV).
    """
    try:
        handle = open(location, newline="", encoding="utf-8-sig")
    except OSError as e:
        raise SourceUnavailable(location, str(e)) from e
    return _iter_transactions(handle, location)


def _iter_transactions(handle: TextIO, location: Path) -> Iterator[Transaction]:
    skipped = 0
    with handle:
        try:
            for line_no, row in enumerate(csv.DictReader(handle), start=2):
                transaction = parse_row(row)
                if transaction is None:
                    skipped += 1
                    logger.debug("record_row_skipped", location=str(location), line=line_no)
                    continue
                yield transaction
        except (csv.Error, UnicodeDecodeError, OSError) as e:
            raise SourceUnavailable(location, str(e)) from e

    if skipped:
        logger.info("record_rows_skipped", location=str(location), skipped=skipped)
