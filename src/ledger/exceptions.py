"""Custom exceptions for the ledger.

Only conditions the caller must act on are raised. Malformed rows,
unknown currencies and rate-service outages degrade to safe defaults
inside the parser and rate provider and never surface here.
"""

from pathlib import Path


class LedgerError(Exception):
    """Base exception for all ledger errors."""


class NoRecordsError(LedgerError):
    """Raised when no record set is registered for a user and kind.

    Expected and user-actionable: the user has not uploaded yet, or
    cleared their files.
    """

    def __init__(self, user_id: str, kind: str) -> None:
        self.user_id = user_id
        self.kind = kind
        super().__init__(f"No {kind} file found for this user.")


class SourceUnavailable(LedgerError):
    """Raised when a registered record set cannot be read."""

    def __init__(self, location: Path | str, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"Record source {location} unavailable: {reason}")
