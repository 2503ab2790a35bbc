"""Index of uploaded record sets keyed by (user_id, kind).

One CSV file per user and kind lives in the storage directory, named
``<kind>_<user_id>.csv``. The index is rebuilt from that directory at
startup and updated on every upload or clear.

The index is the only state shared between concurrent requests. An
asyncio.Lock guards it, and is held only for the lookup or mutation
itself, never across a parse.
"""

import asyncio
import re
from pathlib import Path

from ledger.exceptions import NoRecordsError
from ledger.logging import get_logger
from ledger.models import TransactionKind

logger = get_logger(__name__)

FILENAME_PATTERN = re.compile(r"^(deposit|withdrawal)_([A-Za-z0-9]+)\.csv$")
USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


def record_filename(user_id: str, kind: TransactionKind) -> str:
    """Return the on-disk filename for a user's record set."""
    return f"{kind.value}_{user_id}.csv"


class RecordStore:
    """Concurrency-safe index of record set locations.

    Args:
        directory: Storage directory scanned by load() and written by save().
    """

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)
        self._index: dict[tuple[str, TransactionKind], Path] = {}
        self._lock = asyncio.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    async def load(self) -> int:
        """Populate the index from the storage directory.

        Creates the directory when missing. Files not matching the
        ``<kind>_<user_id>.csv`` pattern are logged and ignored.

        Returns:
            Number of record sets registered.
        """
        if not self._directory.exists():
            logger.info("storage_dir_created", directory=str(self._directory))
            self._directory.mkdir(parents=True, exist_ok=True)
            return 0

        loaded = 0
        for path in sorted(self._directory.iterdir()):
            match = FILENAME_PATTERN.match(path.name)
            if match is None or not path.is_file():
                logger.warning("record_file_ignored", filename=path.name)
                continue

            kind, user_id = TransactionKind(match.group(1)), match.group(2)
            await self.register(user_id, kind, path)
            loaded += 1

        logger.info("record_sets_loaded", count=loaded, directory=str(self._directory))
        return loaded

    async def register(self, user_id: str, kind: TransactionKind, location: Path) -> None:
        """Map (user_id, kind) to a record set. Re-registering overwrites."""
        async with self._lock:
            self._index[(user_id, kind)] = location
        logger.debug(
            "record_set_registered",
            user_id=user_id,
            kind=kind.value,
            location=str(location),
        )

    async def locate(self, user_id: str, kind: TransactionKind) -> Path:
        """Return the location of a user's record set.

        Raises:
            NoRecordsError: If nothing was registered for (user_id, kind).
        """
        async with self._lock:
            location = self._index.get((user_id, kind))
        if location is None:
            raise NoRecordsError(user_id, kind.value)
        return location

    async def save(self, user_id: str, kind: TransactionKind, data: bytes) -> Path:
        """Persist uploaded bytes as the user's record set and register it.

        Raises:
            ValueError: If user_id is not alphanumeric.
        """
        if not USER_ID_PATTERN.match(user_id):
            raise ValueError(f"Invalid user id: {user_id!r}")

        path = self._directory / record_filename(user_id, kind)
        await asyncio.to_thread(self._write, path, data)
        await self.register(user_id, kind, path)

        logger.info("record_set_uploaded", user_id=user_id, kind=kind.value, size=len(data))
        return path

    async def clear(self, user_id: str) -> int:
        """Deregister and delete both record sets of a user.

        Returns:
            Number of record sets removed from the index.
        """
        async with self._lock:
            removed = [
                self._index.pop((user_id, kind))
                for kind in TransactionKind
                if (user_id, kind) in self._index
            ]

        for path in removed:
            await asyncio.to_thread(path.unlink, missing_ok=True)

        logger.info("record_sets_cleared", user_id=user_id, removed=len(removed))
        return len(removed)

    def _write(self, path: Path, data: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
