"""Reconciliation between the local cache and the remote store."""

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

from food_diary.domain.entries import FoodEntry
from food_diary.domain.errors import DiaryError

logger = logging.getLogger(__name__)

SyncSource = Literal["remote", "seeded", "empty", "local"]


class RemoteEntryRepository(Protocol):
    """Row-oriented remote mirror of the diary."""

    async def ensure_headers(self) -> None:
        """Write the header row if the store is blank."""

    async def append(self, entry: FoodEntry) -> None:
        """Append an entry as a new row."""

    async def update_row(self, row_index: int, entry: FoodEntry) -> None:
        """Overwrite the row at a 1-based index."""

    async def update(self, entry: FoodEntry) -> None:
        """Overwrite the row holding the entry's id."""

    async def delete(self, entry_id: str) -> None:
        """Remove the row holding the given id."""

    async def list_all(self) -> list[FoodEntry]:
        """Return all stored entries in row order."""

    async def describe(self) -> dict[str, object]:
        """Return metadata identifying the remote store."""


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a reconciliation."""

    entries: list[FoodEntry]
    source: SyncSource
    pushed: int = 0
    error: str | None = None


@dataclass
class SyncReconciler:
    """Decide which side becomes the active entry set.

    A non-empty remote store always wins. An empty remote store is seeded from
    the local entries, one append per entry in order. When the remote store
    cannot be read or seeded, the local entries stay active.
    """

    remote: RemoteEntryRepository

    async def reconcile(self, local_entries: list[FoodEntry]) -> SyncResult:
        """Run one reconciliation pass."""
        try:
            remote_entries = await self.remote.list_all()
        except DiaryError as exc:
            logger.warning("Failed to fetch remote entries, using local data: %s", exc)
            return SyncResult(entries=list(local_entries), source="local", error=str(exc))

        if remote_entries:
            logger.info("Loaded %s entries from the remote store", len(remote_entries))
            return SyncResult(entries=remote_entries, source="remote")

        if not local_entries:
            return SyncResult(entries=[], source="empty")

        logger.info("Seeding remote store with %s local entries", len(local_entries))
        pushed = 0
        try:
            for entry in local_entries:
                await self.remote.append(entry)
                pushed += 1
        except DiaryError as exc:
            logger.warning(
                "Seeding stopped after %s of %s entries: %s",
                pushed,
                len(local_entries),
                exc,
            )
            return SyncResult(
                entries=list(local_entries), source="local", pushed=pushed, error=str(exc)
            )
        return SyncResult(entries=list(local_entries), source="seeded", pushed=pushed)
