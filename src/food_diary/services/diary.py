"""Diary service: local-first mutations with best-effort remote mirroring."""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date, datetime

from food_diary.config import extract_spreadsheet_id
from food_diary.domain.entries import (
    MEAL_TYPE_VALUES,
    FoodEntry,
    SyncConfig,
    new_entry_id,
)
from food_diary.domain.errors import (
    ConfigurationError,
    DiaryError,
    EntryNotFoundError,
    EntryValidationError,
)
from food_diary.domain.reference import MAX_SEVERITY, MIN_SEVERITY
from food_diary.services.local_cache import LocalCache
from food_diary.services.sync import (
    RemoteEntryRepository,
    SyncReconciler,
    SyncResult,
)

logger = logging.getLogger(__name__)

RemoteFactory = Callable[[str], RemoteEntryRepository]

_DATE_FORMAT = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_FORMAT = re.compile(r"[0-9]{2}:[0-9]{2}")


@dataclass(frozen=True)
class MutationOutcome:
    """Result of a local mutation and its remote mirror."""

    entry: FoodEntry | None
    synced: bool
    warning: str | None = None


@dataclass
class DiaryService:
    """Owns the entry collection.

    Every operation runs under one lock so that overlapping requests (an edit
    racing a delete, say) are applied one at a time. Mutations always land in
    the local cache first; the remote store only mirrors them, and a remote
    failure never undoes the local change.
    """

    cache: LocalCache
    remote_factory: RemoteFactory | None = None
    default_spreadsheet_id: str | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def load(self) -> SyncResult:
        """Return the active entries, reconciling with the remote store."""
        async with self._lock:
            local_entries = self.cache.load_entries()
            try:
                remote = self._remote()
            except ConfigurationError as exc:
                logger.warning("Remote sync is enabled but not configured: %s", exc)
                return SyncResult(entries=local_entries, source="local", error=str(exc))
            if remote is None:
                return SyncResult(entries=local_entries, source="local")
            result = await SyncReconciler(remote).reconcile(local_entries)
            if result.source == "remote":
                self.cache.save_entries(result.entries)
            return result

    def list_entries(self) -> list[FoodEntry]:
        """Return the cached entries without contacting the remote store."""
        return self.cache.load_entries()

    async def add(self, entry: FoodEntry) -> MutationOutcome:
        """Validate and store a new entry, then append it remotely."""
        _validate(entry)
        async with self._lock:
            entries = self.cache.load_entries()
            existing_ids = {item.id for item in entries}
            if not entry.id:
                entry = entry.with_id(new_entry_id(existing_ids))
            elif entry.id in existing_ids:
                raise EntryValidationError(f"Entry id already exists: {entry.id}")
            self.cache.save_entries([entry, *entries])
            synced, warning = await self._mirror(
                "append", lambda remote: remote.append(entry)
            )
            return MutationOutcome(entry=entry, synced=synced, warning=warning)

    async def edit(self, entry: FoodEntry) -> MutationOutcome:
        """Replace the entry with the same id, then update it remotely."""
        async with self._lock:
            entries = self.cache.load_entries()
            if not any(item.id == entry.id for item in entries):
                raise EntryNotFoundError(entry.id)
            self.cache.save_entries(
                [entry if item.id == entry.id else item for item in entries]
            )
            synced, warning = await self._mirror(
                "update", lambda remote: remote.update(entry)
            )
            return MutationOutcome(entry=entry, synced=synced, warning=warning)

    async def delete(self, entry_id: str) -> MutationOutcome:
        """Remove an entry locally, then delete its remote row."""
        async with self._lock:
            entries = self.cache.load_entries()
            remaining = [item for item in entries if item.id != entry_id]
            if len(remaining) == len(entries):
                raise EntryNotFoundError(entry_id)
            self.cache.save_entries(remaining)
            synced, warning = await self._mirror(
                "delete", lambda remote: _delete_remote(remote, entry_id)
            )
            return MutationOutcome(entry=None, synced=synced, warning=warning)

    def get_sync_config(self) -> SyncConfig:
        """Return the persisted sync settings."""
        return self.cache.get_sync_config()

    def update_sync_config(self, enabled: bool, spreadsheet_id: str) -> SyncConfig:
        """Persist sync settings, accepting a full spreadsheet URL."""
        config = SyncConfig(
            enabled=enabled, spreadsheet_id=extract_spreadsheet_id(spreadsheet_id)
        )
        self.cache.set_sync_config(config)
        return config

    async def test_connection(self) -> dict[str, object]:
        """Read the remote store metadata, raising on any failure."""
        remote = self._build_remote(self.cache.get_sync_config())
        return await remote.describe()

    def _remote(self) -> RemoteEntryRepository | None:
        config = self.cache.get_sync_config()
        if not config.enabled:
            return None
        return self._build_remote(config)

    def _build_remote(self, config: SyncConfig) -> RemoteEntryRepository:
        spreadsheet_id = config.spreadsheet_id or self.default_spreadsheet_id
        if not spreadsheet_id:
            raise ConfigurationError("Google Spreadsheet ID is not configured")
        if self.remote_factory is None:
            raise ConfigurationError(
                "Google service account credentials are not configured"
            )
        return self.remote_factory(spreadsheet_id)

    async def _mirror(
        self,
        action: str,
        operation: Callable[[RemoteEntryRepository], Awaitable[None]],
    ) -> tuple[bool, str | None]:
        try:
            remote = self._remote()
            if remote is None:
                return False, None
            await operation(remote)
        except DiaryError as exc:
            logger.warning("Failed to %s remote entry: %s", action, exc)
            return False, str(exc)
        return True, None


async def _delete_remote(remote: RemoteEntryRepository, entry_id: str) -> None:
    try:
        await remote.delete(entry_id)
    except EntryNotFoundError:
        logger.info("Entry %s was already absent from the remote store", entry_id)


def _validate(entry: FoodEntry) -> None:
    if not entry.foods.strip():
        raise EntryValidationError("Foods are required")
    if entry.meal_type not in MEAL_TYPE_VALUES:
        raise EntryValidationError(f"Unknown meal type: {entry.meal_type}")
    if not _DATE_FORMAT.fullmatch(entry.date):
        raise EntryValidationError(f"Date must be YYYY-MM-DD: {entry.date}")
    if not _TIME_FORMAT.fullmatch(entry.time):
        raise EntryValidationError(f"Time must be HH:MM: {entry.time}")
    try:
        date.fromisoformat(entry.date)
        datetime.strptime(entry.time, "%H:%M")  # noqa: DTZ007
    except ValueError as exc:
        raise EntryValidationError(f"Invalid date or time: {exc}") from exc
    for complaint_id, severity in entry.complaint_severities.items():
        if not MIN_SEVERITY <= severity <= MAX_SEVERITY:
            raise EntryValidationError(
                f"Severity for {complaint_id} must be between "
                f"{MIN_SEVERITY} and {MAX_SEVERITY}"
            )
