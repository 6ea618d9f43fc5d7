"""Persisted local mirror of the diary and its sync settings."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from food_diary.codec import entry_from_json, entry_to_json
from food_diary.domain.entries import FoodEntry, SyncConfig

logger = logging.getLogger(__name__)

ENTRIES_KEY = "foodDiaryEntries"
SYNC_ENABLED_KEY = "googleSheetsEnabled"
SPREADSHEET_ID_KEY = "googleSheetsSpreadsheetId"


class KeyValueStore(Protocol):
    """Persistence interface for string values under fixed keys."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""


@dataclass
class LocalCache:
    """Entry collection stored as one JSON blob, rewritten on every change."""

    store: KeyValueStore

    def load_entries(self) -> list[FoodEntry]:
        """Return the cached entries, or an empty list when none are stored."""
        raw = self.store.get(ENTRIES_KEY)
        if not raw:
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Cached entries are not valid JSON, starting empty")
            return []
        if not isinstance(payload, list):
            logger.warning("Cached entries are not a list, starting empty")
            return []
        seen_ids = {
            str(item["id"])
            for item in payload
            if isinstance(item, dict) and item.get("id")
        }
        entries: list[FoodEntry] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            entry = entry_from_json(item, seen_ids)
            seen_ids.add(entry.id)
            entries.append(entry)
        return entries

    def save_entries(self, entries: list[FoodEntry]) -> None:
        """Replace the cached collection."""
        payload = [entry_to_json(entry) for entry in entries]
        self.store.set(ENTRIES_KEY, json.dumps(payload, ensure_ascii=False))

    def get_sync_config(self) -> SyncConfig:
        """Return the persisted sync settings."""
        return SyncConfig(
            enabled=self.store.get(SYNC_ENABLED_KEY) == "true",
            spreadsheet_id=self.store.get(SPREADSHEET_ID_KEY) or "",
        )

    def set_sync_config(self, config: SyncConfig) -> None:
        """Persist sync settings."""
        self.store.set(SPREADSHEET_ID_KEY, config.spreadsheet_id)
        self.store.set(SYNC_ENABLED_KEY, "true" if config.enabled else "false")
