"""Supabase key-value store backing the local cache."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from food_diary.services.local_cache import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Supabase table with one row per key."""

    client: Client
    table_name: str = "diary_kv"

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        response = (
            self.client.table(self.table_name)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        """Upsert the value for a key."""
        self.client.table(self.table_name).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
