"""Domain models for diary entries."""

import time
from collections.abc import Collection
from dataclasses import dataclass, field, replace

MEAL_TYPE_VALUES = ("breakfast", "lunch", "dinner", "snack", "other")


@dataclass(frozen=True)
class FoodEntry:
    """One logged meal with an optional complaint record."""

    id: str
    date: str
    time: str
    meal_type: str
    foods: str
    meal_notes: str = ""
    has_complaints: bool = False
    complaint_types: list[str] = field(default_factory=list)
    complaint_severities: dict[str, int] = field(default_factory=dict)
    complaint_notes: str = ""
    time_after_meal: str = ""

    def with_id(self, entry_id: str) -> "FoodEntry":
        """Return a copy of the entry carrying a different id."""
        return replace(self, id=entry_id)


@dataclass(frozen=True)
class SyncConfig:
    """Remote sync settings persisted next to the entries."""

    enabled: bool = False
    spreadsheet_id: str = ""


def new_entry_id(existing: Collection[str] = ()) -> str:
    """Return a creation-time id that does not collide with existing ids."""
    candidate = int(time.time() * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)
