"""Mapping between diary entries and spreadsheet rows or JSON objects."""

import logging
from collections.abc import Collection, Mapping, Sequence
from datetime import UTC, datetime

from food_diary.domain.entries import FoodEntry, new_entry_id
from food_diary.domain.reference import (
    MEAL_TYPES,
    complaint_id_for_name,
    complaint_name,
    meal_type_label,
    parse_meal_type_label,
)

logger = logging.getLogger(__name__)

SHEET_HEADERS: tuple[str, ...] = (
    "ID",
    "Dátum",
    "Időpont",
    "Étkezés Típusa",
    "Elfogyasztott Ételek",
    "Étkezési Megjegyzések",
    "Van Panasz",
    "Panasz Időpontja",
    "Panasz Típusok",
    "Panasz Súlyosságok",
    "Panasz Megjegyzések",
    "Létrehozva",
)
ROW_WIDTH = len(SHEET_HEADERS)

YES = "Igen"
NO = "Nem"
LIST_SEPARATOR = ", "
PAIR_SEPARATOR = ": "

_MEAL_TYPE_IDS = {meal.id for meal in MEAL_TYPES}


def entry_to_row(entry: FoodEntry, written_at: datetime | None = None) -> list[str]:
    """Encode an entry as the 12 display fields of a sheet row."""
    names, pairs = complaint_display_fields(entry)
    stamp = written_at or datetime.now(tz=UTC)
    return [
        entry.id,
        entry.date,
        entry.time,
        meal_type_label(entry.meal_type) or entry.meal_type,
        entry.foods,
        entry.meal_notes,
        YES if entry.has_complaints else NO,
        entry.time_after_meal,
        LIST_SEPARATOR.join(names),
        LIST_SEPARATOR.join(pairs),
        entry.complaint_notes,
        _iso_timestamp(stamp),
    ]


def complaint_display_fields(entry: FoodEntry) -> tuple[list[str], list[str]]:
    """Return complaint names and "name: severity" pairs in one traversal.

    Both lists follow the order of ``entry.complaint_types`` so that names and
    severities line up again when the row is read back. A complaint without a
    recorded severity only contributes its name.
    """
    names: list[str] = []
    pairs: list[str] = []
    for complaint_id in entry.complaint_types:
        name = complaint_name(complaint_id)
        names.append(name)
        severity = entry.complaint_severities.get(complaint_id)
        if severity is not None:
            pairs.append(f"{name}{PAIR_SEPARATOR}{severity}")
    return names, pairs


def row_to_entry(
    row: Sequence[object], existing_ids: Collection[str] = ()
) -> FoodEntry:
    """Decode a sheet row, degrading unparseable fields to defaults.

    A row without an id gets a fresh one that avoids ``existing_ids``.
    """
    cells = [_text(value) for value in row[:ROW_WIDTH]]
    cells.extend([""] * (ROW_WIDTH - len(cells)))
    (
        entry_id,
        date,
        time,
        meal_label,
        foods,
        meal_notes,
        has_complaints,
        time_after_meal,
        names_text,
        pairs_text,
        complaint_notes,
        _written_at,
    ) = cells
    return FoodEntry(
        id=entry_id or new_entry_id(existing_ids),
        date=date,
        time=time,
        meal_type=_parse_meal_type(meal_label),
        foods=foods,
        meal_notes=meal_notes,
        has_complaints=has_complaints == YES,
        complaint_types=_parse_complaint_names(names_text),
        complaint_severities=_parse_severity_pairs(pairs_text),
        complaint_notes=complaint_notes,
        time_after_meal=time_after_meal,
    )


def entry_to_json(entry: FoodEntry) -> dict[str, object]:
    """Serialize an entry to the camelCase transport shape."""
    return {
        "id": entry.id,
        "date": entry.date,
        "time": entry.time,
        "mealType": entry.meal_type,
        "foods": entry.foods,
        "mealNotes": entry.meal_notes,
        "hasComplaints": entry.has_complaints,
        "complaintTypes": list(entry.complaint_types),
        "complaintSeverities": dict(entry.complaint_severities),
        "complaintNotes": entry.complaint_notes,
        "timeAfterMeal": entry.time_after_meal,
    }


def entry_from_json(
    data: Mapping[str, object], existing_ids: Collection[str] = ()
) -> FoodEntry:
    """Build an entry from the camelCase transport shape."""
    raw_types = data.get("complaintTypes")
    raw_severities = data.get("complaintSeverities")
    severities: dict[str, int] = {}
    if isinstance(raw_severities, Mapping):
        for key, value in raw_severities.items():
            if isinstance(value, int) and not isinstance(value, bool):
                severities[str(key)] = value
    return FoodEntry(
        id=_text(data.get("id")) or new_entry_id(existing_ids),
        date=_text(data.get("date")),
        time=_text(data.get("time")),
        meal_type=_text(data.get("mealType")) or "other",
        foods=_text(data.get("foods")),
        meal_notes=_text(data.get("mealNotes")),
        has_complaints=data.get("hasComplaints") is True,
        complaint_types=[str(item) for item in raw_types]
        if isinstance(raw_types, list)
        else [],
        complaint_severities=severities,
        complaint_notes=_text(data.get("complaintNotes")),
        time_after_meal=_text(data.get("timeAfterMeal")),
    )


def _parse_meal_type(label: str) -> str:
    meal_type = parse_meal_type_label(label)
    if meal_type:
        return meal_type
    if label in _MEAL_TYPE_IDS:
        return label
    return "other"


def _parse_complaint_names(text: str) -> list[str]:
    if not text:
        return []
    ids = []
    for name in text.split(LIST_SEPARATOR):
        complaint_id = complaint_id_for_name(name)
        if complaint_id:
            ids.append(complaint_id)
    return ids


def _parse_severity_pairs(text: str) -> dict[str, int]:
    severities: dict[str, int] = {}
    if not text:
        return severities
    for item in text.split(LIST_SEPARATOR):
        name, _, severity = item.partition(PAIR_SEPARATOR)
        if not name.strip() or not severity.strip():
            continue
        try:
            value = int(severity.strip())
        except ValueError:
            logger.debug("Skipping malformed severity pair %r", item)
            continue
        severities[complaint_id_for_name(name)] = value
    return severities


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _iso_timestamp(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
