"""CSV export of the diary."""

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime

from food_diary.codec import NO, SHEET_HEADERS, YES, entry_to_row
from food_diary.domain.entries import FoodEntry
from food_diary.domain.reference import (
    complaint_name,
    find_severity_level,
    meal_type_label,
)

EXPORT_HEADERS: tuple[str, ...] = (
    "Dátum",
    "Időpont",
    "Étkezés Típusa",
    "Ételek",
    "Étkezési Megjegyzések",
    "Van Panasz",
    "Panasz Típusok",
    "Panasz Súlyosság",
    "Panasz Megjegyzések",
    "Idő az Étkezés Után",
)
EXPORT_SEPARATOR = "; "
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


@dataclass
class ExportService:
    """Flattens entries into downloadable tabular formats."""

    def export_csv(self, entries: list[FoodEntry]) -> str:
        """Return the entries as CSV with localized headers."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(EXPORT_HEADERS)
        writer.writerows(_export_row(entry) for entry in entries)
        return buffer.getvalue()

    def export_filename(self, today: date | None = None) -> str:
        """Return the dated download filename."""
        day = today or datetime.now().date()
        return f"etkezesi-naplo-{day.isoformat()}.csv"

    def sheet_data(self, entries: list[FoodEntry]) -> list[list[str]]:
        """Return a header row plus sheet rows for manual import."""
        return [list(SHEET_HEADERS), *(entry_to_row(entry) for entry in entries)]


def _export_row(entry: FoodEntry) -> list[str]:
    names = [complaint_name(complaint_id) for complaint_id in entry.complaint_types]
    severities = [
        f"{complaint_name(complaint_id)}: "
        f"{_severity_label(entry.complaint_severities.get(complaint_id))}"
        for complaint_id in entry.complaint_types
    ]
    return [
        entry.date,
        entry.time,
        meal_type_label(entry.meal_type) or "Egyéb",
        entry.foods,
        entry.meal_notes,
        YES if entry.has_complaints else NO,
        EXPORT_SEPARATOR.join(names),
        EXPORT_SEPARATOR.join(severities),
        entry.complaint_notes,
        entry.time_after_meal,
    ]


def _severity_label(value: int | None) -> str:
    if value is None:
        return "?"
    level = find_severity_level(value)
    return level.label if level else str(value)
