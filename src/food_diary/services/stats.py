"""Analytics and history views over diary entries."""

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

from food_diary.domain.entries import FoodEntry
from food_diary.domain.reference import find_complaint_type
from food_diary.domain.stats import ComplaintFrequency, DiaryAnalytics

ComplaintsFilter = Literal["all", "with", "without"]

TREND_WINDOW_DAYS = 7


@dataclass
class StatsService:
    """Service for computing diary analytics and filtered history."""

    def analytics(
        self, entries: list[FoodEntry], today: date | None = None
    ) -> DiaryAnalytics | None:
        """Return aggregate statistics, or None for an empty diary."""
        if not entries:
            return None
        current = today or datetime.now().date()
        complaint_entries = [entry for entry in entries if entry.has_complaints]
        meal_types = Counter(entry.meal_type for entry in entries)

        recent: list[FoodEntry] = []
        previous: list[FoodEntry] = []
        for entry in entries:
            entry_date = _parse_date(entry.date)
            if entry_date is None:
                continue
            age = (current - entry_date).days
            if age <= TREND_WINDOW_DAYS:
                recent.append(entry)
            elif age <= TREND_WINDOW_DAYS * 2:
                previous.append(entry)
        recent_rate = _complaint_rate(recent)

        return DiaryAnalytics(
            total_entries=len(entries),
            complaint_entries=len(complaint_entries),
            complaint_percentage=len(complaint_entries) / len(entries) * 100,
            meal_types=dict(meal_types),
            complaints=_complaint_frequencies(complaint_entries),
            recent_complaint_rate=recent_rate,
            trend=recent_rate - _complaint_rate(previous),
        )

    def history(  # noqa: PLR0913
        self,
        entries: list[FoodEntry],
        search: str | None = None,
        meal_type: str | None = None,
        complaints: ComplaintsFilter = "all",
        days: int | None = None,
        today: date | None = None,
    ) -> list[FoodEntry]:
        """Return filtered entries, newest first."""
        filtered = list(entries)
        if search:
            needle = search.lower()
            filtered = [
                entry
                for entry in filtered
                if needle in entry.foods.lower()
                or needle in entry.meal_notes.lower()
                or needle in entry.complaint_notes.lower()
            ]
        if meal_type and meal_type != "all":
            filtered = [entry for entry in filtered if entry.meal_type == meal_type]
        if complaints == "with":
            filtered = [entry for entry in filtered if entry.has_complaints]
        elif complaints == "without":
            filtered = [entry for entry in filtered if not entry.has_complaints]
        if days is not None:
            cutoff = (today or datetime.now().date()) - timedelta(days=days)
            filtered = [
                entry
                for entry in filtered
                if (entry_date := _parse_date(entry.date)) is not None
                and entry_date >= cutoff
            ]
        return sorted(filtered, key=lambda entry: (entry.date, entry.time), reverse=True)


def _complaint_frequencies(entries: list[FoodEntry]) -> list[ComplaintFrequency]:
    counts: Counter[str] = Counter()
    severities: dict[str, list[int]] = {}
    for entry in entries:
        for complaint_id in entry.complaint_types:
            counts[complaint_id] += 1
            severity = entry.complaint_severities.get(complaint_id)
            if severity is not None:
                severities.setdefault(complaint_id, []).append(severity)

    frequencies = []
    for complaint_id, count in counts.most_common():
        complaint = find_complaint_type(complaint_id)
        values = severities.get(complaint_id)
        frequencies.append(
            ComplaintFrequency(
                id=complaint_id,
                name=complaint.name if complaint else complaint_id,
                color=complaint.color if complaint else "",
                count=count,
                percentage=count / len(entries) * 100,
                avg_severity=sum(values) / len(values) if values else None,
            )
        )
    return frequencies


def _complaint_rate(entries: list[FoodEntry]) -> float:
    if not entries:
        return 0.0
    with_complaints = sum(1 for entry in entries if entry.has_complaints)
    return with_complaints / len(entries) * 100


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
