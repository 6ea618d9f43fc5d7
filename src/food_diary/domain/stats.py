"""Domain models for diary analytics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ComplaintFrequency:
    """How often a complaint type was reported."""

    id: str
    name: str
    color: str
    count: int
    percentage: float
    avg_severity: float | None


@dataclass(frozen=True)
class DiaryAnalytics:
    """Aggregated statistics over the diary."""

    total_entries: int
    complaint_entries: int
    complaint_percentage: float
    meal_types: dict[str, int]
    complaints: list[ComplaintFrequency]
    recent_complaint_rate: float
    trend: float
