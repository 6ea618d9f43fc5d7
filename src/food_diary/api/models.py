"""Pydantic models for the diary HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from food_diary.domain.entries import FoodEntry


class FoodEntryPayload(BaseModel):
    """Entry payload in the camelCase transport shape."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    date: str
    time: str
    meal_type: str = Field(alias="mealType")
    foods: str
    meal_notes: str = Field(default="", alias="mealNotes")
    has_complaints: bool = Field(default=False, alias="hasComplaints")
    complaint_types: list[str] = Field(default_factory=list, alias="complaintTypes")
    complaint_severities: dict[str, int] = Field(
        default_factory=dict, alias="complaintSeverities"
    )
    complaint_notes: str = Field(default="", alias="complaintNotes")
    time_after_meal: str = Field(default="", alias="timeAfterMeal")

    def to_entry(self, entry_id: str | None = None) -> FoodEntry:
        """Convert the payload to a domain entry."""
        return FoodEntry(
            id=entry_id or self.id or "",
            date=self.date,
            time=self.time,
            meal_type=self.meal_type,
            foods=self.foods,
            meal_notes=self.meal_notes,
            has_complaints=self.has_complaints,
            complaint_types=list(self.complaint_types),
            complaint_severities=dict(self.complaint_severities),
            complaint_notes=self.complaint_notes,
            time_after_meal=self.time_after_meal,
        )


class SyncSettingsPayload(BaseModel):
    """Sync settings update."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool
    spreadsheet_id: str = Field(default="", alias="spreadsheetId")
