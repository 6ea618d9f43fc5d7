"""Static reference tables for meals, complaints and severities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ComplaintType:
    """A named adverse symptom that can follow a meal."""

    id: str
    name: str
    color: str


@dataclass(frozen=True)
class SeverityLevel:
    """A complaint intensity rating."""

    value: int
    label: str
    color: str


@dataclass(frozen=True)
class MealType:
    """A meal slot and its display label."""

    id: str
    label: str


COMPLAINT_TYPES: tuple[ComplaintType, ...] = (
    ComplaintType("nausea", "Hányinger", "bg-yellow-100 text-yellow-800"),
    ComplaintType("bloating", "Puffadás", "bg-blue-100 text-blue-800"),
    ComplaintType("stomach-pain", "Gyomorfájás", "bg-red-100 text-red-800"),
    ComplaintType("heartburn", "Gyomorégés", "bg-orange-100 text-orange-800"),
    ComplaintType("diarrhea", "Hasmenés", "bg-brown-100 text-brown-800"),
    ComplaintType("constipation", "Székrekedés", "bg-gray-100 text-gray-800"),
    ComplaintType("gas", "Gázosság", "bg-green-100 text-green-800"),
    ComplaintType("fatigue", "Fáradtság", "bg-purple-100 text-purple-800"),
    ComplaintType("headache", "Fejfájás", "bg-pink-100 text-pink-800"),
    ComplaintType("other", "Egyéb", "bg-indigo-100 text-indigo-800"),
)

SEVERITY_LEVELS: tuple[SeverityLevel, ...] = (
    SeverityLevel(1, "Enyhe", "text-green-600"),
    SeverityLevel(2, "Közepes", "text-yellow-600"),
    SeverityLevel(3, "Súlyos", "text-orange-600"),
    SeverityLevel(4, "Extrém", "text-red-600"),
)

MEAL_TYPES: tuple[MealType, ...] = (
    MealType("breakfast", "Reggeli"),
    MealType("lunch", "Ebéd"),
    MealType("dinner", "Vacsora"),
    MealType("snack", "Snack"),
    MealType("other", "Egyéb"),
)

MIN_SEVERITY = SEVERITY_LEVELS[0].value
MAX_SEVERITY = SEVERITY_LEVELS[-1].value

_COMPLAINTS_BY_ID = {complaint.id: complaint for complaint in COMPLAINT_TYPES}
_COMPLAINTS_BY_NAME = {complaint.name: complaint for complaint in COMPLAINT_TYPES}
_SEVERITIES_BY_VALUE = {level.value: level for level in SEVERITY_LEVELS}
_MEAL_LABELS = {meal.id: meal.label for meal in MEAL_TYPES}
_MEAL_IDS_BY_LABEL = {meal.label: meal.id for meal in MEAL_TYPES}


def find_complaint_type(complaint_id: str) -> ComplaintType | None:
    """Return the complaint type with the given id."""
    return _COMPLAINTS_BY_ID.get(complaint_id)


def find_complaint_type_by_name(name: str) -> ComplaintType | None:
    """Return the complaint type whose display name matches exactly."""
    return _COMPLAINTS_BY_NAME.get(name)


def find_severity_level(value: int) -> SeverityLevel | None:
    """Return the severity level for a numeric rating."""
    return _SEVERITIES_BY_VALUE.get(value)


def complaint_name(complaint_id: str) -> str:
    """Return the display name for a complaint id, or the id itself."""
    complaint = find_complaint_type(complaint_id)
    return complaint.name if complaint else complaint_id


def complaint_id_for_name(name: str) -> str:
    """Return the complaint id for a display name, or the trimmed name."""
    cleaned = name.strip()
    complaint = find_complaint_type_by_name(cleaned)
    return complaint.id if complaint else cleaned


def meal_type_label(meal_type: str) -> str | None:
    """Return the display label for a meal type id."""
    return _MEAL_LABELS.get(meal_type)


def parse_meal_type_label(label: str) -> str | None:
    """Return the meal type id for a display label."""
    return _MEAL_IDS_BY_LABEL.get(label)
