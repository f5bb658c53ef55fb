"""Meal domain entity: one planned dish placed in a (day, meal type) slot."""
from datetime import datetime, timezone
from typing import Optional, Tuple, Any

from mealgrid.utilities.constants import DAYS, MEAL_TYPES


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    '''Accepts datetime or ISO-8601 string (trailing Z allowed). Naive values are taken as UTC.'''
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


class MealRequest:
    """Fields a user supplies when creating or editing a meal."""

    def __init__(self, name: str, day: str, meal_type: str,
                 description: Optional[str] = None, chef: Optional[str] = None):
        self.name = name
        self.day = day
        self.meal_type = meal_type
        self.description = _optional_text(description)
        self.chef = _optional_text(chef)

    @property
    def slot(self) -> Tuple[str, str]:
        return self.day, self.meal_type

    def is_valid(self) -> bool:
        return bool(self.name and self.name.strip()) and self.day in DAYS and self.meal_type in MEAL_TYPES

    @staticmethod
    def from_meal(meal: "Meal", day: Optional[str] = None, meal_type: Optional[str] = None) -> "MealRequest":
        '''Clone request for a meal, optionally retargeted to another slot.'''
        return MealRequest(
            name=meal.name,
            day=day or meal.day,
            meal_type=meal_type or meal.meal_type,
            description=meal.description,
            chef=meal.chef,
        )

    @staticmethod
    def from_dict(data) -> "MealRequest":
        d = dict(data) if isinstance(data, dict) else {}
        return MealRequest(
            name=d.get("name", ""),
            day=d.get("day", ""),
            meal_type=d.get("mealType", d.get("meal_type", "")),
            description=d.get("description"),
            chef=d.get("chef"),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "description": self.description,
            "chef": self.chef,
            "day": self.day,
            "mealType": self.meal_type,
        }

    def __repr__(self) -> str:
        return f"MealRequest({self.name!r}, {self.day}/{self.meal_type})"


class Meal:
    def __init__(self, id: str, name: str, day: str, meal_type: str,
                 description: Optional[str] = None, chef: Optional[str] = None,
                 meal_plan_id: Optional[str] = None,
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
        now = utcnow()
        self.id = id
        self.meal_plan_id = meal_plan_id
        self.name = name
        self.description = _optional_text(description)
        self.chef = _optional_text(chef)
        self.day = day
        self.meal_type = meal_type
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    @property
    def slot(self) -> Tuple[str, str]:
        return self.day, self.meal_type

    @staticmethod
    def create(meal_id: str, request: MealRequest, meal_plan_id: Optional[str] = None) -> "Meal":
        '''New meal from a request with fresh timestamps.'''
        now = utcnow()
        return Meal(
            id=meal_id,
            name=request.name,
            day=request.day,
            meal_type=request.meal_type,
            description=request.description,
            chef=request.chef,
            meal_plan_id=meal_plan_id,
            created_at=now,
            updated_at=now,
        )

    def apply(self, request: MealRequest) -> "Meal":
        '''Copy of this meal with the request's fields merged in and updated_at refreshed.'''
        return Meal(
            id=self.id,
            name=request.name,
            day=request.day,
            meal_type=request.meal_type,
            description=request.description,
            chef=request.chef,
            meal_plan_id=self.meal_plan_id,
            created_at=self.created_at,
            updated_at=utcnow(),
        )

    def moved_to(self, day: str, meal_type: str) -> "Meal":
        '''Copy of this meal relocated to another slot; every other field is kept.'''
        return Meal(
            id=self.id,
            name=self.name,
            day=day,
            meal_type=meal_type,
            description=self.description,
            chef=self.chef,
            meal_plan_id=self.meal_plan_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_request(self) -> MealRequest:
        return MealRequest.from_meal(self)

    @staticmethod
    def from_dict(data) -> "Meal":
        '''Creates a Meal from its wire/JSON form. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Meal(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            day=d.get("day", ""),
            meal_type=d.get("mealType", d.get("meal_type", "")),
            description=d.get("description"),
            chef=d.get("chef"),
            meal_plan_id=d.get("mealPlanId", d.get("meal_plan_id")),
            created_at=parse_timestamp(d.get("createdAt", d.get("created_at"))),
            updated_at=parse_timestamp(d.get("updatedAt", d.get("updated_at"))),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "mealPlanId": self.meal_plan_id,
            "name": self.name,
            "description": self.description,
            "chef": self.chef,
            "day": self.day,
            "mealType": self.meal_type,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Meal):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # mutable entity

    def __str__(self) -> str:
        parts = [f"{self.name} - {self.day} {self.meal_type}"]
        if self.chef:
            parts.append(f"Chef: {self.chef}")
        return " - ".join(parts)

    __repr__ = __str__
