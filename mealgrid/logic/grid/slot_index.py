"""Slot index: derive the meals shown in each (day, meal type) cell of the week grid.

Nothing here is stored; the grid is recomputed from the meal list on every render.
"""
from __future__ import annotations
from typing import Any, Dict, List

from mealgrid.utilities.constants import DAYS, MEAL_TYPES

__all__ = ["meals_for_slot", "build_week_grid", "is_slot_empty"]


def _field(meal: Any, attr: str, key: str):
    # Meal objects and their wire dicts are both accepted
    if isinstance(meal, dict):
        return meal.get(key, meal.get(attr))
    return getattr(meal, attr, None)


def meals_for_slot(meals: Any, day: str, meal_type: str) -> List[Any]:
    """Return the meals assigned to (day, meal_type) in their original list order.

    A missing or malformed meal list yields an empty result.
    """
    if not isinstance(meals, (list, tuple)):
        return []
    return [
        m for m in meals
        if m is not None
        and _field(m, "day", "day") == day
        and _field(m, "meal_type", "mealType") == meal_type
    ]


def is_slot_empty(meals: Any, day: str, meal_type: str) -> bool:
    return not meals_for_slot(meals, day, meal_type)


def build_week_grid(meals: Any) -> Dict[str, Dict[str, List[Any]]]:
    """Full week view: {day: {meal_type: [meals]}} for all slots, Monday first."""
    return {
        day: {meal_type: meals_for_slot(meals, day, meal_type) for meal_type in MEAL_TYPES}
        for day in DAYS
    }
