"""Event helper utilities.

Publishing helpers for meal plan changes on the global event bus.

Quick import:
    from mealgrid.events.event_helpers import (
        publish_meal_saved, publish_meal_deleted, publish_meals_cleared,
        publish_plan_shared, publish_plan_joined
    )
"""
from __future__ import annotations
from typing import Any, Optional
from .Event_Bus import (
    create_event,
    MEAL_CREATED, MEAL_UPDATED, MEAL_MOVED, MEAL_DELETED, MEALS_CLEARED,
    MEAL_PLAN_SHARED, MEAL_PLAN_JOINED,
)

__all__ = [
    'publish_meal_saved', 'publish_meal_deleted', 'publish_meals_cleared',
    'publish_plan_shared', 'publish_plan_joined',
]


def publish_meal_saved(meal: Any, user_id: str, previous: Optional[Any] = None):
    """Publish meal.created, or meal.moved / meal.updated when `previous` is given.

    A change of slot alone counts as a move.
    """
    if previous is None:
        create_event(MEAL_CREATED, {'meal': meal, 'user_id': user_id})
        return
    moved = previous.slot != meal.slot
    same_fields = (previous.name, previous.description, previous.chef) == (meal.name, meal.description, meal.chef)
    if moved and same_fields:
        create_event(MEAL_MOVED, {'meal': meal, 'user_id': user_id, 'from': previous.slot})
    else:
        create_event(MEAL_UPDATED, {'meal': meal, 'user_id': user_id})


def publish_meal_deleted(meal: Any, user_id: str):
    create_event(MEAL_DELETED, {'meal': meal, 'user_id': user_id})


def publish_meals_cleared(meal_plan_id: str, user_id: str, count: int):
    create_event(MEALS_CLEARED, {'meal_plan_id': meal_plan_id, 'user_id': user_id, 'count': count})


def publish_plan_shared(meal_plan_id: str, user_id: str, target: str, role: str):
    create_event(MEAL_PLAN_SHARED, {
        'meal_plan_id': meal_plan_id,
        'user_id': user_id,
        'target': target,
        'role': role,
    })


def publish_plan_joined(meal_plan_id: str, user_id: str, role: str):
    create_event(MEAL_PLAN_JOINED, {'meal_plan_id': meal_plan_id, 'user_id': user_id, 'role': role})
