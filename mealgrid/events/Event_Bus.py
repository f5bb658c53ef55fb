"""Simple Event Bus / Observer implementation for meal plan changes.

Event names:
  meal.created      -> payload {"meal": Meal, "user_id": str}
  meal.updated      -> payload {"meal": Meal, "user_id": str}
  meal.moved        -> payload {"meal": Meal, "user_id": str, "from": (day, meal_type)}
  meal.deleted      -> payload {"meal": Meal, "user_id": str}
  meals.cleared     -> payload {"meal_plan_id": str, "user_id": str, "count": int}
  meal_plan.shared  -> payload {"meal_plan_id": str, "user_id": str, "target": str, "role": str}
  meal_plan.joined  -> payload {"meal_plan_id": str, "user_id": str, "role": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
MEAL_CREATED = "meal.created"
MEAL_UPDATED = "meal.updated"
MEAL_MOVED = "meal.moved"
MEAL_DELETED = "meal.deleted"
MEALS_CLEARED = "meals.cleared"
MEAL_PLAN_SHARED = "meal_plan.shared"
MEAL_PLAN_JOINED = "meal_plan.joined"

ALL_EVENTS = (
	MEAL_CREATED, MEAL_UPDATED, MEAL_MOVED, MEAL_DELETED, MEALS_CLEARED,
	MEAL_PLAN_SHARED, MEAL_PLAN_JOINED,
)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def create_event(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'create_event', 'ALL_EVENTS',
	'MEAL_CREATED', 'MEAL_UPDATED', 'MEAL_MOVED', 'MEAL_DELETED', 'MEALS_CLEARED',
	'MEAL_PLAN_SHARED', 'MEAL_PLAN_JOINED',
]
