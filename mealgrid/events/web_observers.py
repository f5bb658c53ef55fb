"""Web-facing observers for meal plan events.

Subscribes to every event on the GLOBAL_EVENT_BUS and keeps an in-memory ring
buffer of recent events that the activity endpoint serves, so collaborators
on a shared plan can poll for changes without reloading the whole week.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer; with several worker processes each keeps its own.
  * A MAX_EVENTS cap prevents unbounded memory growth.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock

from mealgrid.domain.Meal import utcnow, format_timestamp
from .Event_Bus import GLOBAL_EVENT_BUS, ALL_EVENTS

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300  # keep a few hundred recent events
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    if not isinstance(payload, dict):
        return
    evt: Dict[str, Any] = {'type': event_name, 'ts': format_timestamp(utcnow())}
    meal = payload.get('meal')
    if meal is not None:
        evt['mealPlanId'] = meal.meal_plan_id
        evt['mealId'] = meal.id
        evt['name'] = meal.name
        evt['day'] = meal.day
        evt['mealType'] = meal.meal_type
    else:
        evt['mealPlanId'] = payload.get('meal_plan_id')
    evt['userId'] = payload.get('user_id')
    if 'from' in payload:
        evt['from'] = {'day': payload['from'][0], 'mealType': payload['from'][1]}
    for k in ('count', 'role', 'target'):
        if k in payload:
            evt[k] = payload[k]
    with _lock:
        evt['id'] = _next_id
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in ALL_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True


def stop():
    global _started
    for name in ALL_EVENTS:
        GLOBAL_EVENT_BUS.unsubscribe(name, _record)
    _started = False


def clear():
    with _lock:
        _events.clear()


def get_events(meal_plan_id: Optional[str] = None, since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive), optionally for one plan only.

    next_cursor is the largest id in the buffer so the client can poll with
    since=next_cursor whether or not any event matched its plan.
    """
    with _lock:
        data = [e for e in _events
                if (since is None or e['id'] > since)
                and (meal_plan_id is None or e.get('mealPlanId') == meal_plan_id)]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'stop', 'clear', 'get_events', 'MAX_EVENTS']
