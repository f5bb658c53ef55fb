"""Week grid state machine.

MealGrid owns the meal list shown in the 7x3 grid plus the transient gesture
state layered on top of it:

    dragged       meal being dragged (drag-start .. drag-end)
    copied        meal on the clipboard (copy gesture .. click outside / teardown)
    hovered_meal  meal card under the pointer, source for the copy gesture
    hovered_slot  (day, meal_type) under the pointer, target for the paste gesture

Every gesture is a named method. Store-mutating gestures (move, copy, edit,
delete, clear) are confirmed writes: the local list only changes after the
store call returns; a MealStoreError is handed to on_error unchanged and the
list is left as it was. Invalid gestures (paste with an empty clipboard, drop
on the source slot, drop without a drag) are ignored.
"""
from __future__ import annotations
import logging
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from mealgrid.domain.Meal import Meal, MealRequest
from mealgrid.infra.meal_store import MealStore, MealStoreError
from mealgrid.logic.grid.slot_index import meals_for_slot
from mealgrid.utilities.constants import DAYS, MEAL_TYPES

logger = logging.getLogger(__name__)

Slot = Tuple[str, str]
OpenForm = Callable[[str, str, Optional[Meal]], Any]
ErrorSink = Callable[[str], Any]

DELETE_FAILED = "Failed to delete meal. Please try again."
REQUIRED_FIELDS = "Name, day, and meal type are required"

__all__ = ["MealGrid", "MealCardHandlers", "DELETE_FAILED", "REQUIRED_FIELDS"]


def _ignore(*_args, **_kwargs):
    return None


def _is_slot(day: str, meal_type: str) -> bool:
    return day in DAYS and meal_type in MEAL_TYPES


class MealCardHandlers:
    """Handlers bound to a single meal card, handed to the meal-card renderer."""

    def __init__(self, drag_start, drag_end, mouse_enter, mouse_leave, edit, delete):
        self.drag_start = drag_start
        self.drag_end = drag_end
        self.mouse_enter = mouse_enter
        self.mouse_leave = mouse_leave
        self.edit = edit
        self.delete = delete


class MealGrid:
    def __init__(self, store: MealStore, meals: Any = None,
                 open_form: Optional[OpenForm] = None, on_error: Optional[ErrorSink] = None):
        self._store = store
        self._meals: List[Meal] = list(meals) if isinstance(meals, (list, tuple)) else []
        self.open_form = open_form or _ignore
        self.on_error = on_error or _ignore

        self.dragged: Optional[Meal] = None
        self.copied: Optional[Meal] = None
        self.hovered_meal: Optional[Meal] = None
        self.hovered_slot: Optional[Slot] = None

    @classmethod
    def load(cls, store: MealStore, **kwargs) -> "MealGrid":
        """Build a grid from the store's current list; a failed load starts empty."""
        grid = cls(store, [], **kwargs)
        try:
            grid._meals = list(store.list())
        except MealStoreError as e:
            grid._report(e)
        return grid

    # --- Read side ---------------------------------------------------------
    @property
    def meals(self) -> List[Meal]:
        return list(self._meals)

    def meals_for_slot(self, day: str, meal_type: str) -> List[Meal]:
        return meals_for_slot(self._meals, day, meal_type)

    def is_paste_target(self, day: str, meal_type: str) -> bool:
        """True while a copied meal is waiting and the pointer is over this slot."""
        return self.copied is not None and self.hovered_slot == (day, meal_type)

    def card_handlers(self, meal: Meal) -> MealCardHandlers:
        return MealCardHandlers(
            drag_start=partial(self.drag_start, meal),
            drag_end=self.drag_end,
            mouse_enter=partial(self.hover_meal, meal),
            mouse_leave=self.unhover_meal,
            edit=partial(self.edit, meal),
            delete=partial(self.delete, meal),
        )

    def render(self, render_slot: Callable[[str, str, List[Meal], bool], Any],
               render_meal: Optional[Callable[[Meal, MealCardHandlers], Any]] = None):
        """Call render_slot for every slot, Monday breakfast first.

        Returns a list of (slot_output, card_outputs); card_outputs is empty
        when no meal renderer is given.
        """
        rendered = []
        for day in DAYS:
            for meal_type in MEAL_TYPES:
                slot_meals = self.meals_for_slot(day, meal_type)
                cards = [render_meal(m, self.card_handlers(m)) for m in slot_meals] if render_meal else []
                rendered.append((render_slot(day, meal_type, slot_meals, self.is_paste_target(day, meal_type)), cards))
        return rendered

    # --- Drag and drop -----------------------------------------------------
    def drag_start(self, meal: Meal) -> None:
        self.dragged = meal

    def drag_end(self) -> None:
        self.dragged = None

    def drag_over(self, day: str, meal_type: str) -> bool:
        # Accepting the drag over is what allows the drop to happen at all
        return True

    def drop(self, day: str, meal_type: str) -> Optional[Meal]:
        """Move the dragged meal to (day, meal_type). Returns the moved meal or None."""
        meal = self.dragged
        self.dragged = None
        if meal is None or not _is_slot(day, meal_type):
            return None
        if meal.slot == (day, meal_type):
            return None
        current = self._find(meal.id)
        if current is None:
            return None
        moved = self._call(self._store.update, current.moved_to(day, meal_type))
        if moved is None:
            return None
        logger.debug("Moved meal %s %s/%s -> %s/%s", moved.id, current.day, current.meal_type, day, meal_type)
        self._replace(moved)
        return moved

    # --- Slot click / forms ------------------------------------------------
    def slot_click(self, day: str, meal_type: str) -> bool:
        """Open the add form for an empty slot. Populated slots ignore the click."""
        if not _is_slot(day, meal_type) or self.meals_for_slot(day, meal_type):
            return False
        self.open_form(day, meal_type, None)
        return True

    def edit(self, meal: Meal) -> None:
        self.open_form(meal.day, meal.meal_type, meal)

    def submit_form(self, fields: Union[MealRequest, Dict[str, Any]], meal: Optional[Meal] = None) -> Optional[Meal]:
        """Persist the add/edit form.

        With `meal` the fields are merged over it and the entry with the same id
        is replaced; without it a new meal is created and appended.
        """
        if isinstance(fields, MealRequest):
            request = fields
        else:
            merged = meal.to_request().to_dict() if meal is not None else {}
            merged.update(dict(fields or {}))
            request = MealRequest.from_dict(merged)
        if not request.is_valid():
            self.on_error(REQUIRED_FIELDS)
            return None

        if meal is None:
            created = self._call(self._store.create, request)
            if created is not None:
                self._meals.append(created)
            return created

        current = self._find(meal.id) or meal
        updated = self._call(self._store.update, current.apply(request))
        if updated is not None:
            self._replace(updated)
        return updated

    # --- Hover ---------------------------------------------------------------
    def hover_meal(self, meal: Meal) -> None:
        self.hovered_meal = meal

    def unhover_meal(self) -> None:
        self.hovered_meal = None

    def hover_slot(self, day: str, meal_type: str) -> None:
        if _is_slot(day, meal_type):
            self.hovered_slot = (day, meal_type)

    def unhover_slot(self) -> None:
        self.hovered_slot = None

    # --- Clipboard -----------------------------------------------------------
    def key_down(self, key: str, ctrl: bool = False, meta: bool = False) -> Optional[Meal]:
        """Keyboard entry point: ctrl/cmd+c copies, ctrl/cmd+v pastes."""
        if not (ctrl or meta) or not key:
            return None
        k = key.lower()
        if k == "c":
            return self.copy()
        if k == "v":
            return self.paste()
        return None

    def copy(self) -> Optional[Meal]:
        if self.hovered_meal is not None:
            self.copied = self.hovered_meal
        return self.copied if self.hovered_meal is not None else None

    def paste(self) -> Optional[Meal]:
        """Clone the copied meal into the hovered slot. The clipboard is kept for further pastes."""
        if self.copied is None or self.hovered_slot is None:
            return None
        day, meal_type = self.hovered_slot
        created = self._call(self._store.create, MealRequest.from_meal(self.copied, day, meal_type))
        if created is None:
            return None
        logger.debug("Pasted copy of %s into %s/%s as %s", self.copied.id, day, meal_type, created.id)
        self._meals.append(created)
        return created

    def click_outside(self) -> None:
        self.copied = None

    # --- Delete / clear ------------------------------------------------------
    def delete(self, meal: Union[Meal, str]) -> bool:
        meal_id = meal if isinstance(meal, str) else meal.id
        if self._find(meal_id) is None:
            return False
        try:
            deleted = self._store.delete(meal_id)
        except MealStoreError as e:
            self._report(e)
            return False
        if not deleted:
            self.on_error(DELETE_FAILED)
            return False
        self._meals = [m for m in self._meals if m.id != meal_id]
        if self.hovered_meal is not None and self.hovered_meal.id == meal_id:
            self.hovered_meal = None
        return True

    def clear_week(self) -> bool:
        try:
            cleared = self._store.clear()
        except MealStoreError as e:
            self._report(e)
            return False
        if cleared:
            self._meals = []
            self.hovered_meal = None
        return bool(cleared)

    def teardown(self) -> None:
        self.dragged = None
        self.copied = None
        self.hovered_meal = None
        self.hovered_slot = None

    # --- Internals -----------------------------------------------------------
    def _find(self, meal_id: str) -> Optional[Meal]:
        for m in self._meals:
            if m.id == meal_id:
                return m
        return None

    def _replace(self, meal: Meal) -> None:
        self._meals = [meal if m.id == meal.id else m for m in self._meals]

    def _call(self, operation, *args):
        try:
            return operation(*args)
        except MealStoreError as e:
            self._report(e)
            return None

    def _report(self, error: MealStoreError) -> None:
        logger.warning("Meal store operation failed: %s", error)
        self.on_error(str(error))
