import unittest
from datetime import datetime, timezone

from mealgrid.domain.Meal import Meal, MealRequest
from mealgrid.infra.meal_store import MealStoreError
from mealgrid.logic.grid.state_machine import MealGrid, DELETE_FAILED, REQUIRED_FIELDS

OLD = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeStore:
    """In-memory store recording every call; `fail` makes writes raise."""

    def __init__(self, meals=None):
        self.meals = list(meals or [])
        self.calls = []
        self.fail = None
        self.delete_result = True
        self._seq = 0

    def list(self):
        self.calls.append(("list", None))
        return list(self.meals)

    def create(self, request):
        self.calls.append(("create", request.slot))
        if self.fail:
            raise MealStoreError(self.fail)
        self._seq += 1
        meal = Meal.create(f"new-{self._seq}", request)
        self.meals.append(meal)
        return meal

    def update(self, meal):
        self.calls.append(("update", meal.id))
        if self.fail:
            raise MealStoreError(self.fail)
        saved = meal.apply(meal.to_request())
        self.meals = [saved if m.id == meal.id else m for m in self.meals]
        return saved

    def delete(self, meal_id):
        self.calls.append(("delete", meal_id))
        if self.fail:
            raise MealStoreError(self.fail)
        return self.delete_result

    def clear(self):
        self.calls.append(("clear", None))
        if self.fail:
            raise MealStoreError(self.fail)
        self.meals = []
        return True


def _meal(id, name, day, meal_type, **kw):
    return Meal(id, name, day, meal_type, created_at=OLD, updated_at=OLD, **kw)


class TestMealGrid(unittest.TestCase):

    def setUp(self):
        self.a = _meal("a", "Pasta", "Monday", "Breakfast", chef="Ana")
        self.b = _meal("b", "Salad", "Friday", "Dinner")
        self.store = FakeStore([self.a, self.b])
        self.forms = []
        self.errors = []
        self.grid = MealGrid(
            self.store, [self.a, self.b],
            open_form=lambda day, meal_type, meal: self.forms.append((day, meal_type, meal)),
            on_error=self.errors.append,
        )

    # --- drag and drop ---
    def test_drop_on_own_slot_is_noop(self):
        self.grid.drag_start(self.a)
        self.assertIsNone(self.grid.drop("Monday", "Breakfast"))
        self.assertEqual(self.store.calls, [])
        self.assertEqual(self.grid.meals, [self.a, self.b])
        self.assertIsNone(self.grid.dragged)

    def test_drop_moves_only_slot(self):
        self.grid.drag_start(self.a)
        self.assertTrue(self.grid.drag_over("Tuesday", "Lunch"))
        moved = self.grid.drop("Tuesday", "Lunch")

        self.assertEqual(self.store.calls, [("update", "a")])
        self.assertEqual(moved.slot, ("Tuesday", "Lunch"))
        self.assertEqual((moved.id, moved.name, moved.chef, moved.created_at), ("a", "Pasta", "Ana", OLD))
        self.assertEqual([m.id for m in self.grid.meals], ["a", "b"])
        self.assertEqual(self.grid.meals[1], self.b)
        self.assertIsNone(self.grid.dragged)

    def test_single_meal_move_scenario(self):
        grid = MealGrid(FakeStore([self.a]), [self.a])
        grid.drag_start(self.a)
        grid.drop("Tuesday", "Lunch")
        self.assertEqual(len(grid.meals), 1)
        self.assertEqual((grid.meals[0].id, grid.meals[0].day, grid.meals[0].meal_type), ("a", "Tuesday", "Lunch"))

    def test_drop_without_drag_is_ignored(self):
        self.assertIsNone(self.grid.drop("Tuesday", "Lunch"))
        self.assertEqual(self.store.calls, [])

    def test_drag_end_always_clears(self):
        self.grid.drag_start(self.a)
        self.grid.drag_end()
        self.assertIsNone(self.grid.dragged)
        self.grid.drag_end()
        self.assertIsNone(self.grid.dragged)
        self.assertIsNone(self.grid.drop("Tuesday", "Lunch"))

    def test_failed_move_keeps_list_and_reports(self):
        self.store.fail = "Failed to update meal"
        self.grid.drag_start(self.a)
        self.assertIsNone(self.grid.drop("Sunday", "Dinner"))
        self.assertEqual(self.grid.meals, [self.a, self.b])
        self.assertEqual(self.errors, ["Failed to update meal"])

    # --- copy / paste ---
    def test_copy_then_paste_clones(self):
        self.grid.hover_meal(self.a)
        self.assertIs(self.grid.key_down("c", ctrl=True), self.a)
        self.grid.unhover_meal()
        self.grid.hover_slot("Wednesday", "Dinner")
        clone = self.grid.key_down("V", meta=True)

        self.assertIsNotNone(clone)
        self.assertNotEqual(clone.id, "a")
        self.assertEqual(clone.slot, ("Wednesday", "Dinner"))
        self.assertEqual((clone.name, clone.chef), ("Pasta", "Ana"))
        self.assertGreater(clone.created_at, OLD)
        self.assertEqual(self.grid.meals[0], self.a)
        self.assertEqual(self.grid.meals[-1], clone)
        self.assertIs(self.grid.copied, self.a)

    def test_paste_twice_keeps_clipboard(self):
        self.grid.hover_meal(self.a)
        self.grid.copy()
        self.grid.hover_slot("Tuesday", "Lunch")
        first = self.grid.paste()
        self.grid.hover_slot("Thursday", "Lunch")
        second = self.grid.paste()
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(self.grid.meals), 4)

    def test_click_outside_clears_clipboard(self):
        self.grid.hover_meal(self.a)
        self.grid.copy()
        self.grid.click_outside()
        self.grid.hover_slot("Wednesday", "Dinner")
        self.assertIsNone(self.grid.paste())
        self.assertEqual(self.store.calls, [])

    def test_copy_without_hover_is_noop(self):
        self.assertIsNone(self.grid.copy())
        self.assertIsNone(self.grid.copied)

    def test_keys_without_modifier_ignored(self):
        self.grid.hover_meal(self.a)
        self.assertIsNone(self.grid.key_down("c"))
        self.assertIsNone(self.grid.copied)
        self.assertIsNone(self.grid.key_down("x", ctrl=True))

    def test_paste_without_hovered_slot_is_noop(self):
        self.grid.hover_meal(self.a)
        self.grid.copy()
        self.assertIsNone(self.grid.paste())
        self.assertEqual(self.store.calls, [])

    def test_hover_unknown_slot_ignored(self):
        self.grid.hover_slot("Someday", "Brunch")
        self.assertIsNone(self.grid.hovered_slot)

    def test_failed_paste_reports(self):
        self.store.fail = "Failed to add meal"
        self.grid.hover_meal(self.a)
        self.grid.copy()
        self.grid.hover_slot("Tuesday", "Lunch")
        self.assertIsNone(self.grid.paste())
        self.assertEqual(len(self.grid.meals), 2)
        self.assertEqual(self.errors, ["Failed to add meal"])

    # --- delete ---
    def test_delete_removes_exactly_one(self):
        self.assertTrue(self.grid.delete(self.a))
        self.assertEqual(self.grid.meals, [self.b])
        self.assertEqual(self.store.calls, [("delete", "a")])

    def test_delete_unknown_id_is_noop(self):
        self.assertFalse(self.grid.delete("missing"))
        self.assertEqual(self.store.calls, [])
        self.assertEqual(len(self.grid.meals), 2)

    def test_delete_rejected_by_store(self):
        self.store.delete_result = False
        self.assertFalse(self.grid.delete(self.a))
        self.assertEqual(len(self.grid.meals), 2)
        self.assertEqual(self.errors, [DELETE_FAILED])

    def test_delete_clears_hover_on_removed_card(self):
        self.grid.hover_meal(self.a)
        self.grid.delete(self.a)
        self.assertIsNone(self.grid.hovered_meal)

    # --- slot click and forms ---
    def test_slot_click_opens_add_form_only_when_empty(self):
        self.assertTrue(self.grid.slot_click("Sunday", "Lunch"))
        self.assertFalse(self.grid.slot_click("Monday", "Breakfast"))
        self.assertEqual(self.forms, [("Sunday", "Lunch", None)])

    def test_edit_opens_form_with_meal(self):
        self.grid.edit(self.b)
        self.assertEqual(self.forms, [("Friday", "Dinner", self.b)])

    def test_submit_add_form(self):
        created = self.grid.submit_form({"name": "Tacos", "day": "Sunday", "mealType": "Lunch", "chef": ""})
        self.assertEqual(created.slot, ("Sunday", "Lunch"))
        self.assertIsNone(created.chef)
        self.assertEqual(self.grid.meals[-1], created)

    def test_submit_edit_form_replaces_by_id(self):
        updated = self.grid.submit_form({"name": "Pesto Pasta"}, meal=self.a)
        self.assertEqual(updated.id, "a")
        self.assertEqual(updated.name, "Pesto Pasta")
        self.assertEqual(updated.chef, "Ana")
        self.assertEqual(updated.slot, self.a.slot)
        self.assertGreater(updated.updated_at, OLD)
        self.assertEqual([m.name for m in self.grid.meals], ["Pesto Pasta", "Salad"])

    def test_submit_invalid_form_reports(self):
        self.assertIsNone(self.grid.submit_form(MealRequest("", "Monday", "Lunch")))
        self.assertEqual(self.errors, [REQUIRED_FIELDS])
        self.assertEqual(self.store.calls, [])

    # --- clear / teardown / load ---
    def test_clear_week(self):
        self.assertTrue(self.grid.clear_week())
        self.assertEqual(self.grid.meals, [])

    def test_failed_clear_keeps_meals(self):
        self.store.fail = "Failed to clear meals"
        self.assertFalse(self.grid.clear_week())
        self.assertEqual(len(self.grid.meals), 2)
        self.assertEqual(self.errors, ["Failed to clear meals"])

    def test_teardown_resets_transient_state(self):
        self.grid.drag_start(self.a)
        self.grid.hover_meal(self.a)
        self.grid.copy()
        self.grid.hover_slot("Monday", "Lunch")
        self.grid.teardown()
        self.assertEqual(
            (self.grid.dragged, self.grid.copied, self.grid.hovered_meal, self.grid.hovered_slot),
            (None, None, None, None),
        )

    def test_malformed_initial_list_is_empty(self):
        grid = MealGrid(self.store, {"not": "a list"})
        self.assertEqual(grid.meals, [])

    def test_load_from_store(self):
        grid = MealGrid.load(self.store)
        self.assertEqual([m.id for m in grid.meals], ["a", "b"])

    def test_meals_property_is_a_copy(self):
        self.grid.meals.clear()
        self.assertEqual(len(self.grid.meals), 2)

    # --- rendering ---
    def test_render_visits_every_slot(self):
        seen = []
        self.grid.hover_meal(self.a)
        self.grid.copy()
        self.grid.hover_slot("Friday", "Dinner")

        def render_slot(day, meal_type, meals, is_paste_target):
            seen.append((day, meal_type, [m.id for m in meals], is_paste_target))
            return day

        out = self.grid.render(render_slot, lambda meal, handlers: handlers)
        self.assertEqual(len(seen), 21)
        self.assertEqual(seen[0], ("Monday", "Breakfast", ["a"], False))
        self.assertIn(("Friday", "Dinner", ["b"], True), seen)
        self.assertEqual(sum(1 for s in seen if s[3]), 1)

        handlers = out[0][1][0]
        handlers.drag_start()
        self.assertIs(self.grid.dragged, self.a)
        handlers.drag_end()
        self.assertIsNone(self.grid.dragged)
        handlers.edit()
        self.assertEqual(self.forms[-1], ("Monday", "Breakfast", self.a))
        handlers.delete()
        self.assertEqual([m.id for m in self.grid.meals], ["b"])
