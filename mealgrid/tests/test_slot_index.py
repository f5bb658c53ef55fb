import unittest
from mealgrid.domain.Meal import Meal
from mealgrid.logic.grid.slot_index import meals_for_slot, build_week_grid, is_slot_empty
from mealgrid.utilities.constants import DAYS, MEAL_TYPES


class TestSlotIndex(unittest.TestCase):

    def setUp(self):
        self.a = Meal("a", "Oatmeal", "Monday", "Breakfast")
        self.b = Meal("b", "Soup", "Monday", "Lunch")
        self.c = Meal("c", "Pancakes", "Monday", "Breakfast")
        self.meals = [self.a, self.b, self.c]

    def test_exact_ordered_subsequence(self):
        self.assertEqual(meals_for_slot(self.meals, "Monday", "Breakfast"), [self.a, self.c])
        self.assertEqual(meals_for_slot(self.meals, "Monday", "Lunch"), [self.b])

    def test_absent_slot_is_empty(self):
        self.assertEqual(meals_for_slot(self.meals, "Sunday", "Dinner"), [])
        self.assertTrue(is_slot_empty(self.meals, "Sunday", "Dinner"))
        self.assertFalse(is_slot_empty(self.meals, "Monday", "Lunch"))

    def test_malformed_input_is_empty(self):
        for bad in (None, "meals", 42, {"meals": []}):
            self.assertEqual(meals_for_slot(bad, "Monday", "Breakfast"), [])

    def test_accepts_wire_dicts(self):
        wire = [m.to_dict() for m in self.meals]
        names = [m["name"] for m in meals_for_slot(wire, "Monday", "Breakfast")]
        self.assertEqual(names, ["Oatmeal", "Pancakes"])

    def test_week_grid_covers_all_slots(self):
        grid = build_week_grid(self.meals)
        self.assertEqual(list(grid.keys()), list(DAYS))
        for day in DAYS:
            self.assertEqual(list(grid[day].keys()), list(MEAL_TYPES))
        self.assertEqual(grid["Monday"]["Breakfast"], [self.a, self.c])
        self.assertEqual(sum(len(v) for d in grid.values() for v in d.values()), 3)
