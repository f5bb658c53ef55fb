import logging
from typing import List, Optional
from uuid import uuid4

from mealgrid.domain.Meal import Meal, MealRequest
from mealgrid.infra import paths
from mealgrid.infra.json_store import FILE_LOCK, load_json, atomic_write

logger = logging.getLogger(__name__)


class MealNotFoundError(LookupError):
    pass


class MealRepository:
    """Meals of every plan, kept as one JSON list in MEALS_FILE."""

    def __init__(self, path=None):
        self.path = path or paths.MEALS_FILE

    def _load(self) -> List[Meal]:
        meals = []
        for d in load_json(self.path, []):
            try:
                meals.append(Meal.from_dict(d))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping unreadable meal record in %s: %s", self.path, e)
        return meals

    def _save(self, meals: List[Meal]) -> None:
        atomic_write(self.path, [m.to_dict() for m in meals])

    def list_for_plan(self, meal_plan_id: str) -> List[Meal]:
        with FILE_LOCK:
            return [m for m in self._load() if m.meal_plan_id == meal_plan_id]

    def get(self, meal_id: str) -> Meal:
        with FILE_LOCK:
            for m in self._load():
                if m.id == meal_id:
                    return m
        raise MealNotFoundError(meal_id)

    def find(self, meal_id: str) -> Optional[Meal]:
        try:
            return self.get(meal_id)
        except MealNotFoundError:
            return None

    def create(self, request: MealRequest, meal_plan_id: str) -> Meal:
        meal = Meal.create(str(uuid4()), request, meal_plan_id=meal_plan_id)
        with FILE_LOCK:
            meals = self._load()
            meals.append(meal)
            self._save(meals)
        return meal

    def update(self, meal_id: str, request: MealRequest) -> Meal:
        """Overwrite the editable fields; id, plan and created_at are kept."""
        with FILE_LOCK:
            meals = self._load()
            for i, m in enumerate(meals):
                if m.id == meal_id:
                    meals[i] = m.apply(request)
                    self._save(meals)
                    return meals[i]
        raise MealNotFoundError(meal_id)

    def delete(self, meal_id: str) -> None:
        with FILE_LOCK:
            meals = self._load()
            kept = [m for m in meals if m.id != meal_id]
            if len(kept) == len(meals):
                raise MealNotFoundError(meal_id)
            self._save(kept)

    def delete_for_plan(self, meal_plan_id: str) -> int:
        """Remove every meal of a plan. Returns how many were removed."""
        with FILE_LOCK:
            meals = self._load()
            kept = [m for m in meals if m.meal_plan_id != meal_plan_id]
            removed = len(meals) - len(kept)
            if removed:
                self._save(kept)
        return removed


__all__ = ["MealRepository", "MealNotFoundError"]
