import logging
from typing import List
from uuid import uuid4

from mealgrid.domain.Meal import Meal, MealRequest
from mealgrid.infra import paths
from mealgrid.infra.json_store import FILE_LOCK, load_json, atomic_write
from mealgrid.infra.meal_store import MealStoreError
from mealgrid.utilities.constants import MEALS_KEY

logger = logging.getLogger(__name__)


class LocalMealStore:
    """Meal store for the signed-out mode: one JSON document {"meals": [...]} on disk."""

    def __init__(self, path=None):
        self.path = path or paths.LOCAL_STORE_FILE

    def _load(self) -> List[Meal]:
        raw = load_json(self.path, {}).get(MEALS_KEY, [])
        if not isinstance(raw, list):
            return []
        meals = []
        for d in raw:
            if not isinstance(d, dict):
                continue
            try:
                meals.append(Meal.from_dict(d))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping unreadable meal %r in %s: %s", d.get("id"), self.path, e)
        return meals

    def _save(self, meals: List[Meal]) -> None:
        try:
            atomic_write(self.path, {MEALS_KEY: [m.to_dict() for m in meals]})
        except OSError as e:
            logger.warning("Could not write local meals to %s: %s", self.path, e)
            raise MealStoreError("Failed to save meals locally") from e

    def list(self) -> List[Meal]:
        with FILE_LOCK:
            return self._load()

    def create(self, request: MealRequest) -> Meal:
        meal = Meal.create(str(uuid4()), request)
        with FILE_LOCK:
            meals = self._load()
            meals.append(meal)
            self._save(meals)
        return meal

    def update(self, meal: Meal) -> Meal:
        with FILE_LOCK:
            meals = self._load()
            for i, m in enumerate(meals):
                if m.id == meal.id:
                    updated = m.apply(meal.to_request())
                    meals[i] = updated
                    self._save(meals)
                    return updated
        raise MealStoreError("Meal not found")

    def delete(self, meal_id: str) -> bool:
        with FILE_LOCK:
            meals = self._load()
            kept = [m for m in meals if m.id != meal_id]
            if len(kept) == len(meals):
                return False
            self._save(kept)
        return True

    def clear(self) -> bool:
        with FILE_LOCK:
            self._save([])
        return True


__all__ = ["LocalMealStore"]
