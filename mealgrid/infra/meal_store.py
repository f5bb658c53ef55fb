"""Meal store contract consumed by the week grid.

Two implementations exist: infra.Local_Meal_Store (JSON document standing in for
browser local storage) and infra.Remote_Meal_Store (REST API over httpx).
"""
from __future__ import annotations
from typing import List, Protocol

from mealgrid.domain.Meal import Meal, MealRequest


class MealStoreError(Exception):
    """A store operation failed; the message is meant for the user."""


class MealStore(Protocol):
    def list(self) -> List[Meal]: ...

    def create(self, request: MealRequest) -> Meal: ...

    def update(self, meal: Meal) -> Meal: ...

    def delete(self, meal_id: str) -> bool: ...

    def clear(self) -> bool: ...


__all__ = ["MealStore", "MealStoreError"]
