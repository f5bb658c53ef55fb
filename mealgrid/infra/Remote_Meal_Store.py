import logging
from typing import List, Optional

import httpx

from mealgrid.domain.Meal import Meal, MealRequest
from mealgrid.infra.meal_store import MealStoreError
from mealgrid.infra.session import Session
from mealgrid.utilities.config import HTTP_TIMEOUT

logger = logging.getLogger(__name__)


def _detail(resp: httpx.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return fallback


class RemoteMealStore:
    """Meal store backed by the REST API, scoped to one meal plan.

    Any httpx.Client can be supplied (a test client included); otherwise one is
    built from the session's base URL. Auth headers come from the session on
    every request, so logging in or out of the session takes effect at once.
    """

    def __init__(self, session: Session, meal_plan_id: str, client: Optional[httpx.Client] = None):
        self.session = session
        self.meal_plan_id = meal_plan_id
        self._client = client or httpx.Client(base_url=session.base_url, timeout=HTTP_TIMEOUT)

    def _request(self, method: str, url: str, failure: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, url, headers=self.session.headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise MealStoreError(failure) from e

    def list(self) -> List[Meal]:
        resp = self._request("GET", "/api/meals", "Failed to load meals",
                             params={"mealPlanId": self.meal_plan_id})
        if resp.status_code != 200:
            raise MealStoreError(_detail(resp, "Failed to load meals"))
        try:
            body = resp.json()
        except ValueError as e:
            raise MealStoreError("Failed to load meals") from e
        if not isinstance(body, list):
            logger.warning("Unexpected meal list body for plan %s", self.meal_plan_id)
            raise MealStoreError("Failed to load meals")
        return [Meal.from_dict(d) for d in body]

    def create(self, request: MealRequest) -> Meal:
        resp = self._request("POST", "/api/meals", "Failed to add meal",
                             json={"meal": request.to_dict(), "mealPlanId": self.meal_plan_id})
        if resp.status_code != 201:
            raise MealStoreError(_detail(resp, "Failed to add meal"))
        return Meal.from_dict(resp.json())

    def update(self, meal: Meal) -> Meal:
        resp = self._request("PUT", f"/api/meals/{meal.id}", "Failed to update meal",
                             json=meal.to_request().to_dict())
        if resp.status_code != 200:
            raise MealStoreError(_detail(resp, "Failed to update meal"))
        return Meal.from_dict(resp.json())

    def delete(self, meal_id: str) -> bool:
        resp = self._request("DELETE", f"/api/meals/{meal_id}", "Failed to delete meal")
        if resp.status_code == 204:
            return True
        if resp.status_code == 404:
            return False
        raise MealStoreError(_detail(resp, "Failed to delete meal"))

    def clear(self) -> bool:
        resp = self._request("DELETE", "/api/meals", "Failed to clear meals",
                             params={"mealPlanId": self.meal_plan_id})
        if resp.status_code != 204:
            raise MealStoreError(_detail(resp, "Failed to clear meals"))
        return True

    def close(self) -> None:
        self._client.close()


__all__ = ["RemoteMealStore"]
