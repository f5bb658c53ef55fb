import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from mealgrid.api.auth import get_current_user_id, require_plan_role
from mealgrid.events.event_helpers import publish_meal_saved, publish_meal_deleted, publish_meals_cleared
from mealgrid.infra.Meal_Repository import MealRepository, MealNotFoundError
from mealgrid.infra.MealPlan_Repository import MealPlanRepository
from mealgrid.logic.sharing.access import can_read, can_write
from mealgrid.utilities.validators import CreateMealInput, MealRequestInput

router = APIRouter(prefix="/api/meals", tags=["meals"])
logger = logging.getLogger(__name__)


def _load_meal(repo: MealRepository, meal_id: str):
    try:
        return repo.get(meal_id)
    except MealNotFoundError:
        raise HTTPException(status_code=404, detail="Meal not found")


# === Collection ===
@router.get("")
def list_meals(meal_plan_id: str = Query(..., alias="mealPlanId"),
               user_id: str = Depends(get_current_user_id)):
    require_plan_role(MealPlanRepository(), user_id, meal_plan_id, can_read)
    return [m.to_dict() for m in MealRepository().list_for_plan(meal_plan_id)]


@router.post("", status_code=201)
def create_meal(body: CreateMealInput, user_id: str = Depends(get_current_user_id)):
    require_plan_role(MealPlanRepository(), user_id, body.meal_plan_id, can_write)
    meal = MealRepository().create(body.meal.to_request(), body.meal_plan_id)
    publish_meal_saved(meal, user_id)
    return meal.to_dict()


@router.delete("", status_code=204)
def clear_meals(meal_plan_id: str = Query(..., alias="mealPlanId"),
                user_id: str = Depends(get_current_user_id)):
    """Clear week: remove every meal of the plan."""
    require_plan_role(MealPlanRepository(), user_id, meal_plan_id, can_write)
    removed = MealRepository().delete_for_plan(meal_plan_id)
    publish_meals_cleared(meal_plan_id, user_id, removed)
    return Response(status_code=204)


# === Single meal ===
@router.get("/{meal_id}")
def get_meal(meal_id: str, user_id: str = Depends(get_current_user_id)):
    meal = _load_meal(MealRepository(), meal_id)
    require_plan_role(MealPlanRepository(), user_id, meal.meal_plan_id, can_read)
    return meal.to_dict()


@router.put("/{meal_id}")
def update_meal(meal_id: str, body: MealRequestInput, user_id: str = Depends(get_current_user_id)):
    repo = MealRepository()
    previous = _load_meal(repo, meal_id)
    require_plan_role(MealPlanRepository(), user_id, previous.meal_plan_id, can_write)
    try:
        meal = repo.update(meal_id, body.to_request())
    except MealNotFoundError:
        raise HTTPException(status_code=404, detail="Meal not found")
    publish_meal_saved(meal, user_id, previous=previous)
    return meal.to_dict()


@router.delete("/{meal_id}", status_code=204)
def delete_meal(meal_id: str, user_id: str = Depends(get_current_user_id)):
    repo = MealRepository()
    meal = _load_meal(repo, meal_id)
    require_plan_role(MealPlanRepository(), user_id, meal.meal_plan_id, can_write)
    try:
        repo.delete(meal_id)
    except MealNotFoundError:
        raise HTTPException(status_code=404, detail="Meal not found")
    publish_meal_deleted(meal, user_id)
    return Response(status_code=204)
