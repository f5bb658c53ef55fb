import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from mealgrid.api.auth import get_current_user_id, require_plan_role
from mealgrid.events.event_helpers import publish_plan_shared, publish_plan_joined
from mealgrid.infra.Meal_Repository import MealRepository
from mealgrid.infra.MealPlan_Repository import MealPlanRepository, MealPlanNotFoundError, ShareLinkNotFoundError
from mealgrid.infra.User_Repository import UserRepository, UserNotFoundError
from mealgrid.logic.sharing.access import can_read, can_write, is_owner
from mealgrid.logic.sharing.invites import JoinRejected, check_join, link_expiry, new_invite_code
from mealgrid.utilities.validators import JoinInput, MealPlanInput, ShareInput, ShareLinkInput

router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])
logger = logging.getLogger(__name__)


def _with_role(plan, role):
    data = plan.to_dict()
    data["role"] = role
    return data


# -------------------- Plans --------------------
@router.get("")
def list_meal_plans(user_id: str = Depends(get_current_user_id)):
    return [_with_role(p, role) for p, role in MealPlanRepository().list_for_user(user_id)]


@router.post("", status_code=201)
def create_meal_plan(body: MealPlanInput, user_id: str = Depends(get_current_user_id)):
    plan = MealPlanRepository().create(body.name, body.description, user_id)
    logger.info("Meal plan %s created by %s", plan.id, user_id)
    return _with_role(plan, "owner")


@router.get("/{plan_id}")
def get_meal_plan(plan_id: str, user_id: str = Depends(get_current_user_id)):
    plan, role = require_plan_role(MealPlanRepository(), user_id, plan_id, can_read)
    return _with_role(plan, role)


@router.put("/{plan_id}")
def update_meal_plan(plan_id: str, body: MealPlanInput, user_id: str = Depends(get_current_user_id)):
    plans = MealPlanRepository()
    _, role = require_plan_role(plans, user_id, plan_id, can_write)
    plan = plans.update(plan_id, body.name, body.description)
    return _with_role(plan, role)


@router.delete("/{plan_id}", status_code=204)
def delete_meal_plan(plan_id: str, user_id: str = Depends(get_current_user_id)):
    plans = MealPlanRepository()
    require_plan_role(plans, user_id, plan_id, is_owner, "Only the owner can delete a meal plan")
    removed = MealRepository().delete_for_plan(plan_id)
    try:
        plans.delete(plan_id)
    except MealPlanNotFoundError:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    logger.info("Meal plan %s deleted by %s (%d meals removed)", plan_id, user_id, removed)
    return Response(status_code=204)


# -------------------- Sharing --------------------
@router.post("/share")
def share_meal_plan(body: ShareInput, user_id: str = Depends(get_current_user_id)):
    plans = MealPlanRepository()
    require_plan_role(plans, user_id, body.meal_plan_id, is_owner, "Only the owner can share a meal plan")
    try:
        target = UserRepository().get_by_email(body.email)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    if target.id == user_id:
        raise HTTPException(status_code=400, detail="Cannot share with yourself")
    plans.grant(target.id, body.meal_plan_id, body.role)
    publish_plan_shared(body.meal_plan_id, user_id, target.email, body.role)
    return {"message": "Meal plan shared successfully"}


@router.post("/generate-link")
def generate_share_link(body: ShareLinkInput, user_id: str = Depends(get_current_user_id)):
    plans = MealPlanRepository()
    require_plan_role(plans, user_id, body.meal_plan_id, is_owner, "Only the owner can create share links")
    code = new_invite_code(plans.link_codes())
    link = plans.add_link(code, body.meal_plan_id, user_id, body.role, link_expiry(body.expires_in))
    data = link.to_dict()
    return {"code": link.code, "role": link.role, "expiresAt": data["expiresAt"]}


@router.post("/join")
def join_meal_plan(body: JoinInput, user_id: str = Depends(get_current_user_id)):
    plans = MealPlanRepository()
    try:
        link = plans.get_link(body.code)
        plan = plans.get(link.meal_plan_id)
    except (ShareLinkNotFoundError, MealPlanNotFoundError):
        raise HTTPException(status_code=404, detail="Invalid share code")
    try:
        role = check_join(link, plan.created_by, user_id, plans.get_role(user_id, plan.id))
    except JoinRejected as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    plans.grant(user_id, plan.id, role)
    publish_plan_joined(plan.id, user_id, role)
    return {"message": "Successfully joined meal plan", "mealPlan": plan.to_dict(), "role": role}
