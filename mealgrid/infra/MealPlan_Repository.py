from datetime import datetime
from typing import List, Optional, Tuple
from uuid import uuid4

from mealgrid.domain.MealPlan import MealPlan, MealPlanAccess, ShareLink
from mealgrid.infra import paths
from mealgrid.infra.json_store import FILE_LOCK, load_json, atomic_write
from mealgrid.utilities.constants import ROLE_OWNER


class MealPlanNotFoundError(LookupError):
    pass


class ShareLinkNotFoundError(LookupError):
    pass


class MealPlanRepository:
    """Meal plans together with their access records and invite links.

    Three JSON lists back it: plans, access records (one per user and plan)
    and share links keyed by invite code.
    """

    def __init__(self, plans_path=None, access_path=None, links_path=None):
        self.plans_path = plans_path or paths.MEAL_PLANS_FILE
        self.access_path = access_path or paths.PLAN_ACCESS_FILE
        self.links_path = links_path or paths.SHARE_LINKS_FILE

    # --- plans ---
    def _plans(self) -> List[MealPlan]:
        return [MealPlan.from_dict(d) for d in load_json(self.plans_path, [])]

    def _save_plans(self, plans: List[MealPlan]) -> None:
        atomic_write(self.plans_path, [p.to_dict() for p in plans])

    def create(self, name: str, description: str, owner_id: str) -> MealPlan:
        """New plan; its creator gets an owner access record."""
        plan = MealPlan(id=str(uuid4()), name=name, description=description, created_by=owner_id)
        with FILE_LOCK:
            plans = self._plans()
            plans.append(plan)
            self._save_plans(plans)
            self._put_access(owner_id, plan.id, ROLE_OWNER)
        return plan

    def get(self, plan_id: str) -> MealPlan:
        with FILE_LOCK:
            for p in self._plans():
                if p.id == plan_id:
                    return p
        raise MealPlanNotFoundError(plan_id)

    def update(self, plan_id: str, name: str, description: str = "") -> MealPlan:
        with FILE_LOCK:
            plans = self._plans()
            for p in plans:
                if p.id == plan_id:
                    p.rename(name, description)
                    self._save_plans(plans)
                    return p
        raise MealPlanNotFoundError(plan_id)

    def delete(self, plan_id: str) -> None:
        """Remove the plan with its access records and invite links (meals are handled by the caller)."""
        with FILE_LOCK:
            plans = self._plans()
            kept = [p for p in plans if p.id != plan_id]
            if len(kept) == len(plans):
                raise MealPlanNotFoundError(plan_id)
            self._save_plans(kept)
            atomic_write(self.access_path, [a.to_dict() for a in self._access() if a.meal_plan_id != plan_id])
            atomic_write(self.links_path, [l.to_dict() for l in self._links() if l.meal_plan_id != plan_id])

    def list_for_user(self, user_id: str) -> List[Tuple[MealPlan, str]]:
        """Plans the user can open, each with the user's role, oldest first."""
        with FILE_LOCK:
            roles = {a.meal_plan_id: a.role for a in self._access() if a.user_id == user_id}
            plans = [p for p in self._plans() if p.id in roles]
        plans.sort(key=lambda p: p.created_at)
        return [(p, roles[p.id]) for p in plans]

    # --- access ---
    def _access(self) -> List[MealPlanAccess]:
        return [MealPlanAccess.from_dict(d) for d in load_json(self.access_path, [])]

    def _put_access(self, user_id: str, plan_id: str, role: str) -> MealPlanAccess:
        records = self._access()
        for a in records:
            if a.user_id == user_id and a.meal_plan_id == plan_id:
                a.role = role
                break
        else:
            a = MealPlanAccess(id=str(uuid4()), user_id=user_id, meal_plan_id=plan_id, role=role)
            records.append(a)
        atomic_write(self.access_path, [r.to_dict() for r in records])
        return a

    def get_role(self, user_id: str, plan_id: str) -> Optional[str]:
        with FILE_LOCK:
            for a in self._access():
                if a.user_id == user_id and a.meal_plan_id == plan_id:
                    return a.role
        return None

    def grant(self, user_id: str, plan_id: str, role: str) -> MealPlanAccess:
        """Create the user's access record or change the role of an existing one."""
        with FILE_LOCK:
            return self._put_access(user_id, plan_id, role)

    # --- share links ---
    def _links(self) -> List[ShareLink]:
        return [ShareLink.from_dict(d) for d in load_json(self.links_path, [])]

    def add_link(self, code: str, plan_id: str, created_by: str, role: str, expires_at: datetime) -> ShareLink:
        link = ShareLink(code=code, meal_plan_id=plan_id, created_by=created_by, role=role, expires_at=expires_at)
        with FILE_LOCK:
            links = self._links()
            links.append(link)
            atomic_write(self.links_path, [l.to_dict() for l in links])
        return link

    def get_link(self, code: str) -> ShareLink:
        with FILE_LOCK:
            for l in self._links():
                if l.code == code:
                    return l
        raise ShareLinkNotFoundError(code)

    def link_codes(self) -> List[str]:
        with FILE_LOCK:
            return [l.code for l in self._links()]


__all__ = ["MealPlanRepository", "MealPlanNotFoundError", "ShareLinkNotFoundError"]
