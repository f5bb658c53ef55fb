"""Meal plan sharing entities: plan, per-user access record, invite link."""
from datetime import datetime
from typing import Optional

from mealgrid.domain.Meal import utcnow, parse_timestamp, format_timestamp


class MealPlan:
    def __init__(self, id: str, name: str, created_by: str, description: str = "",
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
        self.id = id
        self.name = name
        self.description = description or ""
        self.created_by = created_by
        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or self.created_at

    def rename(self, name: str, description: str = ""):
        self.name = name
        self.description = description or ""
        self.updated_at = utcnow()
        return self

    @staticmethod
    def from_dict(data) -> "MealPlan":
        d = dict(data) if isinstance(data, dict) else {}
        return MealPlan(
            id=d.get("id", ""),
            name=d.get("name", ""),
            description=d.get("description", ""),
            created_by=d.get("createdBy", ""),
            created_at=parse_timestamp(d.get("createdAt")),
            updated_at=parse_timestamp(d.get("updatedAt")),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
            "createdBy": self.created_by,
        }

    def __repr__(self) -> str:
        return f"MealPlan({self.id!r}, {self.name!r})"


class MealPlanAccess:
    def __init__(self, id: str, user_id: str, meal_plan_id: str, role: str):
        self.id = id
        self.user_id = user_id
        self.meal_plan_id = meal_plan_id
        self.role = role

    @staticmethod
    def from_dict(data) -> "MealPlanAccess":
        d = dict(data) if isinstance(data, dict) else {}
        return MealPlanAccess(d.get("id", ""), d.get("userId", ""), d.get("mealPlanId", ""), d.get("role", ""))

    def to_dict(self):
        return {"id": self.id, "userId": self.user_id, "mealPlanId": self.meal_plan_id, "role": self.role}


class ShareLink:
    """Invite code granting `role` on a plan until `expires_at`."""

    def __init__(self, code: str, meal_plan_id: str, created_by: str, role: str,
                 expires_at: datetime, created_at: Optional[datetime] = None):
        self.code = code
        self.meal_plan_id = meal_plan_id
        self.created_by = created_by
        self.role = role
        self.expires_at = expires_at
        self.created_at = created_at or utcnow()

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < (now or utcnow())

    @staticmethod
    def from_dict(data) -> "ShareLink":
        d = dict(data) if isinstance(data, dict) else {}
        return ShareLink(
            code=d.get("id", d.get("code", "")),
            meal_plan_id=d.get("mealPlanId", ""),
            created_by=d.get("createdBy", ""),
            role=d.get("role", ""),
            expires_at=parse_timestamp(d.get("expiresAt")) or utcnow(),
            created_at=parse_timestamp(d.get("createdAt")),
        )

    def to_dict(self):
        return {
            "id": self.code,
            "mealPlanId": self.meal_plan_id,
            "createdBy": self.created_by,
            "role": self.role,
            "expiresAt": format_timestamp(self.expires_at),
            "createdAt": format_timestamp(self.created_at),
        }
