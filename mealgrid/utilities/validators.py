"""
Input validation schemas using Pydantic for the REST API request bodies.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mealgrid.domain.Meal import MealRequest
from mealgrid.utilities.constants import (
    SHARE_LINK_DEFAULT_HOURS, SHARE_LINK_MAX_HOURS
)

DAY_PATTERN = r'^(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)$'
MEAL_TYPE_PATTERN = r'^(Breakfast|Lunch|Dinner)$'
SHARE_ROLE_PATTERN = r'^(editor|viewer)$'


class MealRequestInput(BaseModel):
    """Schema for meal create/update validation."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    chef: Optional[str] = Field(None, max_length=100)
    day: str = Field(..., pattern=DAY_PATTERN)
    meal_type: str = Field(..., alias='mealType', pattern=MEAL_TYPE_PATTERN)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Meal name must have visible characters."""
        if not v.strip():
            raise ValueError('Meal name cannot be empty')
        return v.strip()

    @field_validator('description', 'chef')
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    def to_request(self) -> MealRequest:
        return MealRequest(self.name, self.day, self.meal_type, self.description, self.chef)


class CreateMealInput(BaseModel):
    """Body of POST /api/meals."""
    model_config = ConfigDict(populate_by_name=True)

    meal: MealRequestInput
    meal_plan_id: str = Field(..., alias='mealPlanId', min_length=1)


class MealPlanInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field('', max_length=1000)

    @field_validator('name', 'description')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v:
            raise ValueError('Meal plan name cannot be empty')
        return v


class ShareInput(BaseModel):
    """Share a plan with an existing user by e-mail."""
    model_config = ConfigDict(populate_by_name=True)

    meal_plan_id: str = Field(..., alias='mealPlanId', min_length=1)
    email: str = Field(..., min_length=3, max_length=254)
    role: str = Field(..., pattern=SHARE_ROLE_PATTERN)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip().lower()
        if '@' not in v:
            raise ValueError('Invalid e-mail address')
        return v


class ShareLinkInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meal_plan_id: str = Field(..., alias='mealPlanId', min_length=1)
    role: str = Field(..., pattern=SHARE_ROLE_PATTERN)
    expires_in: int = Field(SHARE_LINK_DEFAULT_HOURS, alias='expiresIn', ge=1, le=SHARE_LINK_MAX_HOURS)


class JoinInput(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)

    @field_validator('code')
    @classmethod
    def strip_code(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Invite code cannot be empty')
        return v


class GoogleCredentialInput(BaseModel):
    credential: str = Field(..., min_length=1)
