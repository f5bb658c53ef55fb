"""Bearer token authentication and plan access checks for API endpoints."""
import logging
from typing import Callable, Optional, Tuple

from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mealgrid.domain.MealPlan import MealPlan
from mealgrid.infra.MealPlan_Repository import MealPlanRepository, MealPlanNotFoundError
from mealgrid.infra.tokens import InvalidTokenError, verify_token

logger = logging.getLogger(__name__)

# Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> str:
    """Resolve the caller's user id from the Authorization header.

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid/expired.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return verify_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def require_plan_role(plans: MealPlanRepository, user_id: str, plan_id: str,
                      allowed: Callable[[Optional[str]], bool],
                      denied: str = "Access denied") -> Tuple[MealPlan, str]:
    """Load a plan and the caller's role on it; 404 for unknown plans, 403 when `allowed` says no."""
    try:
        plan = plans.get(plan_id)
    except MealPlanNotFoundError:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    role = plans.get_role(user_id, plan_id)
    if not allowed(role):
        raise HTTPException(status_code=403, detail=denied)
    return plan, role
