"""Invite codes: generation, expiry and the rules for joining a plan with one."""
import secrets
from datetime import datetime, timedelta
from typing import Iterable, Optional

from mealgrid.domain.Meal import utcnow
from mealgrid.domain.MealPlan import ShareLink
from mealgrid.utilities.constants import SHARE_LINK_DEFAULT_HOURS

CODE_BYTES = 6


class JoinRejected(Exception):
    """Joining is not allowed; status_code is the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def new_invite_code(taken: Iterable[str] = ()) -> str:
    """Short URL-safe code not present in `taken`."""
    used = set(taken)
    while True:
        code = secrets.token_urlsafe(CODE_BYTES)
        if code not in used:
            return code


def link_expiry(hours: int = SHARE_LINK_DEFAULT_HOURS, now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) + timedelta(hours=hours)


def check_join(link: ShareLink, owner_id: str, user_id: str, current_role: Optional[str],
               now: Optional[datetime] = None) -> str:
    """Validate a join attempt and return the role it grants.

    Expired links are rejected with 403; the plan's owner and users that
    already have a role are rejected with 400.
    """
    if link.is_expired(now):
        raise JoinRejected("Share link has expired", 403)
    if user_id == owner_id:
        raise JoinRejected("You already own this meal plan", 400)
    if current_role is not None:
        raise JoinRejected("You already have access to this meal plan", 400)
    return link.role


__all__ = ["JoinRejected", "new_invite_code", "link_expiry", "check_join"]
