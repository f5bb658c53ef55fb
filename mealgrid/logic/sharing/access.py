"""Role rules for shared meal plans.

owner   read, write meals, rename, delete, share, create invite links
editor  read, write meals, rename
viewer  read
"""
from typing import Optional

from mealgrid.utilities.constants import ROLES, ROLE_OWNER, WRITE_ROLES


def can_read(role: Optional[str]) -> bool:
    return role in ROLES


def can_write(role: Optional[str]) -> bool:
    return role in WRITE_ROLES


def is_owner(role: Optional[str]) -> bool:
    return role == ROLE_OWNER


__all__ = ["can_read", "can_write", "is_owner"]
