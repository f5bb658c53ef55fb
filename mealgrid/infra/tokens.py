"""Session tokens: HS256 JWTs whose subject is the user id."""
from datetime import datetime, timedelta
from typing import Optional

import jwt
from jwt import ExpiredSignatureError, PyJWTError

from mealgrid.domain.Meal import utcnow
from mealgrid.utilities.config import JWT_SECRET, JWT_ALGORITHM, JWT_TTL_HOURS


class InvalidTokenError(Exception):
    pass


def issue_token(user_id: str, now: Optional[datetime] = None) -> str:
    issued = now or utcnow()
    claims = {
        "sub": user_id,
        "iat": issued,
        "exp": issued + timedelta(hours=JWT_TTL_HOURS),
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> str:
    """Return the user id carried by a valid token."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired") from e
    except PyJWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from e
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidTokenError("Token has no subject")
    return user_id


__all__ = ["InvalidTokenError", "issue_token", "verify_token"]
