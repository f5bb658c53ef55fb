import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from mealgrid.infra.google_oauth import GoogleAuthError, authorization_url, exchange_code, verify_id_token
from mealgrid.infra.tokens import issue_token
from mealgrid.infra.User_Repository import UserRepository
from mealgrid.utilities.config import FRONTEND_URL
from mealgrid.utilities.constants import OAUTH_STATE_COOKIE, OAUTH_STATE_MAX_AGE
from mealgrid.utilities.validators import GoogleCredentialInput

router = APIRouter(prefix="/auth/google", tags=["auth"])
logger = logging.getLogger(__name__)


def _sign_in(identity) -> str:
    user = UserRepository().get_or_create(identity["google_id"], identity["email"], identity["name"])
    logger.info("User %s signed in", user.id)
    return issue_token(user.id)


# === Redirect flow ===
@router.get("/login")
def google_login():
    state = secrets.token_urlsafe(16)
    resp = RedirectResponse(authorization_url(state))
    resp.set_cookie(OAUTH_STATE_COOKIE, state, max_age=OAUTH_STATE_MAX_AGE, httponly=True, samesite="lax")
    return resp


@router.get("/callback")
def google_callback(request: Request,
                    code: Optional[str] = Query(default=None),
                    state: Optional[str] = Query(default=None)):
    expected = request.cookies.get(OAUTH_STATE_COOKIE)
    if not state or not expected or not secrets.compare_digest(state, expected):
        logger.warning("OAuth callback with mismatched state")
        raise HTTPException(status_code=400, detail="Invalid OAuth state")
    if not code:
        raise HTTPException(status_code=400, detail="Missing code parameter")
    try:
        identity = exchange_code(code)
    except GoogleAuthError as e:
        logger.warning("Google code exchange failed: %s", e)
        raise HTTPException(status_code=401, detail=str(e))
    token = _sign_in(identity)
    resp = RedirectResponse(f"{FRONTEND_URL}?{urlencode({'token': token})}")
    resp.delete_cookie(OAUTH_STATE_COOKIE)
    return resp


# === Browser sign-in button (ID token credential) ===
@router.post("/callback")
def google_credential(body: GoogleCredentialInput):
    try:
        identity = verify_id_token(body.credential)
    except GoogleAuthError as e:
        logger.warning("Rejected Google credential: %s", e)
        raise HTTPException(status_code=401, detail=str(e))
    return {"token": _sign_in(identity)}
