"""Google sign-in: consent URL, authorization-code exchange and ID-token verification."""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
import jwt

from mealgrid.utilities.config import (
    GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, OAUTH_REDIRECT_URL, HTTP_TIMEOUT
)
from mealgrid.utilities.constants import (
    GOOGLE_AUTH_URL, GOOGLE_TOKEN_URL, GOOGLE_USERINFO_URL, GOOGLE_SCOPES, GOOGLE_CERTS_URL, GOOGLE_ISSUERS
)

logger = logging.getLogger(__name__)


class GoogleAuthError(Exception):
    pass


def authorization_url(state: str) -> str:
    query = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": OAUTH_REDIRECT_URL,
        "response_type": "code",
        "scope": " ".join(GOOGLE_SCOPES),
        "state": state,
        "access_type": "offline",
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(query)}"


def _identity(info: Dict[str, Any]) -> Dict[str, str]:
    google_id = info.get("sub") or info.get("id")
    email = info.get("email")
    if not google_id or not email:
        raise GoogleAuthError("Invalid user info")
    return {"google_id": str(google_id), "email": str(email), "name": str(info.get("name") or email)}


def exchange_code(code: str, client: Optional[httpx.Client] = None) -> Dict[str, str]:
    """Trade an authorization code for the user's identity (google_id, email, name)."""
    own_client = client is None
    client = client or httpx.Client(timeout=HTTP_TIMEOUT)
    try:
        token_resp = client.post(GOOGLE_TOKEN_URL, data={
            "code": code,
            "client_id": GOOGLE_CLIENT_ID,
            "client_secret": GOOGLE_CLIENT_SECRET,
            "redirect_uri": OAUTH_REDIRECT_URL,
            "grant_type": "authorization_code",
        })
        if token_resp.status_code != 200:
            logger.warning("Google token exchange failed: %s %s", token_resp.status_code, token_resp.text)
            raise GoogleAuthError("Failed to exchange code for token")
        access_token = token_resp.json().get("access_token")
        info_resp = client.get(GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
        if info_resp.status_code != 200:
            raise GoogleAuthError("Failed to get user info")
        return _identity(info_resp.json())
    except httpx.HTTPError as e:
        raise GoogleAuthError(f"Google request failed: {e}") from e
    finally:
        if own_client:
            client.close()


_jwks_client: Optional[jwt.PyJWKClient] = None


def _signing_key(credential: str):
    """Google's public key for the credential's `kid`; the key set is cached by the client."""
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = jwt.PyJWKClient(GOOGLE_CERTS_URL, timeout=HTTP_TIMEOUT)
    return _jwks_client.get_signing_key_from_jwt(credential).key


def verify_id_token(credential: str) -> Dict[str, str]:
    """Identity from a Google ID token sent by the browser sign-in button.

    The token must be RS256-signed by Google, issued by Google and addressed
    to this app's client id.
    """
    try:
        header = jwt.get_unverified_header(credential or "")
        if not header.get("kid"):
            raise GoogleAuthError("Invalid ID token")
        claims = jwt.decode(
            credential,
            _signing_key(credential),
            algorithms=["RS256"],
            audience=GOOGLE_CLIENT_ID,
            issuer=list(GOOGLE_ISSUERS),
        )
    except jwt.ExpiredSignatureError as e:
        raise GoogleAuthError("ID token has expired") from e
    except jwt.PyJWTError as e:
        logger.warning("Google ID token rejected: %s", e)
        raise GoogleAuthError("Invalid ID token") from e
    try:
        return _identity(claims)
    except GoogleAuthError as e:
        raise GoogleAuthError("Invalid token payload") from e


__all__ = ["GoogleAuthError", "authorization_url", "exchange_code", "verify_id_token"]
