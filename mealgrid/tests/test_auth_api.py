import base64
import json
import unittest
from datetime import timedelta
from unittest.mock import patch
from urllib.parse import urlparse, parse_qs

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from mealgrid.api.api_run import app
from mealgrid.domain.Meal import utcnow
from mealgrid.infra import google_oauth
from mealgrid.infra.google_oauth import GoogleAuthError, verify_id_token
from mealgrid.infra.tokens import InvalidTokenError, issue_token, verify_token
from mealgrid.utilities.constants import OAUTH_STATE_COOKIE

CLIENT_ID = "client-123.apps.googleusercontent.com"
GOOGLE_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)
OTHER_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _id_token(claims, key=GOOGLE_KEY, **overrides):
    payload = {
        "iss": "https://accounts.google.com",
        "aud": CLIENT_ID,
        "exp": utcnow() + timedelta(hours=1),
        **claims,
        **overrides,
    }
    return jwt.encode(payload, key, algorithm="RS256", headers={"kid": "key-1"})


def _unsigned_token(claims):
    def seg(d):
        return base64.urlsafe_b64encode(json.dumps(d).encode()).decode().rstrip("=")
    return f"{seg({'alg': 'none', 'kid': 'key-1'})}.{seg(claims)}.notasignature"


def _google_keys(test):
    """Serve GOOGLE_KEY as Google's signing key and CLIENT_ID as this app's client id."""
    for p in (patch.object(google_oauth, "_signing_key", return_value=GOOGLE_KEY.public_key()),
              patch.object(google_oauth, "GOOGLE_CLIENT_ID", CLIENT_ID)):
        p.start()
        test.addCleanup(p.stop)


IDENTITY = {"google_id": "g-42", "email": "ana@example.com", "name": "Ana"}


class TestTokens(unittest.TestCase):

    def setUp(self):
        _google_keys(self)

    def test_round_trip(self):
        self.assertEqual(verify_token(issue_token("user-1")), "user-1")

    def test_expired_token_rejected(self):
        token = issue_token("user-1", now=utcnow() - timedelta(days=30))
        with self.assertRaises(InvalidTokenError):
            verify_token(token)

    def test_garbage_rejected(self):
        with self.assertRaises(InvalidTokenError):
            verify_token("a.b.c")

    def test_verify_id_token(self):
        identity = verify_id_token(_id_token({"sub": "g-1", "email": "x@example.com", "name": "X"}))
        self.assertEqual(identity, {"google_id": "g-1", "email": "x@example.com", "name": "X"})
        with self.assertRaises(GoogleAuthError):
            verify_id_token("only-one-part")
        with self.assertRaises(GoogleAuthError):
            verify_id_token(_id_token({"sub": "g-1"}))

    def test_id_token_claims_are_checked(self):
        claims = {"sub": "g-1", "email": "x@example.com"}
        for token in (
            _id_token(claims, key=OTHER_KEY),
            _id_token(claims, aud="someone-else"),
            _id_token(claims, iss="https://evil.example.com"),
            _unsigned_token(claims),
        ):
            with self.assertRaises(GoogleAuthError) as ctx:
                verify_id_token(token)
            self.assertEqual(str(ctx.exception), "Invalid ID token")

        expired = _id_token(claims, exp=utcnow() - timedelta(minutes=5))
        with self.assertRaises(GoogleAuthError) as ctx:
            verify_id_token(expired)
        self.assertEqual(str(ctx.exception), "ID token has expired")

    def test_bare_issuer_accepted(self):
        token = _id_token({"sub": "g-2", "email": "y@example.com"}, iss="accounts.google.com")
        self.assertEqual(verify_id_token(token)["google_id"], "g-2")


class TestGoogleAuthAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.client.cookies.clear()
        _google_keys(self)

    def test_post_credential_creates_user_once(self):
        credential = _id_token({"sub": "g-7", "email": "bo@example.com", "name": "Bo"})
        first = self.client.post("/auth/google/callback", json={"credential": credential})
        self.assertEqual(first.status_code, 200, first.text)
        token = first.json()["token"]

        me = self.client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["email"], "bo@example.com")

        second = self.client.post("/auth/google/callback", json={"credential": credential})
        self.assertEqual(verify_token(second.json()["token"]), verify_token(token))

    def test_post_bad_credential(self):
        resp = self.client.post("/auth/google/callback", json={"credential": "nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid ID token")

    def test_post_forged_credential(self):
        claims = {"sub": "victim-google-id", "email": "victim@example.com"}
        for credential in (_unsigned_token(claims), _id_token(claims, key=OTHER_KEY)):
            resp = self.client.post("/auth/google/callback", json={"credential": credential})
            self.assertEqual(resp.status_code, 401)
            self.assertNotIn("token", resp.json())

    def test_login_redirects_with_state_cookie(self):
        resp = self.client.get("/auth/google/login", follow_redirects=False)
        self.assertEqual(resp.status_code, 307)
        location = urlparse(resp.headers["location"])
        query = parse_qs(location.query)
        self.assertEqual(location.netloc, "accounts.google.com")
        self.assertEqual(query["response_type"], ["code"])
        self.assertEqual(query["state"][0], resp.cookies.get(OAUTH_STATE_COOKIE))

    def test_callback_rejects_state_mismatch(self):
        self.client.get("/auth/google/login", follow_redirects=False)
        resp = self.client.get("/auth/google/callback", params={"code": "abc", "state": "forged"},
                               follow_redirects=False)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Invalid OAuth state")

    def test_callback_redirects_to_frontend_with_token(self):
        login = self.client.get("/auth/google/login", follow_redirects=False)
        state = login.cookies.get(OAUTH_STATE_COOKIE)
        with patch("mealgrid.api.routes.auth_google.exchange_code", return_value=IDENTITY) as exchange:
            resp = self.client.get("/auth/google/callback", params={"code": "abc", "state": state},
                                   follow_redirects=False)
        exchange.assert_called_once_with("abc")
        self.assertEqual(resp.status_code, 307)
        token = parse_qs(urlparse(resp.headers["location"]).query)["token"][0]
        me = self.client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(me.json()["name"], "Ana")

    def test_callback_exchange_failure(self):
        login = self.client.get("/auth/google/login", follow_redirects=False)
        state = login.cookies.get(OAUTH_STATE_COOKIE)
        with patch("mealgrid.api.routes.auth_google.exchange_code",
                   side_effect=GoogleAuthError("Failed to exchange code for token")):
            resp = self.client.get("/auth/google/callback", params={"code": "bad", "state": state},
                                   follow_redirects=False)
        self.assertEqual(resp.status_code, 401)

    def test_me_requires_token(self):
        self.assertEqual(self.client.get("/api/me").status_code, 401)
