# =============================================================================
# tests/test_auth.py - PIN Login & Session Token Tests
# =============================================================================

from unittest.mock import patch

import pytest
from jose import jwt

from app.auth.security import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    hash_pin,
    validate_pin_format,
)
from app.config import settings
from lib.supabase_client import SupabaseClient

PIN_1234_HASH = "03ac674216f3e15c761ee1a5e255f067953623c8b388b4459e13f978d7c846f4"


# =============================================================================
# Security Helpers
# =============================================================================

class TestPinHelpers:

    def test_hash_pin_is_sha256_hex(self):
        assert hash_pin("1234") == PIN_1234_HASH

    @pytest.mark.parametrize("pin", ["1234", "0000", "9876"])
    def test_valid_pins(self, pin):
        assert validate_pin_format(pin) is True

    @pytest.mark.parametrize("pin", [1234, "123", "12345", "12a4", "", None, "١٢٣٤"])
    def test_invalid_pins(self, pin):
        assert validate_pin_format(pin) is False


class TestSessionTokens:

    def test_round_trip(self, adult_user):
        payload = decode_access_token(create_access_token(adult_user))
        assert payload["sub"] == adult_user["id"]
        assert payload["name"] == "Max"
        assert payload["role"] == "parent"
        assert payload["exp"] > payload["iat"]

    def test_wrong_key_is_rejected(self, adult_user):
        token = jwt.encode({"sub": "x"}, "some-other-secret-key", algorithm=ALGORITHM)
        with pytest.raises(Exception):
            decode_access_token(token)


# =============================================================================
# Routes
# =============================================================================

class TestVerifyPin:

    def test_correct_pin_returns_token(self, client, adult_user):
        with patch.object(SupabaseClient, "fetch_user_by_pin_hash", return_value=adult_user) as lookup:
            response = client.post("/api/v1/auth/verify-pin", json={"pin": "1234"})

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == adult_user["id"]
        assert body["name"] == "Max"
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        assert decode_access_token(body["access_token"])["sub"] == adult_user["id"]
        lookup.assert_called_once_with(PIN_1234_HASH)

    @pytest.mark.parametrize("pin", ["12", "abcd", 1234, None])
    def test_bad_format_is_400(self, client, pin):
        response = client.post("/api/v1/auth/verify-pin", json={"pin": pin})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PIN_FORMAT"

    def test_unknown_pin_is_401(self, client):
        with patch.object(SupabaseClient, "fetch_user_by_pin_hash", return_value=None):
            response = client.post("/api/v1/auth/verify-pin", json={"pin": "0000"})
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_PIN"


class TestUserLookup:

    def test_requires_id(self, client):
        response = client.get("/api/v1/auth/user")
        assert response.status_code == 400

    def test_unknown_user(self, client):
        with patch.object(SupabaseClient, "fetch_user", return_value=None):
            response = client.get("/api/v1/auth/user", params={"id": "missing"})
        assert response.status_code == 404

    def test_malformed_id_is_404(self, client, fake_db):
        fake_db.results["users"] = [RuntimeError("22P02 invalid input syntax for type uuid")]
        response = client.get("/api/v1/auth/user", params={"id": "abc"})
        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"

    def test_known_user(self, client, kid_user):
        with patch.object(SupabaseClient, "fetch_user", return_value=kid_user):
            response = client.get("/api/v1/auth/user", params={"id": kid_user["id"]})
        assert response.json() == kid_user


class TestTokenRoutes:

    def test_me_requires_token(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_me_with_token(self, client, adult_headers, adult_user):
        response = client.get("/api/v1/auth/me", headers=adult_headers)
        assert response.status_code == 200
        assert response.json()["name"] == adult_user["name"]

    def test_garbage_token(self, client):
        response = client.get("/api/v1/auth/verify", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_verify(self, client, kid_headers, kid_user):
        response = client.get("/api/v1/auth/verify", headers=kid_headers)
        assert response.json() == {"valid": True, "user_id": kid_user["id"], "role": "kid"}


class TestAdminGate:

    def test_admin_requires_token(self, client):
        assert client.get("/api/v1/admin/users").status_code == 401

    def test_kids_are_forbidden(self, client, kid_headers):
        assert client.get("/api/v1/admin/users", headers=kid_headers).status_code == 403

    def test_adults_are_allowed(self, client, adult_headers, fake_db):
        fake_db.results["users"] = [[{"id": "u1", "name": "Max", "role": "parent"}]]
        response = client.get("/api/v1/admin/users", headers=adult_headers)
        assert response.status_code == 200
        assert response.json()["users"][0]["name"] == "Max"
