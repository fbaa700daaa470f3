from datetime import timedelta

import pytest
from fastapi import HTTPException

from mediahub.config import settings
from mediahub.utils.auth import hash_password, verify_admin_password, verify_password
from mediahub.utils.jwt_auth import authenticate_admin, create_access_token, verify_token


def test_hash_and_verify_password():
    hashed = hash_password("s3cret", rounds=4)

    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_malformed_hash_is_a_mismatch():
    assert not verify_password("s3cret", "not-a-bcrypt-hash")


def test_admin_password_requires_configured_hash(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", "")

    with pytest.raises(ValueError):
        verify_admin_password("anything")

    with pytest.raises(HTTPException) as exc_info:
        authenticate_admin("anything")
    assert exc_info.value.status_code == 500


def test_authenticate_admin(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", hash_password("s3cret", rounds=4))

    assert authenticate_admin("s3cret")["role"] == "admin"
    with pytest.raises(HTTPException) as exc_info:
        authenticate_admin("wrong")
    assert exc_info.value.status_code == 401


def test_token_round_trip():
    payload = verify_token(create_access_token({"sub": "cms_admin"}))

    assert payload["sub"] == "cms_admin"
    assert payload["type"] == "access"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "cms_admin"}, expires_delta=timedelta(seconds=-1))

    with pytest.raises(HTTPException) as exc_info:
        verify_token(token)
    assert exc_info.value.status_code == 401
