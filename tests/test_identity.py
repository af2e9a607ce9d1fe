from datetime import timedelta

import pytest
from jose import jwt

from storefront.config import Settings
from storefront.errors import AuthenticationFailed
from storefront.identity import IdentityService


@pytest.fixture
def identity() -> IdentityService:
    return IdentityService(secret_key="unit-secret", expire_minutes=5)


def test_token_round_trip(identity):
    token = identity.issue_token(42)
    assert identity.verify_token(token) == 42


def test_token_carries_string_subject(identity):
    claims = jwt.get_unverified_claims(identity.issue_token(7))
    assert claims["sub"] == "7"
    assert "exp" in claims


def test_expired_token(identity):
    token = identity.issue_token(42, expires_delta=timedelta(minutes=-1))
    with pytest.raises(AuthenticationFailed):
        identity.verify_token(token)


def test_token_signed_with_other_secret(identity):
    token = IdentityService(secret_key="someone-else").issue_token(42)
    with pytest.raises(AuthenticationFailed):
        identity.verify_token(token)


def test_token_without_numeric_subject(identity):
    token = jwt.encode({"sub": "alice@example.com"}, "unit-secret", algorithm="HS256")
    with pytest.raises(AuthenticationFailed):
        identity.verify_token(token)


def test_password_hashing(identity):
    hashed = identity.hash_password("password123")
    assert hashed != "password123"
    assert identity.verify_password("password123", hashed)
    assert not identity.verify_password("password124", hashed)


def test_unrecognised_hash_fails_verification(identity):
    assert identity.verify_password("password123", "not-a-hash") is False


def test_from_settings():
    settings = Settings(_env_file=None, jwt_secret="s3", jwt_algorithm="HS512", access_token_expire_minutes=9)
    identity = IdentityService.from_settings(settings)
    assert (identity.secret_key, identity.algorithm, identity.expire_minutes) == ("s3", "HS512", 9)
    assert identity.verify_token(identity.issue_token(1)) == 1
