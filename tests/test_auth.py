"""
Unit test for JWT authentication
"""

from datetime import timedelta

import pytest
from jose import jwt

from funeral_platform.core.auth import (
    ROLE_SUPERADMIN, ROLE_TENANT_ADMIN, TOKEN_REFRESH, create_access_token,
    create_refresh_token, decode_token, hash_secret, verify_secret,
)
from funeral_platform.core.exceptions import TokenExpiredError, UnauthorizedError
from funeral_platform.schemas.token import TokenPayload


def test_create_access_token(settings):
    """Test JWT token creation"""
    token = create_access_token(
        "grace-home",
        ROLE_TENANT_ADMIN,
        tenant="grace-home",
        expires_delta=timedelta(hours=24),
        settings=settings,
    )

    assert isinstance(token, str)

    payload = decode_token(token, settings=settings)
    assert payload["sub"] == "grace-home"
    assert payload["tenant"] == "grace-home"
    assert payload["role"] == ROLE_TENANT_ADMIN
    assert payload["type"] == "access"
    assert "exp" in payload
    assert TokenPayload(**payload).tenant == "grace-home"


def test_superadmin_token_has_no_tenant(settings):
    token = create_access_token("root@example.com", ROLE_SUPERADMIN, settings=settings)
    payload = decode_token(token, settings=settings)

    assert payload["role"] == ROLE_SUPERADMIN
    assert "tenant" not in payload


def test_verify_invalid_token(settings):
    """Test token verification with invalid token"""
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_token("invalid.token.string.here", settings=settings)
    assert not isinstance(exc_info.value, TokenExpiredError)


def test_token_signed_with_other_key(settings):
    token = jwt.encode({"sub": "x", "role": ROLE_SUPERADMIN, "type": "access"}, "other-key", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        decode_token(token, settings=settings)


def test_expired_token(settings):
    """Test that expired tokens are distinguishable from invalid ones"""
    token = create_access_token(
        "root@example.com",
        ROLE_SUPERADMIN,
        expires_delta=timedelta(hours=-1),
        settings=settings,
    )

    with pytest.raises(TokenExpiredError) as exc_info:
        decode_token(token, settings=settings)
    assert exc_info.value.code == "token_expired"
    assert exc_info.value.status_code == 401


def test_refresh_token_is_not_an_access_token(settings):
    refresh = create_refresh_token("root@example.com", ROLE_SUPERADMIN, settings=settings)

    with pytest.raises(UnauthorizedError):
        decode_token(refresh, settings=settings)
    assert decode_token(refresh, expected_type=TOKEN_REFRESH, settings=settings)["sub"] == "root@example.com"


def test_secret_hashing():
    hashed = hash_secret("grace-admin-key")

    assert hashed != "grace-admin-key"
    assert verify_secret("grace-admin-key", hashed)
    assert not verify_secret("wrong-key", hashed)
    assert not verify_secret("grace-admin-key", None)
    assert not verify_secret("grace-admin-key", "not-a-hash")
