"""
JWT and secret-hashing utilities

Sessions are stateless signed tokens; nothing is held in process memory, so
tokens stay valid across restarts until they expire.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
import structlog

from funeral_platform.core.config import Settings, get_settings
from funeral_platform.core.exceptions import TokenExpiredError, UnauthorizedError

logger = structlog.get_logger(__name__)

ROLE_SUPERADMIN = "superadmin"
ROLE_TENANT_ADMIN = "tenant_admin"

TOKEN_ACCESS = "access"
TOKEN_REFRESH = "refresh"

# Admin keys and super-admin passwords are only ever stored as these hashes
secret_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_secret(secret: str) -> str:
    return secret_context.hash(secret)


def verify_secret(secret: str, secret_hash: Optional[str]) -> bool:
    """Constant-time comparison of a raw secret against its stored hash"""
    if not secret or not secret_hash:
        return False
    try:
        return secret_context.verify(secret, secret_hash)
    except (ValueError, TypeError):
        logger.warning("Stored secret hash is malformed")
        return False


def _encode(claims: Dict, expires_delta: timedelta, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        **claims,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(
    subject: str,
    role: str,
    tenant: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
    key_version: Optional[str] = None,
) -> str:
    """Create a short-lived access token"""
    settings = settings or get_settings()
    if expires_delta is None:
        minutes = (
            settings.TENANT_ACCESS_TOKEN_EXPIRE_MINUTES
            if role == ROLE_TENANT_ADMIN
            else settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )
        expires_delta = timedelta(minutes=minutes)

    claims = {"sub": subject, "role": role, "type": TOKEN_ACCESS}
    if tenant is not None:
        claims["tenant"] = tenant
    if key_version is not None:
        claims["kv"] = key_version
    return _encode(claims, expires_delta, settings)


def create_refresh_token(
    subject: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Create a long-lived refresh token, usable only to mint access tokens"""
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    claims = {"sub": subject, "role": role, "type": TOKEN_REFRESH}
    return _encode(claims, expires_delta, settings)


def decode_token(
    token: str,
    expected_type: str = TOKEN_ACCESS,
    settings: Optional[Settings] = None,
) -> Dict:
    """
    Decode and validate a token.

    Raises TokenExpiredError for a well-signed but expired token and
    UnauthorizedError for anything else that fails validation.
    """
    settings = settings or get_settings()
    if not token:
        raise UnauthorizedError("Missing authentication token")
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        raise UnauthorizedError("Invalid token")

    if payload.get("type") != expected_type:
        raise UnauthorizedError("Invalid token type")
    if not payload.get("sub") or not payload.get("role"):
        raise UnauthorizedError("Invalid token")
    return payload
