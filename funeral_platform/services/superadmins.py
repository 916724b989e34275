"""
Super-admin directory and session issuance
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError
import structlog

from funeral_platform.core.auth import (
    ROLE_SUPERADMIN, TOKEN_REFRESH, create_access_token, create_refresh_token,
    decode_token, hash_secret, verify_secret,
)
from funeral_platform.core.config import Settings
from funeral_platform.core.exceptions import BadRequestError, UnauthorizedError
from funeral_platform.core.store import JsonStore
from funeral_platform.models.superadmin import Superadmin
from funeral_platform.utils.clock import now_ms

logger = structlog.get_logger(__name__)


class SuperadminService:
    """Authenticates super-admins and mints their signed tokens"""

    def __init__(self, store: JsonStore, settings: Settings):
        self.store = store
        self.settings = settings
        self.path: Path = settings.superadmins_path

    def list(self) -> List[Superadmin]:
        accounts = []
        for document in self.store.read(self.path, []):
            try:
                accounts.append(Superadmin.model_validate(document))
            except ValidationError:
                logger.warning("Skipping malformed super-admin record")
        return accounts

    def add(self, email: str, password: str) -> Superadmin:
        email = (email or "").strip().lower()
        if not email or not password:
            raise BadRequestError("Email and password are required")

        account = Superadmin(email=email, password_hash=hash_secret(password), created_at=now_ms())
        with self.store.transaction(self.path, []) as documents:
            if any(d.get("email", "").lower() == email for d in documents):
                raise BadRequestError("Super-admin already exists")
            documents.append(account.model_dump(by_alias=True))
        logger.info(f"Super-admin added: {email}")
        return account

    def ensure_seed(self) -> Optional[Superadmin]:
        """Create the configured super-admin when the directory is empty"""
        if not self.settings.SUPERADMIN_EMAIL or not self.settings.SUPERADMIN_PASSWORD:
            return None
        if self.list():
            return None
        return self.add(self.settings.SUPERADMIN_EMAIL, self.settings.SUPERADMIN_PASSWORD)

    def authenticate(self, email: str, password: str) -> Superadmin:
        email = (email or "").strip().lower()
        for account in self.list():
            if account.email == email and verify_secret(password, account.password_hash):
                return account
        logger.info(f"Super-admin login failed for {email}")
        raise UnauthorizedError("Invalid email or password")

    def issue_session(self, email: str, password: str) -> Dict[str, str]:
        account = self.authenticate(email, password)
        logger.info(f"Super-admin logged in: {account.email}")
        return {
            "token": create_access_token(account.email, ROLE_SUPERADMIN, settings=self.settings),
            "refreshToken": create_refresh_token(account.email, ROLE_SUPERADMIN, settings=self.settings),
        }

    def refresh(self, refresh_token: str) -> str:
        """Exchange a valid refresh token for a new access token"""
        payload = decode_token(refresh_token, expected_type=TOKEN_REFRESH, settings=self.settings)
        if payload["role"] != ROLE_SUPERADMIN:
            raise UnauthorizedError("Invalid token")
        if not any(a.email == payload["sub"] for a in self.list()):
            raise UnauthorizedError("Account no longer exists")
        return create_access_token(payload["sub"], ROLE_SUPERADMIN, settings=self.settings)
