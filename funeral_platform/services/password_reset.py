"""
Password Reset Service

Handles admin-key reset token generation, validation and key updates.
"""

import secrets
from typing import Optional

import structlog

from funeral_platform.core.exceptions import InvalidOrExpiredError
from funeral_platform.services.credentials import AdminCredentialStore
from funeral_platform.services.email_service import EmailService
from funeral_platform.services.tenant_registry import TenantRegistry
from funeral_platform.utils.clock import minutes_ms, now_ms

logger = structlog.get_logger(__name__)


class PasswordResetService:
    """Service for the tenant admin-key reset flow"""

    def __init__(
        self,
        registry: TenantRegistry,
        credentials: AdminCredentialStore,
        email_service: EmailService,
        expire_minutes: int = 30,
    ):
        self.registry = registry
        self.credentials = credentials
        self.email_service = email_service
        self.expire_minutes = expire_minutes

    @staticmethod
    def generate_reset_token() -> str:
        """Generate a secure random token"""
        return secrets.token_urlsafe(32)

    def request_reset(self, email: str, now: Optional[int] = None) -> None:
        """
        Open a reset for the tenant registered under `email`.

        Always returns normally so callers cannot probe which emails exist.
        """
        tenant = self.registry.find_by_email(email)
        if tenant is None:
            logger.info("Reset requested for unknown email")
            return

        now = now if now is not None else now_ms()
        token = self.generate_reset_token()
        self.registry.update(tenant.slug, {
            "reset_token": token,
            "reset_expiry": now + minutes_ms(self.expire_minutes),
        })
        logger.info(f"Reset token issued for tenant {tenant.slug}")

        # Delivery failures are logged by the email service and never surface
        self.email_service.send_reset_email(
            to_email=tenant.email,
            funeral_home_name=tenant.funeral_home_name,
            reset_token=token,
        )

    def confirm_reset(self, token: str, new_key: str, now: Optional[int] = None) -> str:
        """Replace the admin key for the tenant holding `token`; returns its slug"""
        now = now if now is not None else now_ms()
        if not token:
            raise InvalidOrExpiredError()

        tenant = next(
            (
                t for t in self.registry.list()
                if t.reset_token
                and secrets.compare_digest(t.reset_token.encode(), token.encode())
            ),
            None,
        )
        if tenant is None or tenant.reset_expiry is None or now > tenant.reset_expiry:
            raise InvalidOrExpiredError()

        self.credentials.set_key(tenant.slug, new_key)
        self.registry.update(tenant.slug, {"reset_token": None, "reset_expiry": None})
        logger.info(f"Admin key reset completed for tenant {tenant.slug}")
        return tenant.slug

    def expire_reset_tokens(self, now: Optional[int] = None) -> int:
        """Clear lapsed reset fields; returns how many were cleared"""
        now = now if now is not None else now_ms()
        expired = [
            t.slug for t in self.registry.list()
            if t.reset_token and (t.reset_expiry is None or now > t.reset_expiry)
        ]
        for slug in expired:
            self.registry.update(slug, {"reset_token": None, "reset_expiry": None})
            logger.info(f"Expired reset token cleared for tenant {slug}")
        return len(expired)
