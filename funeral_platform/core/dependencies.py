"""
FastAPI dependencies: service wiring and authentication gates
"""

import secrets
from typing import Dict, Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import structlog

from funeral_platform.core.auth import ROLE_SUPERADMIN, ROLE_TENANT_ADMIN, decode_token
from funeral_platform.core.config import Settings, get_settings
from funeral_platform.core.exceptions import ForbiddenError, UnauthorizedError
from funeral_platform.core.store import JsonStore, get_store
from funeral_platform.models.resources import APPOINTMENTS, INVOICES, MEMORIALS
from funeral_platform.models.tenant import Tenant
from funeral_platform.services.collections import ResourceCollection
from funeral_platform.services.credentials import AdminCredentialStore, ensure_tenant_access
from funeral_platform.services.email_service import EmailService
from funeral_platform.services.password_reset import PasswordResetService
from funeral_platform.services.pdf import PdfService
from funeral_platform.services.superadmins import SuperadminService
from funeral_platform.services.tenant_registry import TenantRegistry
from funeral_platform.services.uploads import UploadService

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)


# ============================================================================
# Services
# ============================================================================

def get_registry(
    settings: Settings = Depends(get_settings),
    store: JsonStore = Depends(get_store),
) -> TenantRegistry:
    return TenantRegistry(store, settings.tenants_path, trial_days=settings.TRIAL_DAYS)


def get_credentials(
    settings: Settings = Depends(get_settings),
    store: JsonStore = Depends(get_store),
    registry: TenantRegistry = Depends(get_registry),
) -> AdminCredentialStore:
    return AdminCredentialStore(store, settings.admin_keys_path, registry)


def get_superadmin_service(
    settings: Settings = Depends(get_settings),
    store: JsonStore = Depends(get_store),
) -> SuperadminService:
    return SuperadminService(store, settings)


def get_email_service(settings: Settings = Depends(get_settings)) -> EmailService:
    return EmailService(settings)


def get_password_reset_service(
    settings: Settings = Depends(get_settings),
    registry: TenantRegistry = Depends(get_registry),
    credentials: AdminCredentialStore = Depends(get_credentials),
    email_service: EmailService = Depends(get_email_service),
) -> PasswordResetService:
    return PasswordResetService(
        registry, credentials, email_service,
        expire_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES,
    )


def get_memorials(
    settings: Settings = Depends(get_settings),
    store: JsonStore = Depends(get_store),
) -> ResourceCollection:
    return ResourceCollection(store, settings.collection_path(MEMORIALS.name), MEMORIALS)


def get_appointments(
    settings: Settings = Depends(get_settings),
    store: JsonStore = Depends(get_store),
) -> ResourceCollection:
    return ResourceCollection(store, settings.collection_path(APPOINTMENTS.name), APPOINTMENTS)


def get_invoices(
    settings: Settings = Depends(get_settings),
    store: JsonStore = Depends(get_store),
) -> ResourceCollection:
    return ResourceCollection(store, settings.collection_path(INVOICES.name), INVOICES)


def get_pdf_service(settings: Settings = Depends(get_settings)) -> PdfService:
    return PdfService(settings.UPLOADS_DIR)


def get_upload_service(settings: Settings = Depends(get_settings)) -> UploadService:
    return UploadService(settings.UPLOADS_DIR, settings.MAX_UPLOAD_BYTES)


# ============================================================================
# Authentication
# ============================================================================

def _extract_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    x_auth_token: Optional[str],
) -> str:
    """Bearer token from Authorization, falling back to x-auth-token"""
    if credentials and credentials.credentials:
        return credentials.credentials
    if x_auth_token:
        return x_auth_token.removeprefix("Bearer ").strip()
    raise UnauthorizedError("Missing authentication token")


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_auth_token: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> Dict:
    """Decoded access-token claims of the caller"""
    return decode_token(_extract_token(credentials, x_auth_token), settings=settings)


async def require_superadmin(payload: Dict = Depends(get_token_payload)) -> Dict:
    """Gate for /superadmin/api routes; returns the caller's claims"""
    if payload.get("role") != ROLE_SUPERADMIN:
        raise UnauthorizedError("Super-admin access required")
    logger.debug(f"Super-admin authenticated: {payload['sub']}")
    return payload


async def require_tenant_admin(
    tenant_slug: str,
    payload: Dict = Depends(get_token_payload),
    registry: TenantRegistry = Depends(get_registry),
    credentials: AdminCredentialStore = Depends(get_credentials),
) -> Tenant:
    """
    Gate for one tenant's admin routes.

    Tenant-admin tokens only open their own tenant, must carry the current
    admin key version, and are re-checked against suspension and trial expiry
    on every request. Super-admins may act on any tenant.
    """
    role = payload.get("role")
    if role == ROLE_SUPERADMIN:
        return registry.find_by_slug(tenant_slug)

    if role != ROLE_TENANT_ADMIN or payload.get("tenant") != tenant_slug:
        raise ForbiddenError("Token does not grant access to this tenant")

    version = credentials.key_version(tenant_slug)
    if version is None or not secrets.compare_digest(
        str(payload.get("kv", "")).encode(), version.encode()
    ):
        raise UnauthorizedError("Session is no longer valid, please log in again")

    tenant = registry.find_by_slug(tenant_slug)
    ensure_tenant_access(tenant)
    return tenant


async def require_webhook_secret(
    x_webhook_secret: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Shared-secret check for payment provider callbacks"""
    expected = settings.PAYMENT_WEBHOOK_SECRET
    if not expected:
        logger.error("Payment webhook called but PAYMENT_WEBHOOK_SECRET is not set")
        raise UnauthorizedError("Webhook not configured")
    if not x_webhook_secret or not secrets.compare_digest(
        x_webhook_secret.encode(), expected.encode()
    ):
        raise UnauthorizedError("Invalid webhook secret")
