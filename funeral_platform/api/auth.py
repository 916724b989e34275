"""
Auth API endpoints - tenant admin login and admin-key reset
"""

from fastapi import APIRouter, Depends
import structlog

from funeral_platform.core.auth import ROLE_TENANT_ADMIN, create_access_token
from funeral_platform.core.config import Settings, get_settings
from funeral_platform.core.dependencies import get_credentials, get_password_reset_service
from funeral_platform.schemas.token import AdminLoginRequest, ResetConfirm, ResetRequest
from funeral_platform.services.credentials import AdminCredentialStore
from funeral_platform.services.password_reset import PasswordResetService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/admin/login")
async def admin_login(
    body: AdminLoginRequest,
    credentials: AdminCredentialStore = Depends(get_credentials),
    settings: Settings = Depends(get_settings),
):
    """
    Login with a tenant's admin key.

    404 unknown tenant, 403 wrong key or suspended, 402 TRIAL_EXPIRED.
    """
    tenant = credentials.verify_tenant_admin(body.tenant, body.key)
    token = create_access_token(
        tenant.slug,
        ROLE_TENANT_ADMIN,
        tenant=tenant.slug,
        settings=settings,
        key_version=credentials.key_version(tenant.slug),
    )
    logger.info(f"Tenant admin logged in: {tenant.slug}")
    return {"success": True, "slug": tenant.slug, "token": token}


@router.post("/auth/reset-request")
async def reset_request(
    body: ResetRequest,
    resets: PasswordResetService = Depends(get_password_reset_service),
):
    """Always succeeds so the response never reveals whether an email exists"""
    resets.request_reset(body.email)
    return {"success": True}


@router.post("/auth/reset-confirm")
async def reset_confirm(
    body: ResetConfirm,
    resets: PasswordResetService = Depends(get_password_reset_service),
):
    slug = resets.confirm_reset(body.token, body.password)
    return {"success": True, "slug": slug}
