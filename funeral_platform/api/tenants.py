"""
Tenant API endpoints - signup, public profile, status, settings, payment
"""

from typing import List

from fastapi import APIRouter, Depends
import structlog

from funeral_platform.core.dependencies import (
    get_credentials, get_email_service, get_registry, require_tenant_admin,
    require_webhook_secret,
)
from funeral_platform.models.tenant import Tenant
from funeral_platform.schemas.tenant import MarkPaidRequest, SignupRequest, TenantSettingsUpdate
from funeral_platform.services.credentials import AdminCredentialStore, generate_admin_key
from funeral_platform.services.email_service import EmailService
from funeral_platform.services.tenant_registry import TenantRegistry

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/signup")
async def signup(
    body: SignupRequest,
    registry: TenantRegistry = Depends(get_registry),
    credentials: AdminCredentialStore = Depends(get_credentials),
    email_service: EmailService = Depends(get_email_service),
):
    """Self-service signup: opens a trial and issues a temporary admin key"""
    tenant = registry.create(name=body.funeral_home_name, email=body.email)
    temp_key = generate_admin_key()
    try:
        credentials.set_key(tenant.slug, temp_key)
    except Exception:
        registry.delete(tenant.slug)
        raise

    email_service.send_welcome_email(
        to_email=tenant.email,
        funeral_home_name=tenant.funeral_home_name,
        slug=tenant.slug,
        admin_key=temp_key,
    )
    logger.info(f"Tenant signed up: {tenant.slug}")
    return {"success": True, "slug": tenant.slug, "tempAdminKey": temp_key}


@router.get("/tenants")
async def list_public_tenants(registry: TenantRegistry = Depends(get_registry)) -> List[dict]:
    """Public directory of funeral homes"""
    return [
        {"slug": t.slug, "funeralHomeName": t.funeral_home_name}
        for t in registry.list()
    ]


@router.post("/tenants/mark-paid", dependencies=[Depends(require_webhook_secret)])
async def mark_paid(
    body: MarkPaidRequest,
    registry: TenantRegistry = Depends(get_registry),
):
    """Payment webhook: converts the tenant to active"""
    tenant = registry.mark_paid(body.slug)
    return tenant.public_view()


@router.get("/tenant/{tenant_slug}")
async def get_tenant(
    tenant_slug: str,
    registry: TenantRegistry = Depends(get_registry),
):
    """Get tenant by slug"""
    return registry.find_by_slug(tenant_slug).public_view()


@router.get("/tenant/{tenant_slug}/status")
async def get_tenant_status(
    tenant_slug: str,
    registry: TenantRegistry = Depends(get_registry),
):
    tenant = registry.find_by_slug(tenant_slug)
    return registry.compute_status(tenant).model_dump(by_alias=True)


@router.post("/tenant/{tenant_slug}/settings")
async def update_tenant_settings(
    body: TenantSettingsUpdate,
    tenant: Tenant = Depends(require_tenant_admin),
    registry: TenantRegistry = Depends(get_registry),
):
    """Update tenant"""
    updated = registry.update_settings(tenant.slug, body.changes())
    return updated.public_view()
