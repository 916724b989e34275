"""
Super-admin API endpoints - login, token refresh and tenant management
"""

from fastapi import APIRouter, Depends, status
import structlog

from funeral_platform.core.dependencies import (
    get_appointments, get_credentials, get_invoices, get_memorials, get_registry,
    get_superadmin_service, require_superadmin,
)
from funeral_platform.core.exceptions import NotFoundError
from funeral_platform.schemas.tenant import TenantAdminUpdate, TenantCreate
from funeral_platform.schemas.token import RefreshRequest, SuperadminLogin, TokenResponse
from funeral_platform.services.collections import ResourceCollection
from funeral_platform.services.credentials import AdminCredentialStore, generate_admin_key
from funeral_platform.services.superadmins import SuperadminService
from funeral_platform.services.tenant_registry import TenantRegistry

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    body: SuperadminLogin,
    superadmins: SuperadminService = Depends(get_superadmin_service),
):
    """Login with email and password, returns access and refresh tokens"""
    session = superadmins.issue_session(body.email, body.password)
    return TokenResponse(token=session["token"], refreshToken=session["refreshToken"])


@router.post("/refresh", response_model=TokenResponse, response_model_exclude_none=True)
async def refresh(
    body: RefreshRequest,
    superadmins: SuperadminService = Depends(get_superadmin_service),
):
    """Refresh access token"""
    return TokenResponse(token=superadmins.refresh(body.refresh_token))


@router.get("/api/tenants", dependencies=[Depends(require_superadmin)])
async def list_tenants(registry: TenantRegistry = Depends(get_registry)):
    return {"success": True, "tenants": [t.public_view() for t in registry.list()]}


@router.post("/api/tenants", status_code=status.HTTP_201_CREATED)
async def create_tenant(
    body: TenantCreate,
    claims: dict = Depends(require_superadmin),
    registry: TenantRegistry = Depends(get_registry),
    credentials: AdminCredentialStore = Depends(get_credentials),
):
    """
    Create a tenant on behalf of a funeral home.

    When no adminKey is supplied one is generated and returned once.
    """
    fields = body.changes()
    name = fields.pop("funeral_home_name")
    email = fields.pop("email")
    slug = fields.pop("slug", None)
    tenant_status = fields.pop("status", body.status)
    admin_key = fields.pop("admin_key", None)

    tenant = registry.create(name, email, slug=slug, status=tenant_status, **fields)

    generated = admin_key is None
    if generated:
        admin_key = generate_admin_key()
    try:
        credentials.set_key(tenant.slug, admin_key)
    except Exception:
        registry.delete(tenant.slug)
        raise

    logger.info(f"Tenant {tenant.slug} created by {claims['sub']}")
    response = {"success": True, "tenant": tenant.public_view()}
    if generated:
        response["adminKey"] = admin_key
    return response


@router.get("/api/tenants/{tenant_slug}", dependencies=[Depends(require_superadmin)])
async def get_tenant(
    tenant_slug: str,
    registry: TenantRegistry = Depends(get_registry),
):
    return {"success": True, "tenant": registry.find_by_slug(tenant_slug).public_view()}


@router.put("/api/tenants/{tenant_slug}", dependencies=[Depends(require_superadmin)])
async def update_tenant(
    tenant_slug: str,
    body: TenantAdminUpdate,
    registry: TenantRegistry = Depends(get_registry),
):
    tenant = registry.update_settings(tenant_slug, body.changes())
    return {"success": True, "tenant": tenant.public_view()}


@router.delete("/api/tenants/{tenant_slug}")
async def delete_tenant(
    tenant_slug: str,
    claims: dict = Depends(require_superadmin),
    registry: TenantRegistry = Depends(get_registry),
    credentials: AdminCredentialStore = Depends(get_credentials),
    memorials: ResourceCollection = Depends(get_memorials),
    appointments: ResourceCollection = Depends(get_appointments),
    invoices: ResourceCollection = Depends(get_invoices),
):
    """Delete a tenant together with its admin key and every record it owns"""
    if not registry.delete(tenant_slug):
        raise NotFoundError("Tenant", tenant_slug)

    credentials.remove(tenant_slug)
    removed = {
        collection.kind.name: collection.purge(tenant_slug)
        for collection in (memorials, appointments, invoices)
    }
    logger.info(f"Tenant {tenant_slug} deleted by {claims['sub']}", removed=removed)
    return {"success": True}
