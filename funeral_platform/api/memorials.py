"""
Memorial API endpoints

Admin creation accepts multipart forms with an optional `photo` file, or a
plain JSON body. Public pages read memorials without authentication. The
/api/memorials/{slug} routes keep the JSON-only contract used by older
dashboards.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from funeral_platform.api.resources import read_json_object
from funeral_platform.core.dependencies import (
    get_memorials, get_registry, get_upload_service, require_tenant_admin,
)
from funeral_platform.core.exceptions import BadRequestError
from funeral_platform.models.tenant import Tenant
from funeral_platform.services.collections import ResourceCollection
from funeral_platform.services.tenant_registry import TenantRegistry
from funeral_platform.services.uploads import UploadService

router = APIRouter()


@router.post("/{tenant_slug}/admin/memorials")
async def create_memorial(
    request: Request,
    tenant: Tenant = Depends(require_tenant_admin),
    memorials: ResourceCollection = Depends(get_memorials),
    uploads: UploadService = Depends(get_upload_service),
):
    """Create a memorial, storing the uploaded photo when one is attached"""
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/form-data"):
        record = memorials.add(tenant.slug, await read_json_object(request))
        return {"ok": True, "memorial": record}

    form = await request.form()
    fields: Dict[str, Any] = {}
    photo = None
    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            if name == "photo" and value.filename:
                photo = value
            continue
        if value != "":
            fields[name] = value

    # Reject bad fields before anything is written to disk
    memorials.validate(fields)
    extra = {}
    if photo is not None:
        extra["photoPath"] = await uploads.save_memorial_photo(photo)

    record = memorials.add(tenant.slug, fields, extra=extra)
    return {"ok": True, "memorial": record}


@router.get("/{tenant_slug}/memorial/{memorial_id}")
async def public_memorial(
    tenant_slug: str,
    memorial_id: str,
    memorials: ResourceCollection = Depends(get_memorials),
):
    """Public memorial page data"""
    return memorials.get(tenant_slug, memorial_id)


@router.get("/memorials/{tenant_slug}")
async def list_public_memorials(
    tenant_slug: str,
    registry: TenantRegistry = Depends(get_registry),
    memorials: ResourceCollection = Depends(get_memorials),
):
    registry.find_by_slug(tenant_slug)
    return memorials.list(tenant_slug)


@router.get("/memorials/{tenant_slug}/{memorial_id}")
async def get_public_memorial(
    tenant_slug: str,
    memorial_id: str,
    memorials: ResourceCollection = Depends(get_memorials),
):
    return memorials.get(tenant_slug, memorial_id)


@router.post("/memorials/{tenant_slug}")
async def add_memorial(
    request: Request,
    tenant: Tenant = Depends(require_tenant_admin),
    memorials: ResourceCollection = Depends(get_memorials),
):
    record = memorials.add(tenant.slug, await read_json_object(request))
    return {"ok": True, "memorial": record}


@router.post("/memorials/{tenant_slug}/update")
async def update_memorial(
    request: Request,
    tenant: Tenant = Depends(require_tenant_admin),
    memorials: ResourceCollection = Depends(get_memorials),
):
    body = await read_json_object(request)
    memorial_id = body.pop("id", None)
    if not memorial_id:
        raise BadRequestError("Memorial id is required")
    record = memorials.update(tenant.slug, str(memorial_id), body)
    return {"ok": True, "memorial": record}


@router.post("/memorials/{tenant_slug}/delete")
async def delete_memorial(
    request: Request,
    tenant: Tenant = Depends(require_tenant_admin),
    memorials: ResourceCollection = Depends(get_memorials),
):
    body = await read_json_object(request)
    memorial_id = body.get("id")
    if not memorial_id:
        raise BadRequestError("Memorial id is required")
    memorials.delete(tenant.slug, str(memorial_id))
    return {"ok": True}
