"""
Tenant-admin CRUD routers for resource collections

Mounted under /api/{tenant_slug}/admin/<collection>. Every route resolves the
caller through require_tenant_admin, so the slug in the path is the only
partition a request can touch.
"""

import json
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, Request

from funeral_platform.core.dependencies import require_tenant_admin
from funeral_platform.core.exceptions import BadRequestError
from funeral_platform.models.tenant import Tenant
from funeral_platform.services.collections import ResourceCollection


async def read_json_object(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequestError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise BadRequestError("Expected a JSON object")
    return body


def build_resource_router(
    get_collection: Callable[..., ResourceCollection],
    key: str,
    include_create: bool = True,
) -> APIRouter:
    """
    Build list/get/create/update/delete routes for one collection.

    `key` names the record in create and update responses, e.g. {"ok": true,
    "appt": {...}}.
    """
    router = APIRouter()

    @router.get("")
    async def list_records(
        tenant: Tenant = Depends(require_tenant_admin),
        collection: ResourceCollection = Depends(get_collection),
    ):
        return collection.list(tenant.slug)

    if include_create:
        @router.post("")
        async def create_record(
            request: Request,
            tenant: Tenant = Depends(require_tenant_admin),
            collection: ResourceCollection = Depends(get_collection),
        ):
            record = collection.add(tenant.slug, await read_json_object(request))
            return {"ok": True, key: record}

    @router.get("/{record_id}")
    async def get_record(
        record_id: str,
        tenant: Tenant = Depends(require_tenant_admin),
        collection: ResourceCollection = Depends(get_collection),
    ):
        return collection.get(tenant.slug, record_id)

    @router.put("/{record_id}")
    async def update_record(
        record_id: str,
        request: Request,
        tenant: Tenant = Depends(require_tenant_admin),
        collection: ResourceCollection = Depends(get_collection),
    ):
        record = collection.update(tenant.slug, record_id, await read_json_object(request))
        return {"ok": True, key: record}

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        tenant: Tenant = Depends(require_tenant_admin),
        collection: ResourceCollection = Depends(get_collection),
    ):
        collection.delete(tenant.slug, record_id)
        return {"ok": True}

    return router
