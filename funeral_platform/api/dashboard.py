"""
Tenant dashboard endpoints - overview counts and PDF auto-fill
"""

from fastapi import APIRouter, Depends, Request

from funeral_platform.api.resources import read_json_object
from funeral_platform.core.dependencies import (
    get_appointments, get_invoices, get_memorials, get_pdf_service,
    require_tenant_admin,
)
from funeral_platform.models.tenant import Tenant
from funeral_platform.services.collections import ResourceCollection
from funeral_platform.services.pdf import PdfService

router = APIRouter()


@router.get("/overview")
async def overview(
    tenant: Tenant = Depends(require_tenant_admin),
    memorials: ResourceCollection = Depends(get_memorials),
    appointments: ResourceCollection = Depends(get_appointments),
    invoices: ResourceCollection = Depends(get_invoices),
):
    return {
        "ok": True,
        "slug": tenant.slug,
        "memorials": memorials.count(tenant.slug),
        "appointments": appointments.count(tenant.slug),
        "invoices": invoices.count(tenant.slug),
    }


@router.post("/pdf/from-form")
async def pdf_from_form(
    request: Request,
    tenant: Tenant = Depends(require_tenant_admin),
    pdfs: PdfService = Depends(get_pdf_service),
):
    """Render an arrangement summary PDF from an arbitrary field map"""
    fields = await read_json_object(request)
    url = pdfs.generate_from_form(tenant.slug, fields, tenant.funeral_home_name)
    return {"ok": True, "url": url}
