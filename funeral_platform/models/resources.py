"""
Tenant-scoped resource schemas: memorials, appointments, invoices

Each record type has an explicit allow-listed field set. The *Fields models
carry every optional field and double as the partial-update schema; the
*Create models add the required domain field. Unknown keys are rejected.
"""

from dataclasses import dataclass
from typing import List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResourceModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


# ============================================================================
# Memorials
# ============================================================================

class MemorialFields(ResourceModel):
    full_name: Optional[str] = Field(default=None, min_length=1)
    dob: Optional[str] = None
    dod: Optional[str] = None
    summary: Optional[str] = None
    obituary: Optional[str] = None
    viewing_date: Optional[str] = None
    viewing_time: Optional[str] = None
    viewing_location: Optional[str] = None
    service_date: Optional[str] = None
    service_time: Optional[str] = None
    service_location: Optional[str] = None
    burial_place: Optional[str] = None
    burial_date: Optional[str] = None
    burial_time: Optional[str] = None
    livestream_link: Optional[str] = None


class MemorialCreate(MemorialFields):
    full_name: str = Field(..., min_length=1)


# ============================================================================
# Appointments
# ============================================================================

class AppointmentFields(ResourceModel):
    client_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    purpose: Optional[str] = None
    location: Optional[str] = None
    deceased_name: Optional[str] = None
    staff: Optional[str] = None
    notes: Optional[str] = None


class AppointmentCreate(AppointmentFields):
    client_name: str = Field(..., min_length=1)


# ============================================================================
# Invoices
# ============================================================================

class InvoiceLineItem(ResourceModel):
    description: str = Field(..., min_length=1)
    quantity: float = 1
    unit_price: float = 0


class InvoiceFields(ResourceModel):
    client_name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    due_date: Optional[str] = None
    # Free text; not validated against an enum
    status: Optional[str] = None
    memorial_id: Optional[str] = None
    line_items: Optional[List[InvoiceLineItem]] = None
    notes: Optional[str] = None


class InvoiceCreate(InvoiceFields):
    client_name: str = Field(..., min_length=1)
    status: Optional[str] = "Unpaid"


@dataclass(frozen=True)
class ResourceKind:
    """Describes how one resource type is stored"""
    name: str
    label: str
    id_prefix: str
    create_model: Type[ResourceModel]
    update_model: Type[ResourceModel]


MEMORIALS = ResourceKind("memorials", "Memorial", "mem-", MemorialCreate, MemorialFields)
APPOINTMENTS = ResourceKind("appointments", "Appointment", "appt-", AppointmentCreate, AppointmentFields)
INVOICES = ResourceKind("invoices", "Invoice", "inv-", InvoiceCreate, InvoiceFields)

RESOURCE_KINDS = {kind.name: kind for kind in (MEMORIALS, APPOINTMENTS, INVOICES)}
