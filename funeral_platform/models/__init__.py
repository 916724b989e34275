from funeral_platform.models.tenant import (
    FEATURES, Tenant, TenantStatus, TenantStatusView, compute_status,
)
from funeral_platform.models.superadmin import Superadmin
from funeral_platform.models.resources import (
    APPOINTMENTS, INVOICES, MEMORIALS, RESOURCE_KINDS, ResourceKind,
    AppointmentCreate, AppointmentFields, InvoiceCreate, InvoiceFields,
    MemorialCreate, MemorialFields,
)
