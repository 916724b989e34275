"""
Tenant model - Multi-tenancy foundation
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TenantStatus(str, Enum):
    """Tenant lifecycle states"""
    TRIAL = "trial"
    ACTIVE = "active"
    SUSPENDED = "suspended"


# Feature toggles offered in the super-admin tenant drawer
FEATURES = (
    "Memorial Pages",
    "Condolence Messages",
    "Funeral Intake Form",
    "Hymn Sheet Designer",
    "Appointment Scheduler",
    "PDF Auto-Fill",
    "Accounting & Payments",
    "Inventory Tracking",
    "Staff Management",
    "Analytics Dashboard",
)

RESET_FIELDS = {"reset_token", "reset_expiry"}


def default_features() -> Dict[str, bool]:
    return {feature: True for feature in FEATURES}


class CamelModel(BaseModel):
    """Base for documents persisted with camelCase keys"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class Tenant(CamelModel):
    """One onboarded funeral home, keyed by its immutable slug"""

    slug: str
    funeral_home_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    logo: Optional[str] = None
    brand_color: Optional[str] = None
    features: Dict[str, bool] = Field(default_factory=default_features)

    status: TenantStatus = TenantStatus.TRIAL
    created_at: int
    trial_ends_at: int
    paid_at: Optional[int] = None

    # Present only while a password reset is open
    reset_token: Optional[str] = None
    reset_expiry: Optional[int] = None

    def to_document(self) -> dict:
        """Serialize for storage, omitting reset fields when no reset is open"""
        exclude = {f for f in RESET_FIELDS if getattr(self, f) is None}
        return self.model_dump(by_alias=True, exclude=exclude)

    def public_view(self) -> dict:
        """Serialize for API responses; never exposes reset state"""
        return self.model_dump(by_alias=True, exclude=RESET_FIELDS)


class TenantStatusView(CamelModel):
    slug: str
    status: TenantStatus
    trial_ends_at: int
    trial_expired: bool
    paid_at: Optional[int] = None


def compute_status(tenant: Tenant, now: int) -> TenantStatusView:
    """Derive trial expiry; an active tenant is never expired"""
    expired = tenant.status != TenantStatus.ACTIVE and now > tenant.trial_ends_at
    return TenantStatusView(
        slug=tenant.slug,
        status=tenant.status,
        trial_ends_at=tenant.trial_ends_at,
        trial_expired=expired,
        paid_at=tenant.paid_at,
    )
