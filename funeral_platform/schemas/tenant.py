"""
Pydantic schemas for tenant provisioning and settings
"""

from typing import Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from funeral_platform.models.tenant import TenantStatus

NAME_ALIASES = AliasChoices("funeralHomeName", "name", "funeral_home_name")


class SignupRequest(BaseModel):
    funeral_home_name: str = Field(..., min_length=1, max_length=200, validation_alias=NAME_ALIASES)
    email: EmailStr


class TenantSettingsUpdate(BaseModel):
    """Fields a tenant admin may change; unknown keys are rejected"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    funeral_home_name: Optional[str] = Field(
        default=None, min_length=1, max_length=200, validation_alias=NAME_ALIASES,
    )
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    logo: Optional[str] = None
    brand_color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    features: Optional[Dict[str, bool]] = None

    def changes(self) -> dict:
        """Explicitly supplied fields, keyed by python attribute name"""
        return self.model_dump(include=self.model_fields_set)


class TenantAdminUpdate(TenantSettingsUpdate):
    """Super-admin edit: settings plus lifecycle status"""
    status: Optional[TenantStatus] = None


class TenantCreate(TenantSettingsUpdate):
    """Super-admin tenant creation"""
    funeral_home_name: str = Field(..., min_length=1, max_length=200, validation_alias=NAME_ALIASES)
    email: EmailStr
    slug: Optional[str] = None
    admin_key: Optional[str] = Field(default=None, min_length=8)
    status: TenantStatus = TenantStatus.TRIAL


class MarkPaidRequest(BaseModel):
    slug: str = Field(..., min_length=1)
