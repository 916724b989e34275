"""
Pydantic schemas for authentication and tokens
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class TokenPayload(BaseModel):
    """JWT token payload"""
    sub: str = Field(..., description="Super-admin email or tenant slug")
    role: str = Field(..., description="superadmin or tenant_admin")
    type: str = Field(..., description="access or refresh")
    tenant: Optional[str] = Field(default=None, description="Tenant slug for tenant-admin tokens")
    kv: Optional[str] = Field(default=None, description="Admin key version for tenant-admin tokens")
    exp: datetime = Field(..., description="Expiration time")
    iat: datetime = Field(..., description="Issued at")


class SuperadminLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("refreshToken", "refresh_token"),
    )


class TokenResponse(BaseModel):
    """Token response"""
    success: bool = True
    token: str
    refreshToken: Optional[str] = None


class AdminLoginRequest(BaseModel):
    """Tenant admin login; accepts both historical field spellings"""
    tenant: str = Field(..., min_length=1, validation_alias=AliasChoices("tenant", "slug"))
    key: str = Field(..., min_length=1, validation_alias=AliasChoices("key", "adminKey"))


class ResetRequest(BaseModel):
    email: str = Field(..., min_length=1)


class ResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("password", "newKey", "adminKey"),
    )
