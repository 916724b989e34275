"""
Super-admin account model
"""

from pydantic import Field

from funeral_platform.models.tenant import CamelModel


class Superadmin(CamelModel):
    """Platform operator allowed to provision tenants"""

    email: str
    password_hash: str = Field(..., description="passlib hash, never the raw password")
    created_at: int
