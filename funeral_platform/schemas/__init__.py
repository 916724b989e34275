"""
Schemas module
"""

from funeral_platform.schemas.token import (
    AdminLoginRequest, RefreshRequest, ResetConfirm, ResetRequest,
    SuperadminLogin, TokenPayload, TokenResponse,
)
from funeral_platform.schemas.tenant import (
    MarkPaidRequest, SignupRequest, TenantAdminUpdate, TenantCreate,
    TenantSettingsUpdate,
)

__all__ = [
    "AdminLoginRequest",
    "MarkPaidRequest",
    "RefreshRequest",
    "ResetConfirm",
    "ResetRequest",
    "SignupRequest",
    "SuperadminLogin",
    "TenantAdminUpdate",
    "TenantCreate",
    "TenantSettingsUpdate",
    "TokenPayload",
    "TokenResponse",
]
