"""
Admin credential store and tenant-admin auth gate

Credentials live in admin_keys.json as a map of tenant slug to a record
holding a salted hash of the tenant's admin key and a key version. The
version changes whenever the key is set, and tenant-admin tokens carry it so
that replacing the key (or recreating the tenant) revokes older sessions.
"""

import secrets
from pathlib import Path
from typing import Optional

import structlog

from funeral_platform.core.auth import hash_secret, verify_secret
from funeral_platform.core.exceptions import (
    BadRequestError, ForbiddenError, NotFoundError, PaymentRequiredError,
)
from funeral_platform.core.store import JsonStore
from funeral_platform.models.tenant import Tenant, TenantStatus, compute_status
from funeral_platform.services.tenant_registry import TenantRegistry
from funeral_platform.utils.clock import now_ms

logger = structlog.get_logger(__name__)

MIN_KEY_LENGTH = 8


def generate_admin_key() -> str:
    return "KEY-" + secrets.token_hex(8).upper()


def ensure_tenant_access(tenant: Tenant, now: Optional[int] = None) -> None:
    """Reject suspended tenants and tenants whose trial lapsed unpaid"""
    if tenant.status == TenantStatus.SUSPENDED:
        raise ForbiddenError("Tenant account is suspended", code="TENANT_SUSPENDED")
    view = compute_status(tenant, now if now is not None else now_ms())
    if view.trial_expired:
        raise PaymentRequiredError()


class AdminCredentialStore:
    def __init__(self, store: JsonStore, path: Path, registry: TenantRegistry):
        self.store = store
        self.path = path
        self.registry = registry

    def has_credential(self, slug: str) -> bool:
        return slug in self.store.read(self.path, {})

    def set_key(self, slug: str, key: str) -> None:
        if not key or len(key) < MIN_KEY_LENGTH:
            raise BadRequestError(f"Admin key must be at least {MIN_KEY_LENGTH} characters")
        with self.store.transaction(self.path, {}) as records:
            records[slug] = {
                "adminKeyHash": hash_secret(key),
                "keyVersion": secrets.token_hex(8),
                "updatedAt": now_ms(),
            }
        logger.info(f"Admin key set for tenant {slug}")

    def key_version(self, slug: str) -> Optional[str]:
        record = self.store.read(self.path, {}).get(slug)
        return record.get("keyVersion") if isinstance(record, dict) else None

    def remove(self, slug: str) -> bool:
        with self.store.transaction(self.path, {}) as records:
            existed = records.pop(slug, None) is not None
        return existed

    def verify_tenant_admin(self, slug: str, key: str, now: Optional[int] = None) -> Tenant:
        """
        Check a caller-supplied admin key.

        Raises NotFoundError when the tenant has no credential (checked before
        any key comparison), ForbiddenError on a wrong key or a suspended
        tenant, PaymentRequiredError when the trial expired unpaid.
        """
        record = self.store.read(self.path, {}).get(slug) if slug else None
        if not isinstance(record, dict):
            raise NotFoundError("Tenant", slug)
        tenant = self.registry.find_by_slug(slug)

        if not verify_secret(key, record.get("adminKeyHash")):
            logger.info(f"Admin key rejected for tenant {slug}")
            raise ForbiddenError("Invalid admin key")

        ensure_tenant_access(tenant, now)
        return tenant
