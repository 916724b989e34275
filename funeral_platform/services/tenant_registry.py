"""
Tenant registry - CRUD over tenants.json plus slug and trial rules
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
import structlog

from funeral_platform.core.exceptions import BadRequestError, NotFoundError
from funeral_platform.core.store import JsonStore
from funeral_platform.models.tenant import (
    FEATURES, Tenant, TenantStatus, TenantStatusView, compute_status,
    default_features,
)
from funeral_platform.utils.clock import days_ms, now_ms
from funeral_platform.utils.slugify import slugify

logger = structlog.get_logger(__name__)


def _load_tenants(documents: List[dict]) -> List[Tenant]:
    tenants = []
    for document in documents:
        try:
            tenants.append(Tenant.model_validate(document))
        except ValidationError as e:
            logger.warning(f"Skipping malformed tenant record {document.get('slug')!r}: {e}")
    return tenants


def merge_features(current: Dict[str, bool], changes: Dict[str, bool]) -> Dict[str, bool]:
    unknown = sorted(set(changes) - set(FEATURES))
    if unknown:
        raise BadRequestError(f"Unknown features: {', '.join(unknown)}")
    merged = dict(current)
    merged.update(changes)
    return merged


# Static path segments that share a position with {tenant_slug} in routes
RESERVED_SLUGS = frozenset({
    "admin", "api", "auth", "health", "memorial", "memorials", "signup",
    "superadmin", "tenant", "tenants", "uploads",
})


def unique_slug(base: str, taken: set) -> str:
    """Return `base`, or `base-1`, `base-2`, ... whichever is free first"""
    taken = set(taken) | RESERVED_SLUGS
    if base not in taken:
        return base
    n = 1
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


class TenantRegistry:
    """Tenant list backed by one JSON array document"""

    def __init__(self, store: JsonStore, path: Path, trial_days: int = 14):
        self.store = store
        self.path = path
        self.trial_days = trial_days

    def list(self) -> List[Tenant]:
        return _load_tenants(self.store.read(self.path, []))

    def create(
        self,
        name: str,
        email: str,
        slug: Optional[str] = None,
        status: TenantStatus = TenantStatus.TRIAL,
        now: Optional[int] = None,
        **fields: Any,
    ) -> Tenant:
        """
        Register a tenant. The slug is derived from `slug` when given, else
        from `name`; a collision is resolved by suffixing -1, -2, ...
        """
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            raise BadRequestError("Funeral home name and email are required")

        base = slugify(slug or name)
        if not base:
            raise BadRequestError("Funeral home name must contain letters or digits")

        if fields.get("features") is None:
            fields.pop("features", None)
        else:
            fields["features"] = merge_features(default_features(), fields["features"])

        now = now if now is not None else now_ms()
        with self.store.transaction(self.path, []) as documents:
            if any(str(d.get("email", "")).lower() == email.lower() for d in documents):
                raise BadRequestError("Email already registered")
            taken = {d.get("slug") for d in documents}
            try:
                tenant = Tenant(
                    slug=unique_slug(base, taken),
                    funeral_home_name=name,
                    email=email,
                    status=status,
                    created_at=now,
                    trial_ends_at=now + days_ms(self.trial_days),
                    **fields,
                )
            except ValidationError as e:
                raise BadRequestError(f"Invalid tenant fields: {e.errors()[0]['msg']}")
            documents.append(tenant.to_document())

        logger.info(f"Tenant created: {tenant.slug}")
        return tenant

    def find_by_slug(self, slug: str) -> Tenant:
        for tenant in self.list():
            if tenant.slug == slug:
                return tenant
        raise NotFoundError("Tenant", slug)

    def find_by_email(self, email: str) -> Optional[Tenant]:
        email = (email or "").strip().lower()
        if not email:
            return None
        for tenant in self.list():
            if tenant.email.lower() == email:
                return tenant
        return None

    def update(self, slug: str, changes: Dict[str, Any]) -> Tenant:
        """Shallow-merge `changes` (python field names) into the stored tenant"""
        if "slug" in changes and changes["slug"] != slug:
            raise BadRequestError("Tenant slug cannot be changed")

        with self.store.transaction(self.path, []) as documents:
            if changes.get("email"):
                email = str(changes["email"]).lower()
                if any(
                    d.get("slug") != slug and str(d.get("email", "")).lower() == email
                    for d in documents
                ):
                    raise BadRequestError("Email already registered")
            for index, document in enumerate(documents):
                if document.get("slug") != slug:
                    continue
                current = Tenant.model_validate(document)
                merged = current.model_dump()
                merged.update(changes)
                try:
                    tenant = Tenant.model_validate(merged)
                except ValidationError as e:
                    raise BadRequestError(f"Invalid tenant fields: {e.errors()[0]['msg']}")
                documents[index] = tenant.to_document()
                return tenant
        raise NotFoundError("Tenant", slug)

    def update_settings(self, slug: str, changes: Dict[str, Any]) -> Tenant:
        """Apply a settings change; feature toggles merge into the existing map"""
        changes = dict(changes)
        if "features" in changes and changes["features"] is None:
            del changes["features"]
        elif changes.get("features") is not None:
            current = self.find_by_slug(slug).features
            changes["features"] = merge_features(current, changes["features"])
        tenant = self.update(slug, changes)
        logger.info(f"Tenant settings updated: {slug}", fields=sorted(changes))
        return tenant

    def mark_paid(self, slug: str, now: Optional[int] = None) -> Tenant:
        now = now if now is not None else now_ms()
        tenant = self.update(slug, {"status": TenantStatus.ACTIVE, "paid_at": now})
        logger.info(f"Tenant marked paid: {slug}")
        return tenant

    def compute_status(self, tenant: Tenant, now: Optional[int] = None) -> TenantStatusView:
        return compute_status(tenant, now if now is not None else now_ms())

    def delete(self, slug: str) -> bool:
        with self.store.transaction(self.path, []) as documents:
            remaining = [d for d in documents if d.get("slug") != slug]
            existed = len(remaining) != len(documents)
            documents[:] = remaining
        if existed:
            logger.info(f"Tenant deleted: {slug}")
        return existed
