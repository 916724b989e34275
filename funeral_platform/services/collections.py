"""
Tenant-scoped resource collections

One JSON document per resource type, shaped as a map of tenant slug to an
insertion-ordered list of records. Every operation is keyed by slug, so no
query path can reach another tenant's records.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
import structlog

from funeral_platform.core.exceptions import BadRequestError, NotFoundError
from funeral_platform.core.store import JsonStore
from funeral_platform.models.resources import ResourceKind
from funeral_platform.utils.clock import now_ms, utc_iso

logger = structlog.get_logger(__name__)

# Generated fields callers may never set
SYSTEM_FIELDS = ("id", "tenantSlug", "createdAt")


def validation_message(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(p) for p in item.get("loc", ()))
        msg = "unknown field" if item.get("type") == "extra_forbidden" else item.get("msg")
        parts.append(f"{field}: {msg}" if field else str(msg))
    return "; ".join(parts)


class ResourceCollection:
    """CRUD over one resource type, partitioned by tenant slug"""

    def __init__(self, store: JsonStore, path: Path, kind: ResourceKind):
        self.store = store
        self.path = path
        self.kind = kind

    def validate(self, fields: Dict[str, Any], partial: bool = False):
        """Check `fields` against the create (or partial-update) schema"""
        model = self.kind.update_model if partial else self.kind.create_model
        if not isinstance(fields, dict):
            raise BadRequestError("Expected a JSON object")
        system = [f for f in SYSTEM_FIELDS if f in fields]
        if system:
            raise BadRequestError(f"Read-only fields: {', '.join(system)}")
        try:
            return model.model_validate(fields)
        except ValidationError as e:
            raise BadRequestError(f"Invalid {self.kind.label.lower()}: {validation_message(e)}")

    def _new_id(self, records: List[dict], now: int) -> str:
        taken = {r.get("id") for r in records}
        stamp = now
        while f"{self.kind.id_prefix}{stamp}" in taken:
            stamp += 1
        return f"{self.kind.id_prefix}{stamp}"

    def list(self, tenant_slug: str) -> List[dict]:
        records = self.store.read(self.path, {}).get(tenant_slug, [])
        return records if isinstance(records, list) else []

    def count(self, tenant_slug: str) -> int:
        return len(self.list(tenant_slug))

    def get(self, tenant_slug: str, record_id: str) -> dict:
        for record in self.list(tenant_slug):
            if record.get("id") == record_id:
                return record
        raise NotFoundError(self.kind.label, record_id)

    def add(
        self,
        tenant_slug: str,
        fields: Dict[str, Any],
        now: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> dict:
        """
        Validate caller `fields` and append a new record.

        `extra` holds server-set values such as an uploaded photo path; they
        bypass the caller schema.
        """
        data = self.validate(fields)
        with self.store.transaction(self.path, {}) as document:
            records = document.setdefault(tenant_slug, [])
            record = {
                "id": self._new_id(records, now if now is not None else now_ms()),
                "tenantSlug": tenant_slug,
                **data.model_dump(by_alias=True, exclude_none=True),
                **(extra or {}),
                "createdAt": utc_iso(),
            }
            records.append(record)
        logger.info(f"{self.kind.label} created: {record['id']}", tenant=tenant_slug)
        return record

    def update(self, tenant_slug: str, record_id: str, fields: Dict[str, Any]) -> dict:
        """Merge only the fields present in `fields`; everything else is kept"""
        data = self.validate(fields, partial=True)
        changes = data.model_dump(by_alias=True, include=data.model_fields_set)
        with self.store.transaction(self.path, {}) as document:
            for record in document.get(tenant_slug, []):
                if record.get("id") == record_id:
                    record.update(changes)
                    if changes:
                        logger.info(f"{self.kind.label} updated: {record_id}", tenant=tenant_slug)
                    return record
        raise NotFoundError(self.kind.label, record_id)

    def delete(self, tenant_slug: str, record_id: str) -> None:
        with self.store.transaction(self.path, {}) as document:
            records = document.get(tenant_slug, [])
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                raise NotFoundError(self.kind.label, record_id)
            document[tenant_slug] = remaining
        logger.info(f"{self.kind.label} deleted: {record_id}", tenant=tenant_slug)

    def purge(self, tenant_slug: str) -> int:
        """Drop every record of a tenant; used when the tenant is deleted"""
        with self.store.transaction(self.path, {}) as document:
            removed = document.pop(tenant_slug, [])
        return len(removed)
