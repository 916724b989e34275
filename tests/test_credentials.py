"""
Unit tests for the admin credential store and tenant-admin gate
"""

from unittest.mock import patch

import pytest

from funeral_platform.core.exceptions import (
    BadRequestError, ForbiddenError, NotFoundError, PaymentRequiredError,
)
from funeral_platform.models.tenant import TenantStatus
from funeral_platform.services.credentials import generate_admin_key


def test_generated_keys_are_unique_and_long_enough():
    keys = {generate_admin_key() for _ in range(20)}
    assert len(keys) == 20
    assert all(k.startswith("KEY-") and len(k) >= 8 for k in keys)


def test_keys_are_stored_hashed(credentials, settings, store, tenant, tenant_key):
    record = store.read(settings.admin_keys_path, {})[tenant.slug]

    assert tenant_key not in record["adminKeyHash"]
    assert credentials.has_credential(tenant.slug)
    assert credentials.key_version(tenant.slug) == record["keyVersion"]


def test_setting_a_key_changes_its_version(credentials, tenant):
    before = credentials.key_version(tenant.slug)
    credentials.set_key(tenant.slug, "replacement-key")

    assert before
    assert credentials.key_version(tenant.slug) not in (None, before)


def test_short_key_rejected(credentials, tenant):
    with pytest.raises(BadRequestError):
        credentials.set_key(tenant.slug, "short")


def test_correct_key_returns_tenant(credentials, tenant, tenant_key):
    assert credentials.verify_tenant_admin(tenant.slug, tenant_key).slug == tenant.slug


def test_wrong_key_forbidden(credentials, tenant):
    with pytest.raises(ForbiddenError):
        credentials.verify_tenant_admin(tenant.slug, "not-the-key")


def test_unknown_tenant_checked_before_key(credentials):
    with patch("funeral_platform.services.credentials.verify_secret") as verify:
        with pytest.raises(NotFoundError):
            credentials.verify_tenant_admin("ghost-home", "whatever-key")
    verify.assert_not_called()


def test_tenant_without_credential_is_not_found(credentials, registry, tenant_key):
    orphan = registry.create("Orphan Home", "orphan@example.com")
    with pytest.raises(NotFoundError):
        credentials.verify_tenant_admin(orphan.slug, tenant_key)


def test_suspended_tenant_forbidden(credentials, registry, tenant, tenant_key):
    registry.update(tenant.slug, {"status": TenantStatus.SUSPENDED})

    with pytest.raises(ForbiddenError) as exc_info:
        credentials.verify_tenant_admin(tenant.slug, tenant_key)
    assert exc_info.value.code == "TENANT_SUSPENDED"


def test_expired_trial_requires_payment(credentials, tenant, tenant_key):
    with pytest.raises(PaymentRequiredError) as exc_info:
        credentials.verify_tenant_admin(tenant.slug, tenant_key, now=tenant.trial_ends_at + 1)
    assert exc_info.value.code == "TRIAL_EXPIRED"
    assert exc_info.value.status_code == 402


def test_paid_tenant_passes_after_trial(credentials, registry, tenant, tenant_key):
    registry.mark_paid(tenant.slug)
    verified = credentials.verify_tenant_admin(tenant.slug, tenant_key, now=tenant.trial_ends_at + 1)

    assert verified.status == TenantStatus.ACTIVE


def test_remove(credentials, tenant, tenant_key):
    assert credentials.remove(tenant.slug) is True
    assert credentials.remove(tenant.slug) is False
    assert credentials.key_version(tenant.slug) is None
    with pytest.raises(NotFoundError):
        credentials.verify_tenant_admin(tenant.slug, tenant_key)
