"""
Unit tests for the tenant registry
"""

import pytest

from funeral_platform.core.exceptions import BadRequestError, NotFoundError
from funeral_platform.models.tenant import FEATURES, TenantStatus
from funeral_platform.utils.clock import days_ms


def test_create_tenant_defaults(registry):
    tenant = registry.create("St. Mary's Home", "office@stmarys.example", now=1_000)

    assert tenant.slug == "st-mary-s-home"
    assert tenant.status == TenantStatus.TRIAL
    assert tenant.created_at == 1_000
    assert tenant.trial_ends_at == 1_000 + days_ms(14)
    assert tenant.paid_at is None
    assert set(tenant.features) == set(FEATURES)
    assert all(tenant.features.values())


def test_colliding_names_get_numbered_slugs(registry):
    slugs = [
        registry.create("Grace Home", f"grace{i}@example.com").slug
        for i in range(4)
    ]
    assert slugs == ["grace-home", "grace-home-1", "grace-home-2", "grace-home-3"]


def test_explicit_slug_is_slugified(registry):
    tenant = registry.create("Grace Home", "grace@example.com", slug="Grace Chapel")
    assert tenant.slug == "grace-chapel"


@pytest.mark.parametrize("name, expected", [
    ("Memorials", "memorials-1"),
    ("Tenant", "tenant-1"),
    ("Admin", "admin-1"),
    ("Signup", "signup-1"),
])
def test_route_segments_are_never_used_as_slugs(registry, name, expected):
    assert registry.create(name, f"{name.lower()}@example.com").slug == expected


def test_explicit_slug_cannot_shadow_routes(registry):
    tenant = registry.create("Grace Home", "grace@example.com", slug="tenants")
    assert tenant.slug == "tenants-1"


def test_duplicate_email_rejected(registry):
    registry.create("Grace Home", "grace@example.com")
    with pytest.raises(BadRequestError):
        registry.create("Other Home", "GRACE@example.com")


@pytest.mark.parametrize("name, email", [("", "a@example.com"), ("Home", ""), ("!!!", "a@example.com")])
def test_create_requires_name_and_email(registry, name, email):
    with pytest.raises(BadRequestError):
        registry.create(name, email)
    assert registry.list() == []


def test_stored_document_uses_camel_case(registry, settings, store):
    registry.create("Grace Home", "grace@example.com")
    document = store.read(settings.tenants_path, [])[0]

    assert document["funeralHomeName"] == "Grace Home"
    assert "trialEndsAt" in document
    assert "resetToken" not in document


def test_find_by_slug_and_email(registry, tenant):
    assert registry.find_by_slug(tenant.slug).email == "grace@example.com"
    assert registry.find_by_email("Grace@Example.com").slug == tenant.slug
    assert registry.find_by_email("nobody@example.com") is None
    with pytest.raises(NotFoundError):
        registry.find_by_slug("nope")


def test_update_settings_merges_features(registry, tenant):
    updated = registry.update_settings(tenant.slug, {
        "phone": "555-0100",
        "features": {"Inventory Tracking": False},
    })

    assert updated.phone == "555-0100"
    assert updated.features["Inventory Tracking"] is False
    assert updated.features["Memorial Pages"] is True
    assert registry.find_by_slug(tenant.slug).phone == "555-0100"


def test_unknown_feature_rejected(registry, tenant):
    with pytest.raises(BadRequestError):
        registry.update_settings(tenant.slug, {"features": {"Teleportation": True}})


def test_slug_is_immutable(registry, tenant):
    with pytest.raises(BadRequestError):
        registry.update(tenant.slug, {"slug": "renamed"})


def test_update_rejects_email_of_another_tenant(registry, tenant, other_tenant):
    with pytest.raises(BadRequestError):
        registry.update(tenant.slug, {"email": other_tenant.email})


def test_update_unknown_tenant(registry):
    with pytest.raises(NotFoundError):
        registry.update("ghost", {"phone": "1"})


def test_mark_paid(registry, tenant):
    paid = registry.mark_paid(tenant.slug, now=5_000)

    assert paid.status == TenantStatus.ACTIVE
    assert paid.paid_at == 5_000


def test_status_of_expired_trial(registry, tenant):
    view = registry.compute_status(tenant, now=tenant.trial_ends_at + 1)

    assert view.trial_expired is True
    assert view.status == TenantStatus.TRIAL


def test_status_within_trial(registry, tenant):
    assert registry.compute_status(tenant, now=tenant.trial_ends_at).trial_expired is False


def test_active_tenant_never_expires(registry, tenant):
    paid = registry.mark_paid(tenant.slug)
    view = registry.compute_status(paid, now=paid.trial_ends_at + days_ms(365))

    assert view.trial_expired is False


def test_delete(registry, tenant):
    assert registry.delete(tenant.slug) is True
    assert registry.delete(tenant.slug) is False
    assert registry.list() == []


def test_malformed_records_are_skipped(registry, settings, store, tenant):
    with store.transaction(settings.tenants_path, []) as documents:
        documents.append({"slug": "broken"})

    assert [t.slug for t in registry.list()] == [tenant.slug]
