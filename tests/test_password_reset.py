"""
Tests for the admin-key reset flow
"""

from unittest.mock import MagicMock

import pytest

from funeral_platform.core.exceptions import ForbiddenError, InvalidOrExpiredError
from funeral_platform.scripts import expire_reset_tokens as cleanup_job
from funeral_platform.services.email_service import EmailService
from funeral_platform.services.password_reset import PasswordResetService
from funeral_platform.utils.clock import minutes_ms


@pytest.fixture
def email_service():
    return MagicMock(spec=EmailService)


@pytest.fixture
def resets(registry, credentials, email_service):
    return PasswordResetService(registry, credentials, email_service, expire_minutes=30)


def test_unknown_email_is_silent(resets, email_service):
    assert resets.request_reset("nobody@example.com") is None
    email_service.send_reset_email.assert_not_called()


def test_reset_end_to_end(resets, registry, credentials, email_service, tenant, tenant_key):
    resets.request_reset("GRACE@example.com", now=1_000)

    stored = registry.find_by_slug(tenant.slug)
    assert stored.reset_token
    assert stored.reset_expiry == 1_000 + minutes_ms(30)
    email_service.send_reset_email.assert_called_once_with(
        to_email=tenant.email,
        funeral_home_name=tenant.funeral_home_name,
        reset_token=stored.reset_token,
    )

    slug = resets.confirm_reset(stored.reset_token, "brand-new-key", now=2_000)

    assert slug == tenant.slug
    assert credentials.verify_tenant_admin(tenant.slug, "brand-new-key").slug == tenant.slug
    with pytest.raises(ForbiddenError):
        credentials.verify_tenant_admin(tenant.slug, tenant_key)

    cleared = registry.find_by_slug(tenant.slug)
    assert cleared.reset_token is None
    assert cleared.reset_expiry is None


def test_token_is_single_use(resets, registry, tenant):
    resets.request_reset(tenant.email, now=1_000)
    token = registry.find_by_slug(tenant.slug).reset_token
    resets.confirm_reset(token, "brand-new-key", now=2_000)

    with pytest.raises(InvalidOrExpiredError):
        resets.confirm_reset(token, "another-new-key", now=3_000)


def test_expired_token_rejected(resets, registry, credentials, tenant, tenant_key):
    resets.request_reset(tenant.email, now=1_000)
    token = registry.find_by_slug(tenant.slug).reset_token

    with pytest.raises(InvalidOrExpiredError) as exc_info:
        resets.confirm_reset(token, "brand-new-key", now=1_000 + minutes_ms(30) + 1)
    assert exc_info.value.code == "INVALID_OR_EXPIRED"
    assert credentials.verify_tenant_admin(tenant.slug, tenant_key).slug == tenant.slug


@pytest.mark.parametrize("token", ["", "not-a-real-token"])
def test_unknown_token_rejected(resets, tenant, token):
    with pytest.raises(InvalidOrExpiredError):
        resets.confirm_reset(token, "brand-new-key")


def test_expire_reset_tokens(resets, registry, tenant, other_tenant):
    resets.request_reset(tenant.email, now=1_000)
    resets.request_reset(other_tenant.email, now=1_000 + minutes_ms(60))

    cleared = resets.expire_reset_tokens(now=1_000 + minutes_ms(45))

    assert cleared == 1
    assert registry.find_by_slug(tenant.slug).reset_token is None
    assert registry.find_by_slug(other_tenant.slug).reset_token is not None


def test_public_view_hides_reset_state(resets, registry, tenant):
    resets.request_reset(tenant.email)
    view = registry.find_by_slug(tenant.slug).public_view()

    assert "resetToken" not in view
    assert "resetExpiry" not in view


def test_cleanup_job_clears_lapsed_tokens(monkeypatch, settings, resets, registry, tenant):
    monkeypatch.setattr(cleanup_job, "get_settings", lambda: settings)
    resets.request_reset(tenant.email, now=1_000)

    assert cleanup_job.expire_reset_tokens() == {"expired": 1}
    assert registry.find_by_slug(tenant.slug).reset_token is None
