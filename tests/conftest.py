"""
Test configuration for pytest
"""

import os
import tempfile
from datetime import timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Test environment variables, applied before the app module reads settings
_scratch = tempfile.mkdtemp(prefix="funeral-platform-tests-")
os.environ["DATA_DIR"] = os.path.join(_scratch, "data")
os.environ["UPLOADS_DIR"] = os.path.join(_scratch, "uploads")
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["DEBUG"] = "false"

from funeral_platform.core.auth import ROLE_TENANT_ADMIN, create_access_token  # noqa: E402
from funeral_platform.core.config import Settings, get_settings  # noqa: E402
from funeral_platform.core.dependencies import (  # noqa: E402
    get_appointments, get_credentials, get_invoices, get_memorials, get_registry,
)
from funeral_platform.core.store import JsonStore  # noqa: E402
from funeral_platform.main import app  # noqa: E402

SUPERADMIN_EMAIL = "root@example.com"
SUPERADMIN_PASSWORD = "root-password-123"
WEBHOOK_SECRET = "test-webhook-secret"
TENANT_KEY = "grace-admin-key"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated to a fresh temporary data and uploads directory"""
    return Settings(
        DATA_DIR=tmp_path / "data",
        UPLOADS_DIR=tmp_path / "uploads",
        JWT_SECRET_KEY="test-jwt-secret",
        PAYMENT_WEBHOOK_SECRET=WEBHOOK_SECRET,
        SUPERADMIN_EMAIL=SUPERADMIN_EMAIL,
        SUPERADMIN_PASSWORD=SUPERADMIN_PASSWORD,
        SMTP_HOST=None,
    )


@pytest.fixture
def store() -> JsonStore:
    return JsonStore()


@pytest.fixture
def registry(settings, store):
    return get_registry(settings, store)


@pytest.fixture
def credentials(settings, store, registry):
    return get_credentials(settings, store, registry)


@pytest.fixture
def memorials(settings, store):
    return get_memorials(settings, store)


@pytest.fixture
def appointments(settings, store):
    return get_appointments(settings, store)


@pytest.fixture
def invoices(settings, store):
    return get_invoices(settings, store)


@pytest.fixture
def tenant_key() -> str:
    return TENANT_KEY


@pytest.fixture
def tenant(registry, credentials, tenant_key):
    """A trial tenant with a known admin key"""
    created = registry.create("Grace Funeral Home", "grace@example.com")
    credentials.set_key(created.slug, tenant_key)
    return created


@pytest.fixture
def other_tenant(registry, credentials):
    created = registry.create("Hillside Chapel", "hillside@example.com")
    credentials.set_key(created.slug, "hillside-admin-key")
    return created


@pytest.fixture
def auth_header(settings, credentials):
    """Build an Authorization header carrying a tenant-admin token"""
    def build(slug: str, expired: bool = False) -> dict:
        token = create_access_token(
            slug,
            ROLE_TENANT_ADMIN,
            tenant=slug,
            expires_delta=timedelta(minutes=-5) if expired else None,
            settings=settings,
            key_version=credentials.key_version(slug),
        )
        return {"Authorization": f"Bearer {token}"}
    return build


@pytest.fixture
def tenant_headers(auth_header, tenant) -> dict:
    return auth_header(tenant.slug)


@pytest.fixture
def api_app(settings):
    """The application with settings pointed at the test directories"""
    app.dependency_overrides[get_settings] = lambda: settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app) -> Generator[TestClient, None, None]:
    with TestClient(api_app) as test_client:
        yield test_client


@pytest.fixture
def superadmin_headers(client) -> dict:
    response = client.post(
        "/superadmin/login",
        json={"email": SUPERADMIN_EMAIL, "password": SUPERADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
