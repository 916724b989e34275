"""
Funeral Services Platform - Main Application Entry Point
Multi-tenant memorials, scheduling and accounting for funeral homes
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import structlog

from funeral_platform import __version__
from funeral_platform.api import auth, dashboard, memorials, superadmin, tenants
from funeral_platform.api.resources import build_resource_router
from funeral_platform.core.config import get_settings
from funeral_platform.core.dependencies import get_appointments, get_invoices, get_memorials
from funeral_platform.core.exception_handlers import register_exception_handlers
from funeral_platform.core.logging import configure_logging
from funeral_platform.core.store import get_store
from funeral_platform.services.superadmins import SuperadminService

settings = get_settings()
configure_logging(debug=settings.DEBUG)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Honour a test override of the settings dependency
    active = app.dependency_overrides.get(get_settings, get_settings)()

    logger.info("Initializing funeral platform backend", data_dir=str(active.DATA_DIR))
    active.DATA_DIR.mkdir(parents=True, exist_ok=True)
    active.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)

    seeded = SuperadminService(get_store(), active).ensure_seed()
    if seeded:
        logger.info(f"Seeded super-admin {seeded.email}")

    yield

    logger.info("Shutting down funeral platform backend")


# Create FastAPI application
app = FastAPI(
    title="Funeral Services Platform API",
    description="Multi-tenant funeral home platform: memorials, appointments, invoices",
    version=__version__,
    lifespan=lifespan,
)

# Configure middleware stack
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(tenants.router, prefix="/api", tags=["tenants"])
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(superadmin.router, prefix="/superadmin", tags=["superadmin"])
app.include_router(dashboard.router, prefix="/api/{tenant_slug}/admin", tags=["dashboard"])
app.include_router(
    build_resource_router(get_memorials, "memorial", include_create=False),
    prefix="/api/{tenant_slug}/admin/memorials",
    tags=["memorials"],
)
app.include_router(
    build_resource_router(get_appointments, "appt"),
    prefix="/api/{tenant_slug}/admin/appointments",
    tags=["appointments"],
)
app.include_router(
    build_resource_router(get_invoices, "invoice"),
    prefix="/api/{tenant_slug}/admin/accounting/invoices",
    tags=["invoices"],
)
# After the tenant admin routers so /api/{slug}/admin/... is matched first
app.include_router(memorials.router, prefix="/api", tags=["memorials"])

app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False), name="uploads")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "funeral-platform-api"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Funeral Services Platform API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "funeral_platform.main:app",
        host="0.0.0.0",
        port=10000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
