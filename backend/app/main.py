import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware.exceptions import register_exception_handlers
from app.routers import (
    applications,
    crops,
    extension_services,
    farmers,
    financial_services,
    geocoding,
    growth_records,
    health,
    livestock,
    organizations,
    uploads,
)
from app.services.lifecycle import lifespan

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="AgriDesk",
    description="Farm management for agricultural organizations",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
# Public
app.include_router(health.router)

# Organization-scoped (require organization_id in JWT)
app.include_router(organizations.router, prefix="/api/organizations", tags=["organizations"])
app.include_router(farmers.router, prefix="/api/farmers", tags=["farmers"])
app.include_router(livestock.router, prefix="/api/livestock", tags=["livestock"])
app.include_router(crops.router, prefix="/api/crops", tags=["crops"])
app.include_router(financial_services.router, prefix="/api/financial-services", tags=["financial services"])
app.include_router(extension_services.router, prefix="/api/extension-services", tags=["extension services"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(growth_records.router, prefix="/api/growth-records", tags=["growth records"])
app.include_router(uploads.router, prefix="/api/uploads", tags=["uploads"])
app.include_router(geocoding.router, prefix="/api/geocoding", tags=["geocoding"])
