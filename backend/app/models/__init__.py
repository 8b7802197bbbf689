"""Aggregate model imports for Alembic auto-detection."""

# Shared
from app.models.public.organization import Organization  # noqa: F401

# Organization-scoped
from app.models.tenant.farmer import Farmer  # noqa: F401
from app.models.tenant.livestock import (  # noqa: F401
    BreedingRecord,
    FeedingRecord,
    HealthRecord,
    Livestock,
)
from app.models.tenant.crop import Crop  # noqa: F401
from app.models.tenant.financial_service import FinancialService  # noqa: F401
from app.models.tenant.extension_service import ExtensionService  # noqa: F401
from app.models.tenant.application import Application  # noqa: F401
from app.models.tenant.growth_record import GrowthRecord  # noqa: F401
