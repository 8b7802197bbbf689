"""Fertilizer / pesticide application repository."""

from app.repositories.base import EntityRepository
from app.schemas.application import (
    ApplicationCreate,
    ApplicationFilters,
    ApplicationOut,
    ApplicationUpdate,
)


class ApplicationRepository(EntityRepository[ApplicationOut]):
    table = "applications"
    resource = "applications"
    label = "Application"

    out_schema = ApplicationOut
    create_schema = ApplicationCreate
    update_schema = ApplicationUpdate
    filters_schema = ApplicationFilters

    search_columns = ("product_name", "target_pest_disease")
    status_column = None
    equality_filters = ("product_type", "farmer_id", "crop_id")

    group_columns = {"product_type": "unknown", "application_method": "unspecified"}
    sum_columns = ("cost",)
