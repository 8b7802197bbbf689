"""Crop repository."""

from app.repositories.base import EntityRepository
from app.schemas.crop import CropCreate, CropFilters, CropOut, CropUpdate


class CropRepository(EntityRepository[CropOut]):
    table = "crops"
    resource = "crops"
    label = "Crop"

    out_schema = CropOut
    create_schema = CropCreate
    update_schema = CropUpdate
    filters_schema = CropFilters

    search_columns = ("crop_name", "variety")
    equality_filters = ("farmer_id", "season")

    group_columns = {"status": "unknown", "crop_name": "unknown", "season": "unspecified"}
    sum_columns = ("farm_area", "quantity_planted", "quantity_harvested")
