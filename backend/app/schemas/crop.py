"""Pydantic schemas for Crop CRUD operations."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.common import ListFilters
from app.schemas.validators import sanitize_string, validate_date_order, validate_positive

CropStatus = Literal["planted", "growing", "ready_for_harvest", "harvested", "diseased"]


class _CropChecks(BaseModel):
    @field_validator("farm_area", "quantity_planted", check_fields=False)
    @classmethod
    def _positive(cls, v, info):
        return validate_positive(v, info.field_name.replace("_", " ").capitalize())

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.planting_date, self.expected_harvest_date,
            "Expected harvest date must be after planting date",
            allow_equal=True,
        )
        validate_date_order(
            self.planting_date, self.actual_harvest_date,
            "Actual harvest date must be after planting date",
            allow_equal=True,
        )
        return self


class CropCreate(_CropChecks):
    crop_name: str
    farmer_id: str | None = None
    variety: str | None = None
    status: CropStatus = "planted"
    season: str | None = None
    planting_date: date | None = None
    expected_harvest_date: date | None = None
    actual_harvest_date: date | None = None
    farm_area: float | None = None
    quantity_planted: float | None = None
    quantity_harvested: float | None = Field(None, ge=0)
    unit: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    image_url: str | None = None
    notes: str | None = None

    @field_validator("crop_name")
    @classmethod
    def _crop_name(cls, v):
        return sanitize_string(v, max_length=100)


class CropUpdate(_CropChecks):
    crop_name: str | None = None
    farmer_id: str | None = None
    variety: str | None = None
    status: CropStatus | None = None
    season: str | None = None
    planting_date: date | None = None
    expected_harvest_date: date | None = None
    actual_harvest_date: date | None = None
    farm_area: float | None = None
    quantity_planted: float | None = None
    quantity_harvested: float | None = Field(None, ge=0)
    unit: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    image_url: str | None = None
    notes: str | None = None


class CropOut(BaseModel):
    id: str
    organization_id: str
    farmer_id: str | None = None
    crop_name: str
    variety: str | None = None
    status: str
    season: str | None = None
    planting_date: date | None = None
    expected_harvest_date: date | None = None
    actual_harvest_date: date | None = None
    farm_area: float | None = None
    quantity_planted: float | None = None
    quantity_harvested: float | None = None
    unit: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    image_url: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CropFilters(ListFilters):
    status: CropStatus | None = None
    farmer_id: str | None = None
    season: str | None = None
