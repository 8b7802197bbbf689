"""Pydantic schemas for crop GrowthRecord CRUD."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.common import ListFilters
from app.schemas.validators import sanitize_string, validate_date_order, validate_url


class _GrowthChecks(BaseModel):
    @field_validator("images", check_fields=False)
    @classmethod
    def _images(cls, v):
        if v is None:
            return v
        return [url for url in (validate_url(u) for u in v) if url]

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.start_date, self.end_date,
            "End date must be on or after start date",
            allow_equal=True,
        )
        return self


class GrowthRecordCreate(_GrowthChecks):
    crop_id: str
    stage_name: str
    start_date: date
    end_date: date | None = None
    health_score: int | None = Field(None, ge=0, le=100)
    images: list[str] = []
    notes: str | None = None

    @field_validator("stage_name")
    @classmethod
    def _stage_name(cls, v):
        return sanitize_string(v, max_length=100)


class GrowthRecordUpdate(_GrowthChecks):
    """crop_id is fixed once recorded."""
    stage_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    health_score: int | None = Field(None, ge=0, le=100)
    images: list[str] | None = None
    notes: str | None = None


class GrowthRecordOut(BaseModel):
    id: str
    organization_id: str
    crop_id: str
    stage_name: str
    start_date: date
    end_date: date | None = None
    health_score: int | None = None
    images: list[str] | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GrowthRecordFilters(ListFilters):
    crop_id: str | None = None
    stage_name: str | None = None
