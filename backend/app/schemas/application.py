"""Pydantic schemas for fertilizer / pesticide Application CRUD."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.common import ListFilters
from app.schemas.validators import sanitize_string, validate_date_order, validate_positive

ProductType = Literal["fertilizer", "pesticide", "herbicide", "fungicide", "insecticide"]


class _ApplicationChecks(BaseModel):
    @field_validator("quantity", check_fields=False)
    @classmethod
    def _quantity(cls, v):
        return validate_positive(v)

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.application_date, self.next_application_date,
            "Next application date must be after application date",
        )
        return self


class ApplicationCreate(_ApplicationChecks):
    product_name: str
    product_type: ProductType
    application_date: date
    quantity: float
    unit: str
    farmer_id: str | None = None
    crop_id: str | None = None
    application_method: str | None = None
    target_pest_disease: str | None = None
    weather_conditions: str | None = None
    next_application_date: date | None = None
    cost: float | None = Field(None, ge=0)
    notes: str | None = None

    @field_validator("product_name")
    @classmethod
    def _product_name(cls, v):
        return sanitize_string(v, max_length=255)

    @field_validator("unit")
    @classmethod
    def _unit(cls, v):
        return sanitize_string(v, max_length=20)


class ApplicationUpdate(_ApplicationChecks):
    product_name: str | None = None
    product_type: ProductType | None = None
    application_date: date | None = None
    quantity: float | None = None
    unit: str | None = None
    farmer_id: str | None = None
    crop_id: str | None = None
    application_method: str | None = None
    target_pest_disease: str | None = None
    weather_conditions: str | None = None
    next_application_date: date | None = None
    cost: float | None = Field(None, ge=0)
    notes: str | None = None


class ApplicationOut(BaseModel):
    id: str
    organization_id: str
    farmer_id: str | None = None
    crop_id: str | None = None
    product_name: str
    product_type: str
    application_date: date
    application_method: str | None = None
    quantity: float
    unit: str
    target_pest_disease: str | None = None
    weather_conditions: str | None = None
    next_application_date: date | None = None
    cost: float | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ApplicationFilters(ListFilters):
    product_type: ProductType | None = None
    farmer_id: str | None = None
    crop_id: str | None = None
