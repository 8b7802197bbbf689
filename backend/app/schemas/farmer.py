"""Pydantic schemas for Farmer CRUD operations."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import ListFilters
from app.schemas.validators import sanitize_string, validate_email, validate_phone

FarmerStatus = Literal["active", "inactive"]
Gender = Literal["male", "female", "other"]


class _FarmerFields(BaseModel):
    @field_validator("first_name", "last_name", check_fields=False)
    @classmethod
    def _name(cls, v):
        return sanitize_string(v, max_length=100) if v is not None else v

    @field_validator("email", check_fields=False)
    @classmethod
    def _email(cls, v):
        return validate_email(v)

    @field_validator("phone", check_fields=False)
    @classmethod
    def _phone(cls, v):
        return validate_phone(v)


class FarmerCreate(_FarmerFields):
    farmer_code: str | None = Field(None, max_length=50)
    first_name: str
    last_name: str
    phone: str | None = None
    email: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    id_number: str | None = None
    address: str | None = None
    state: str | None = None
    lga: str | None = None
    farm_size: float | None = Field(None, ge=0)
    farm_location: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    crops_grown: list[str] = []
    livestock_owned: list[str] = []
    status: FarmerStatus = "active"
    notes: str | None = None


class FarmerUpdate(_FarmerFields):
    farmer_code: str | None = Field(None, max_length=50)
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    email: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    id_number: str | None = None
    address: str | None = None
    state: str | None = None
    lga: str | None = None
    farm_size: float | None = Field(None, ge=0)
    farm_location: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    crops_grown: list[str] | None = None
    livestock_owned: list[str] | None = None
    status: FarmerStatus | None = None
    notes: str | None = None


class FarmerOut(BaseModel):
    id: str
    organization_id: str
    farmer_code: str
    first_name: str
    last_name: str
    phone: str | None = None
    email: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    id_number: str | None = None
    address: str | None = None
    state: str | None = None
    lga: str | None = None
    farm_size: float | None = None
    farm_location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    crops_grown: list[str] | None = None
    livestock_owned: list[str] | None = None
    status: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FarmerFilters(ListFilters):
    status: FarmerStatus | None = None
    state: str | None = None
    lga: str | None = None
