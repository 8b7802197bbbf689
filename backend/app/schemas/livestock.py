"""Pydantic schemas for Livestock and its health / breeding / feeding records."""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.common import ListFilters
from app.schemas.validators import sanitize_string, validate_date_order, validate_positive

LivestockStatus = Literal["active", "inactive", "sick", "pregnant", "sold", "deceased"]
LivestockGender = Literal["male", "female", "other"]
BreedingStatus = Literal["pregnant", "delivered", "failed", "in_progress"]


# ── Livestock ────────────────────────────────────────────────

class LivestockCreate(BaseModel):
    name: str
    livestock_type: str
    farmer_id: str | None = None
    breed: str | None = None
    gender: LivestockGender | None = None
    status: LivestockStatus = "active"
    quantity: int = Field(1, ge=1)
    date_of_birth: dt.date | None = None
    ear_tag: str | None = None
    weight: float | None = None
    weight_unit: str | None = "kg"
    location: str | None = None
    breeding_status: str | None = None
    acquisition_date: dt.date | None = None
    acquisition_cost: float | None = Field(None, ge=0)
    productivity_data: dict = {}
    notes: str | None = None

    @field_validator("name", "livestock_type")
    @classmethod
    def _required_text(cls, v):
        return sanitize_string(v, max_length=255)

    @field_validator("weight")
    @classmethod
    def _weight(cls, v):
        return validate_positive(v, "Weight")


class LivestockUpdate(BaseModel):
    name: str | None = None
    livestock_type: str | None = None
    farmer_id: str | None = None
    breed: str | None = None
    gender: LivestockGender | None = None
    status: LivestockStatus | None = None
    quantity: int | None = Field(None, ge=1)
    date_of_birth: dt.date | None = None
    ear_tag: str | None = None
    weight: float | None = None
    weight_unit: str | None = None
    location: str | None = None
    breeding_status: str | None = None
    acquisition_date: dt.date | None = None
    acquisition_cost: float | None = Field(None, ge=0)
    productivity_data: dict | None = None
    notes: str | None = None

    @field_validator("weight")
    @classmethod
    def _weight(cls, v):
        return validate_positive(v, "Weight")


# ── Health records ───────────────────────────────────────────

class HealthRecordCreate(BaseModel):
    date: dt.date
    diagnosis: str
    treatment: str
    vet_notes: str | None = None
    medication: str | None = None
    dosage: str | None = None
    next_checkup_date: dt.date | None = None
    cost: float | None = Field(None, ge=0)
    vet_name: str | None = None
    notes: str | None = None

    @field_validator("diagnosis", "treatment")
    @classmethod
    def _required_text(cls, v):
        return sanitize_string(v)

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.date, self.next_checkup_date,
            "Next checkup date must be after the record date",
        )
        return self


class HealthRecordUpdate(BaseModel):
    date: dt.date | None = None
    diagnosis: str | None = None
    treatment: str | None = None
    vet_notes: str | None = None
    medication: str | None = None
    dosage: str | None = None
    next_checkup_date: dt.date | None = None
    cost: float | None = Field(None, ge=0)
    vet_name: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.date, self.next_checkup_date,
            "Next checkup date must be after the record date",
        )
        return self


class HealthRecordOut(BaseModel):
    id: str
    livestock_id: str | None = None
    date: dt.date
    diagnosis: str
    treatment: str
    vet_notes: str | None = None
    medication: str | None = None
    dosage: str | None = None
    next_checkup_date: dt.date | None = None
    cost: float | None = None
    vet_name: str | None = None
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


# ── Breeding records ─────────────────────────────────────────

class BreedingRecordCreate(BaseModel):
    breeding_date: dt.date
    expected_birth_date: dt.date
    actual_birth_date: dt.date | None = None
    status: BreedingStatus = "in_progress"
    breeding_method: str | None = None
    sire_id: str | None = None
    dam_id: str | None = None
    number_of_offspring: int | None = Field(None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.breeding_date, self.expected_birth_date,
            "Expected birth date must be after breeding date",
        )
        validate_date_order(
            self.breeding_date, self.actual_birth_date,
            "Actual birth date must be after breeding date",
        )
        return self


class BreedingRecordUpdate(BaseModel):
    breeding_date: dt.date | None = None
    expected_birth_date: dt.date | None = None
    actual_birth_date: dt.date | None = None
    status: BreedingStatus | None = None
    breeding_method: str | None = None
    sire_id: str | None = None
    dam_id: str | None = None
    number_of_offspring: int | None = Field(None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.breeding_date, self.expected_birth_date,
            "Expected birth date must be after breeding date",
        )
        validate_date_order(
            self.breeding_date, self.actual_birth_date,
            "Actual birth date must be after breeding date",
        )
        return self


class BreedingRecordOut(BaseModel):
    id: str
    livestock_id: str | None = None
    breeding_date: dt.date
    expected_birth_date: dt.date
    actual_birth_date: dt.date | None = None
    status: str
    breeding_method: str | None = None
    sire_id: str | None = None
    dam_id: str | None = None
    number_of_offspring: int | None = None
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


# ── Feeding records ──────────────────────────────────────────

class FeedingRecordCreate(BaseModel):
    feed_type: str
    quantity: float
    unit: str
    feeding_time: str
    cost_per_unit: float | None = Field(None, ge=0)
    supplier: str | None = None
    notes: str | None = None

    @field_validator("feed_type", "unit", "feeding_time")
    @classmethod
    def _required_text(cls, v):
        return sanitize_string(v, max_length=100)

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, v):
        return validate_positive(v)


class FeedingRecordUpdate(BaseModel):
    feed_type: str | None = None
    quantity: float | None = None
    unit: str | None = None
    feeding_time: str | None = None
    cost_per_unit: float | None = Field(None, ge=0)
    supplier: str | None = None
    notes: str | None = None

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, v):
        return validate_positive(v)


class FeedingRecordOut(BaseModel):
    id: str
    livestock_id: str | None = None
    feed_type: str
    quantity: float
    unit: str
    feeding_time: str
    cost_per_unit: float | None = None
    supplier: str | None = None
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


# ── Livestock out / filters ──────────────────────────────────

class LivestockOut(BaseModel):
    id: str
    organization_id: str
    farmer_id: str | None = None
    name: str | None = None
    livestock_type: str
    breed: str | None = None
    gender: str | None = None
    status: str
    quantity: int
    date_of_birth: dt.date | None = None
    ear_tag: str | None = None
    weight: float | None = None
    weight_unit: str | None = None
    location: str | None = None
    breeding_status: str | None = None
    acquisition_date: dt.date | None = None
    acquisition_cost: float | None = None
    productivity_data: dict | None = None
    notes: str | None = None
    health_records: list[HealthRecordOut] = []
    breeding_records: list[BreedingRecordOut] = []
    feeding_records: list[FeedingRecordOut] = []
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class LivestockFilters(ListFilters):
    status: LivestockStatus | None = None
    livestock_type: str | None = None
    breed: str | None = None
    farmer_id: str | None = None
