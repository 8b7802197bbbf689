"""Pydantic schemas for the caller's organization."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.validators import sanitize_string, validate_email, validate_phone


class OrganizationCreate(BaseModel):
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    subscription_plan: str = "basic"

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return sanitize_string(v, max_length=255)

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        return validate_phone(v)


class OrganizationUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def _phone(cls, v):
        return validate_phone(v)


class OrganizationOut(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    subscription_plan: str
    subscription_status: str
    subscription_end: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FarmLocationOut(BaseModel):
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    is_set: bool
