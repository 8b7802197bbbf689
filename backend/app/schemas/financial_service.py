"""Pydantic schemas for FinancialService CRUD operations."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.common import ListFilters
from app.schemas.validators import sanitize_string, validate_date_order, validate_positive

ServiceType = Literal["loan", "insurance", "savings", "mobile_money"]
FinancialStatus = Literal["pending", "approved", "rejected", "disbursed", "completed"]


class _FinancialChecks(BaseModel):
    @field_validator("amount", check_fields=False)
    @classmethod
    def _amount(cls, v):
        return validate_positive(v, "Amount")

    @model_validator(mode="after")
    def _dates(self):
        validate_date_order(
            self.application_date, self.approval_date,
            "Approval date must be on or after application date",
            allow_equal=True,
        )
        validate_date_order(
            self.approval_date, self.disbursement_date,
            "Disbursement date must be on or after approval date",
            allow_equal=True,
        )
        return self


class FinancialServiceCreate(_FinancialChecks):
    service_type: ServiceType
    provider: str
    farmer_id: str | None = None
    amount: float | None = None
    interest_rate: float | None = Field(None, ge=0, le=100)
    duration_months: int | None = Field(None, ge=1)
    status: FinancialStatus = "pending"
    application_date: date | None = None
    approval_date: date | None = None
    disbursement_date: date | None = None
    repayment_schedule: list[dict] = []
    notes: str | None = None

    @field_validator("provider")
    @classmethod
    def _provider(cls, v):
        return sanitize_string(v, max_length=255)


class FinancialServiceUpdate(_FinancialChecks):
    service_type: ServiceType | None = None
    provider: str | None = None
    farmer_id: str | None = None
    amount: float | None = None
    interest_rate: float | None = Field(None, ge=0, le=100)
    duration_months: int | None = Field(None, ge=1)
    status: FinancialStatus | None = None
    application_date: date | None = None
    approval_date: date | None = None
    disbursement_date: date | None = None
    repayment_schedule: list[dict] | None = None
    notes: str | None = None


class FinancialServiceOut(BaseModel):
    id: str
    organization_id: str
    farmer_id: str | None = None
    service_type: str
    provider: str
    amount: float | None = None
    interest_rate: float | None = None
    duration_months: int | None = None
    status: str
    application_date: date | None = None
    approval_date: date | None = None
    disbursement_date: date | None = None
    repayment_schedule: list[dict] | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FinancialServiceFilters(ListFilters):
    status: FinancialStatus | None = None
    service_type: ServiceType | None = None
    farmer_id: str | None = None
