"""Common schemas used across the application."""

from datetime import date
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field, model_validator

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic page-numbered response wrapper.

    Usage:
        response_model=PaginatedResponse[FarmerOut]

    Returns:
        {
            "items": [...],
            "total": 150,
            "page": 1,
            "page_size": 10,
            "has_more": true
        }
    """
    items: list[T]
    total: int
    page: int
    page_size: int

    @computed_field
    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total


class ListFilters(BaseModel):
    """Predicates shared by every list endpoint.

    `search` is a case-insensitive substring match over the entity's
    search columns; `start_date` / `end_date` bound `created_at`
    (both inclusive).
    """
    status: str | None = None
    search: str | None = Field(None, max_length=100)
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def _date_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")
        return self


class EntityStats(BaseModel):
    """Full-scan aggregate for one organization.

    groups: {"status": {"active": 4, "sold": 1}, "livestock_type": {...}}
    totals: {"amount": 125000.0, ...}
    """
    total_records: int
    groups: dict[str, dict[str, int]] = {}
    totals: dict[str, float] = {}
