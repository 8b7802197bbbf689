"""Pydantic schemas for ExtensionService CRUD operations."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import ListFilters
from app.schemas.validators import sanitize_string, validate_url


class _MediaUrls(BaseModel):
    @field_validator("video_url", "audio_url", check_fields=False)
    @classmethod
    def _url(cls, v):
        return validate_url(v)


class ExtensionServiceCreate(_MediaUrls):
    title: str
    description: str | None = None
    content: str | None = None
    video_url: str | None = None
    audio_url: str | None = None
    language: str = Field("en", max_length=10)
    category: str | None = None
    target_audience: list[str] = []
    seasonal_relevance: list[str] = []
    is_active: bool = True

    @field_validator("title")
    @classmethod
    def _title(cls, v):
        return sanitize_string(v, max_length=255)


class ExtensionServiceUpdate(_MediaUrls):
    title: str | None = None
    description: str | None = None
    content: str | None = None
    video_url: str | None = None
    audio_url: str | None = None
    language: str | None = Field(None, max_length=10)
    category: str | None = None
    target_audience: list[str] | None = None
    seasonal_relevance: list[str] | None = None
    is_active: bool | None = None


class ExtensionServiceOut(BaseModel):
    id: str
    organization_id: str
    title: str
    description: str | None = None
    content: str | None = None
    video_url: str | None = None
    audio_url: str | None = None
    language: str
    category: str | None = None
    target_audience: list[str] | None = None
    seasonal_relevance: list[str] | None = None
    views_count: int = 0
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ExtensionServiceFilters(ListFilters):
    category: str | None = None
    language: str | None = None
    is_active: bool | None = None
