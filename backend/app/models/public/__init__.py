"""Shared models (not scoped to an organization)."""

from app.models.public.organization import Organization

__all__ = ["Organization"]
