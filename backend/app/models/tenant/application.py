"""Fertilizer and crop-protection applications made on a farmer's crops."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.utils.timestamps import utcnow


class Application(Base):
    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    farmer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("farmers.id", ondelete="SET NULL"), index=True
    )
    crop_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("crops.id", ondelete="SET NULL"), index=True
    )

    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # fertilizer | pesticide | herbicide | fungicide | insecticide
    product_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    application_date: Mapped[date] = mapped_column(Date, nullable=False)
    application_method: Mapped[str | None] = mapped_column(String(100))
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)

    target_pest_disease: Mapped[str | None] = mapped_column(String(255))
    weather_conditions: Mapped[str | None] = mapped_column(String(255))
    next_application_date: Mapped[date | None] = mapped_column(Date)
    cost: Mapped[float | None] = mapped_column(Float)

    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
