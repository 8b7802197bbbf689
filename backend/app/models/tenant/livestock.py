"""Livestock and its health / breeding / feeding records.

Records are kept in one of two layouts (NESTED_RECORD_STORAGE):
  - embedded  → JSON arrays on the livestock row (health_records, ...)
  - table     → rows in health_records / breeding_records / feeding_records

Both layouts are always present in the schema so the setting can be
switched without a migration.
"""

import datetime as dt
import uuid

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.utils.timestamps import utcnow


class Livestock(Base):
    __tablename__ = "livestock"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    farmer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("farmers.id", ondelete="SET NULL"), index=True
    )

    name: Mapped[str | None] = mapped_column(String(255))
    livestock_type: Mapped[str] = mapped_column(String(50), nullable=False)
    breed: Mapped[str | None] = mapped_column(String(100))
    gender: Mapped[str | None] = mapped_column(String(20))
    # active | inactive | sick | pregnant | sold | deceased
    status: Mapped[str] = mapped_column(String(20), default="active", index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    date_of_birth: Mapped[dt.date | None] = mapped_column(Date)
    ear_tag: Mapped[str | None] = mapped_column(String(50))
    weight: Mapped[float | None] = mapped_column(Float)
    weight_unit: Mapped[str | None] = mapped_column(String(10), default="kg")
    location: Mapped[str | None] = mapped_column(String(255))
    breeding_status: Mapped[str | None] = mapped_column(String(50))

    acquisition_date: Mapped[dt.date | None] = mapped_column(Date)
    acquisition_cost: Mapped[float | None] = mapped_column(Float)
    # {"milk_litres_per_day": 12, "eggs_per_week": 5, ...}
    productivity_data: Mapped[dict | None] = mapped_column(JSON, default=dict)
    notes: Mapped[str | None] = mapped_column(Text)

    # Embedded record arrays: [{"id": "...", "date": "2024-01-01", ...}, ...]
    health_records: Mapped[list | None] = mapped_column(JSON, default=list)
    breeding_records: Mapped[list | None] = mapped_column(JSON, default=list)
    feeding_records: Mapped[list | None] = mapped_column(JSON, default=list)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)


# ── Child-table layout ──────────────────────────────────────

class _LivestockRecordMixin:
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    organization_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    livestock_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("livestock.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)


class HealthRecord(_LivestockRecordMixin, Base):
    __tablename__ = "health_records"

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    treatment: Mapped[str] = mapped_column(Text, nullable=False)
    vet_notes: Mapped[str | None] = mapped_column(Text)
    medication: Mapped[str | None] = mapped_column(String(255))
    dosage: Mapped[str | None] = mapped_column(String(100))
    next_checkup_date: Mapped[dt.date | None] = mapped_column(Date)
    cost: Mapped[float | None] = mapped_column(Float)
    vet_name: Mapped[str | None] = mapped_column(String(255))


class BreedingRecord(_LivestockRecordMixin, Base):
    __tablename__ = "breeding_records"

    breeding_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    expected_birth_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    actual_birth_date: Mapped[dt.date | None] = mapped_column(Date)
    # pregnant | delivered | failed | in_progress
    status: Mapped[str] = mapped_column(String(20), default="in_progress")
    breeding_method: Mapped[str | None] = mapped_column(String(50))
    sire_id: Mapped[str | None] = mapped_column(String(100))
    dam_id: Mapped[str | None] = mapped_column(String(100))
    number_of_offspring: Mapped[int | None] = mapped_column(Integer)


class FeedingRecord(_LivestockRecordMixin, Base):
    __tablename__ = "feeding_records"

    feed_type: Mapped[str] = mapped_column(String(100), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    feeding_time: Mapped[str] = mapped_column(String(50), nullable=False)
    cost_per_unit: Mapped[float | None] = mapped_column(Float)
    supplier: Mapped[str | None] = mapped_column(String(255))
