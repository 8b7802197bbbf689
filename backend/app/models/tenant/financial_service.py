"""Financial services: loans, insurance, savings and mobile money."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.utils.timestamps import utcnow


class FinancialService(Base):
    __tablename__ = "financial_services"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    farmer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("farmers.id", ondelete="SET NULL"), index=True
    )

    # loan | insurance | savings | mobile_money
    service_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    provider: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[float | None] = mapped_column(Float)
    interest_rate: Mapped[float | None] = mapped_column(Float)
    duration_months: Mapped[int | None] = mapped_column(Integer)

    # pending | approved | rejected | disbursed | completed
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    application_date: Mapped[date | None] = mapped_column(Date)
    approval_date: Mapped[date | None] = mapped_column(Date)
    disbursement_date: Mapped[date | None] = mapped_column(Date)
    # [{"due_date": "2024-06-01", "amount": 1500.0, "paid": false}, ...]
    repayment_schedule: Mapped[list | None] = mapped_column(JSON, default=list)

    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
