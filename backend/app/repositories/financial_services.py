"""Financial services repository (loans, insurance, savings, mobile money)."""

from typing import Any

from app.repositories.base import EntityRepository
from app.schemas.financial_service import (
    FinancialServiceCreate,
    FinancialServiceFilters,
    FinancialServiceOut,
    FinancialServiceUpdate,
)

ACTIVE_LOAN_STATUSES = {"approved", "disbursed"}


class FinancialServiceRepository(EntityRepository[FinancialServiceOut]):
    table = "financial_services"
    resource = "financial_services"
    label = "Financial service"

    out_schema = FinancialServiceOut
    create_schema = FinancialServiceCreate
    update_schema = FinancialServiceUpdate
    filters_schema = FinancialServiceFilters

    search_columns = ("provider",)
    equality_filters = ("service_type", "farmer_id")

    group_columns = {"service_type": "unknown", "status": "unknown"}
    sum_columns = ("amount",)

    def _extra_totals(self, rows: list[dict[str, Any]]) -> dict[str, float]:
        return {
            "approved": sum(1 for r in rows if r.get("status") == "approved"),
            "active_loans": sum(
                1 for r in rows
                if r.get("service_type") == "loan" and r.get("status") in ACTIVE_LOAN_STATUSES
            ),
            "savings_accounts": sum(1 for r in rows if r.get("service_type") == "savings"),
        }
