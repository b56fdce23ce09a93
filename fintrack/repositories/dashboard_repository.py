"""Dashboard Repository: read-only aggregate procedures."""

from __future__ import annotations

from fintrack.models.dashboard import DashboardSummary, MonthlySpending
from fintrack.repositories.base_repository import BaseRepository


class DashboardRepository(BaseRepository):

    async def summary(self) -> DashboardSummary:
        """First row of ``get_dashboard_summary``, zeros when empty."""
        data = await self._call_rpc("get_dashboard_summary")
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            return DashboardSummary()
        return DashboardSummary.model_validate(data)

    async def monthly_spending(self, month: int, year: int) -> list[MonthlySpending]:
        data = await self._call_rpc(
            "get_monthly_spending", {"p_month": month, "p_year": year},
        )
        rows = data if isinstance(data, list) else []
        return [MonthlySpending.model_validate(row) for row in rows]
