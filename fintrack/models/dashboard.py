"""
Dashboard Aggregate Models.

Shapes returned by the dashboard remote procedures.  These aggregates
derive from nearly every entity, which is why every mutation drops the
``dashboard`` cache namespace.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class DashboardSummary(BaseModel):
    """Row of ``get_dashboard_summary``."""

    total_balance: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    net_flow: Decimal = Decimal("0")
    active_budgets_count: int = 0
    active_goals_count: int = 0
    fund_sources_count: int = 0


class MonthlySpending(BaseModel):
    """Row of ``get_monthly_spending``."""

    category_id: str
    category_name: str
    category_type: str
    total_amount: Decimal
    transaction_count: int
