"""
Budget & Budget Item Models.

A budget covers a date range and is split into per-category items.
``spent_amount`` on an item is recalculated by the remote store from the
user's transactions; clients never compute it.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.category import Category
from fintrack.models.enums import BudgetPeriod, SpendingStatus


class BudgetItem(BaseModel):
    """Planned vs. spent amount for one category inside a budget."""

    id: str
    budget_id: str
    category_id: str
    planned_amount: Decimal = Field(ge=0)
    spent_amount: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[Category] = None

    model_config = {"from_attributes": True}


class BudgetItemCreate(BaseModel):
    category_id: str
    planned_amount: Decimal = Field(ge=0)


class Budget(BaseModel):
    """Represents a budget with its nested items."""

    id: str
    user_id: Optional[str] = None
    name: str
    period: BudgetPeriod
    start_date: date
    end_date: date
    total_limit: Decimal = Field(ge=0)
    alert_threshold: Decimal = Decimal("80")
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    budget_items: list[BudgetItem] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class BudgetCreate(BaseModel):
    name: str = Field(min_length=1)
    period: BudgetPeriod
    start_date: date
    end_date: date
    total_limit: Decimal = Field(ge=0)
    alert_threshold: Optional[Decimal] = None
    description: Optional[str] = None


class BudgetUpdate(BaseModel):
    """Partial update; only explicitly set fields are sent."""

    name: Optional[str] = Field(default=None, min_length=1)
    period: Optional[BudgetPeriod] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_limit: Optional[Decimal] = Field(default=None, ge=0)
    alert_threshold: Optional[Decimal] = None
    description: Optional[str] = None


class BudgetSpendingDetail(BaseModel):
    """Row of the ``get_budget_spending_details`` remote procedure."""

    category_id: str
    category_name: str
    planned_amount: Decimal
    spent_amount: Decimal
    percentage: Decimal
    status: SpendingStatus
