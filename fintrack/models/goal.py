"""
Financial Goal Model.

Savings / investment / debt-payoff targets.  Progress is tracked through
``current_amount``, which the user updates explicitly.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.enums import GoalCategory, GoalStatus


class FinancialGoal(BaseModel):
    """Represents a financial goal."""

    id: str
    user_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    target_amount: Decimal = Field(gt=0)
    current_amount: Decimal = Decimal("0")
    category: GoalCategory
    target_date: date
    status: GoalStatus = GoalStatus.ACTIVE
    priority: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FinancialGoalCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    target_amount: Decimal = Field(gt=0)
    current_amount: Optional[Decimal] = None
    category: GoalCategory
    target_date: date
    priority: Optional[int] = None


class FinancialGoalUpdate(BaseModel):
    """Partial update; only explicitly set fields are sent."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    target_amount: Optional[Decimal] = Field(default=None, gt=0)
    current_amount: Optional[Decimal] = None
    category: Optional[GoalCategory] = None
    target_date: Optional[date] = None
    priority: Optional[int] = None
    status: Optional[GoalStatus] = None


class GoalProgress(BaseModel):
    """Row of the ``get_goals_with_progress`` remote procedure."""

    goal_id: str
    goal_name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: date
    days_remaining: int
    progress_percentage: Decimal
    status: GoalStatus
    is_on_track: bool
