"""
Recurring Pattern Model.

Template for transactions that repeat every ``interval`` x ``frequency``.
``next_execution_date`` starts at ``start_date`` and is advanced by the
remote scheduler.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.category import Category
from fintrack.models.enums import Frequency, TransactionType
from fintrack.models.fund_source import FundSource


class RecurringPattern(BaseModel):
    """Represents a recurring transaction pattern."""

    id: str
    user_id: Optional[str] = None
    name: str
    frequency: Frequency
    interval: int = Field(default=1, ge=1)
    amount: Decimal = Field(gt=0)
    category_id: Optional[str] = None
    source_fund_id: Optional[str] = None
    destination_fund_id: Optional[str] = None
    transaction_type: TransactionType
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    next_execution_date: date
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Relationships (populated by the joined select)
    category: Optional[Category] = None
    source_fund: Optional[FundSource] = None
    destination_fund: Optional[FundSource] = None

    model_config = {"from_attributes": True}


class RecurringPatternCreate(BaseModel):
    name: str = Field(min_length=1)
    frequency: Frequency
    interval: Optional[int] = Field(default=None, ge=1)
    amount: Decimal = Field(gt=0)
    category_id: Optional[str] = None
    source_fund_id: Optional[str] = None
    destination_fund_id: Optional[str] = None
    transaction_type: TransactionType
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None


class RecurringPatternUpdate(BaseModel):
    """Partial update; only explicitly set fields are sent."""

    name: Optional[str] = Field(default=None, min_length=1)
    frequency: Optional[Frequency] = None
    interval: Optional[int] = Field(default=None, ge=1)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    category_id: Optional[str] = None
    source_fund_id: Optional[str] = None
    destination_fund_id: Optional[str] = None
    transaction_type: Optional[TransactionType] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
