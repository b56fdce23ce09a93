"""
Transaction Model.

Income, expense and transfer records.  Writes go through remote
procedures that adjust fund-source balances atomically; the joined
``category`` / ``source_fund`` / ``destination_fund`` relations are
populated by the read path.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.category import Category
from fintrack.models.enums import TransactionStatus, TransactionType
from fintrack.models.fund_source import FundSource


class Transaction(BaseModel):
    """Represents a financial transaction record."""

    id: str
    user_id: Optional[str] = None
    type: TransactionType
    amount: Decimal = Field(ge=0)
    description: Optional[str] = None
    category_id: Optional[str] = None
    source_fund_id: Optional[str] = None
    destination_fund_id: Optional[str] = None
    transaction_date: date
    notes: Optional[str] = None
    is_recurring: bool = False
    recurring_pattern_id: Optional[str] = None
    status: TransactionStatus = TransactionStatus.COMPLETED
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Relationships (populated by the joined select)
    category: Optional[Category] = None
    source_fund: Optional[FundSource] = None
    destination_fund: Optional[FundSource] = None

    model_config = {"from_attributes": True}


class TransactionCreate(BaseModel):
    type: TransactionType
    amount: Decimal = Field(gt=0)
    description: Optional[str] = None
    category_id: Optional[str] = None
    source_fund_id: Optional[str] = None
    destination_fund_id: Optional[str] = None
    transaction_date: date
    notes: Optional[str] = None
    recurring_pattern_id: Optional[str] = None


class TransactionUpdate(BaseModel):
    """Balance-adjusting update.

    ``amount`` is mandatory because the remote procedure recomputes both
    the old and the new fund balances from it.  ``transaction_date``
    defaults to today when omitted.
    """

    amount: Decimal = Field(gt=0)
    description: Optional[str] = None
    category_id: Optional[str] = None
    source_fund_id: Optional[str] = None
    destination_fund_id: Optional[str] = None
    transaction_date: Optional[date] = None
    notes: Optional[str] = None


class TransactionQuery(BaseModel):
    """Filter / pagination options of the transaction list read.

    Serialized canonically into the cache key, so two reads with equal
    options share one cache entry and reads with different options never
    satisfy each other.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[TransactionType] = None
    category_id: Optional[str] = None
    fund_source_id: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)
