"""
Fund Source Model.

A place money is held (bank account, wallet, card).  ``balance`` is
maintained by the remote store: transaction writes adjust it atomically
through remote procedures, which is why the cache treats fund sources as
derived from transactions.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.enums import FundSourceType


class FundSource(BaseModel):
    """Represents a fund source with its current balance."""

    id: str
    user_id: Optional[str] = None
    name: str
    type: FundSourceType
    balance: Decimal = Decimal("0")
    currency: str = "USD"
    is_active: bool = True
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FundSourceCreate(BaseModel):
    name: str = Field(min_length=1)
    type: FundSourceType
    balance: Optional[Decimal] = None
    currency: Optional[str] = None
    description: Optional[str] = None


class FundSourceUpdate(BaseModel):
    """Partial update; only explicitly set fields are sent."""

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[FundSourceType] = None
    balance: Optional[Decimal] = None
    currency: Optional[str] = None
    description: Optional[str] = None
