"""
Category Model.

Income / expense categories.  Categories form a two-level tree through
``parent_id`` and are soft-deleted via ``is_active``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.enums import CategoryType


class Category(BaseModel):
    """Represents a transaction category."""

    id: str
    user_id: Optional[str] = None
    name: str
    type: CategoryType
    parent_id: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    sort_order: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Populated only by CategoryService.categories_tree
    children: list[Category] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    type: CategoryType
    parent_id: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None


class CategoryUpdate(BaseModel):
    """Partial update; only explicitly set fields are sent."""

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[CategoryType] = None
    parent_id: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None
