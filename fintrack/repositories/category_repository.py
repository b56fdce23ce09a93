"""
Category Repository.

Categories are soft-deleted so existing transactions and budget items
keep resolving their category.
"""

from __future__ import annotations

from fintrack.models.category import Category, CategoryCreate, CategoryUpdate
from fintrack.repositories.base_repository import BaseRepository


class CategoryRepository(BaseRepository):
    """Data access layer for Category entities."""

    TABLE = "categories"

    async def list_for_user(self, user_id: str) -> list[Category]:
        """Fetch active categories ordered by ``sort_order`` (nulls last), then name."""
        rows = await self._fetch_rows(
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .order("sort_order", desc=False, nullsfirst=False)
            .order("name", desc=False),
            operation_name="list (categories)",
        )
        return self._to_models(Category, rows)

    async def create(self, user_id: str, data: CategoryCreate) -> Category:
        payload = self._payload(data, exclude_none=True)
        payload["user_id"] = user_id
        row = await self._fetch_one(
            self._table().insert(payload),
            operation_name="create (categories)",
        )
        return Category.model_validate(row)

    async def update(
        self, category_id: str, user_id: str, updates: CategoryUpdate,
    ) -> Category:
        payload = self._payload(updates, exclude_unset=True)
        payload["updated_at"] = self._now_iso()
        row = await self._fetch_one(
            self._table()
            .update(payload)
            .eq("id", category_id)
            .eq("user_id", user_id),
            operation_name="update (categories)",
        )
        return Category.model_validate(row)

    async def deactivate(self, category_id: str, user_id: str) -> None:
        """Soft delete."""
        await self._fetch_one(
            self._table()
            .update({"is_active": False, "updated_at": self._now_iso()})
            .eq("id", category_id)
            .eq("user_id", user_id),
            operation_name="deactivate (categories)",
        )
