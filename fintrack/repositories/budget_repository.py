"""
Budget Repository.

Budgets are always read together with their items and each item's
category.  Item ``spent_amount`` values are owned by the remote store and
recomputed by the ``refresh_budget_spending`` procedure.
"""

from __future__ import annotations

from decimal import Decimal

from fintrack.models.budget import (
    Budget,
    BudgetCreate,
    BudgetItem,
    BudgetItemCreate,
    BudgetSpendingDetail,
    BudgetUpdate,
)
from fintrack.repositories.base_repository import BaseRepository


class BudgetRepository(BaseRepository):
    """Data access layer for Budget and BudgetItem entities."""

    TABLE = "budgets"
    ITEMS_TABLE = "budget_items"

    SELECT = "*, budget_items(*, category:categories(*))"

    async def list_for_user(self, user_id: str) -> list[Budget]:
        """Fetch active budgets with nested items, most recent period first."""
        rows = await self._fetch_rows(
            self._table()
            .select(self.SELECT)
            .eq("user_id", user_id)
            .eq("is_active", True)
            .order("start_date", desc=True),
            operation_name="list (budgets)",
        )
        return self._to_models(Budget, rows)

    async def get(self, budget_id: str, user_id: str) -> Budget:
        row = await self._fetch_one(
            self._table()
            .select(self.SELECT)
            .eq("id", budget_id)
            .eq("user_id", user_id),
            operation_name="get (budgets)",
        )
        return Budget.model_validate(row)

    async def create(
        self,
        user_id: str,
        data: BudgetCreate,
        items: list[BudgetItemCreate],
    ) -> Budget:
        """Insert the budget, then its items, and return the joined row."""
        payload = self._payload(data, exclude_none=True)
        payload["user_id"] = user_id
        row = await self._fetch_one(
            self._table().insert(payload),
            operation_name="create (budgets)",
        )
        budget_id = str(row["id"])
        await self.insert_items(budget_id, items)
        return await self.get(budget_id, user_id)

    async def update(
        self,
        budget_id: str,
        user_id: str,
        updates: BudgetUpdate,
        items: list[BudgetItemCreate] | None = None,
    ) -> Budget:
        """Apply a partial update.

        When *items* is given the budget's item set is replaced: existing
        items are deleted and only items with a category and a positive
        planned amount are re-inserted.
        """
        payload = self._payload(updates, exclude_unset=True)
        payload["updated_at"] = self._now_iso()
        await self._fetch_one(
            self._table()
            .update(payload)
            .eq("id", budget_id)
            .eq("user_id", user_id),
            operation_name="update (budgets)",
        )
        if items is not None:
            await self.delete_items_for_budget(budget_id)
            await self.insert_items(
                budget_id,
                [
                    item for item in items
                    if item.category_id and item.planned_amount > Decimal("0")
                ],
            )
        return await self.get(budget_id, user_id)

    async def deactivate(self, budget_id: str, user_id: str) -> None:
        """Soft delete."""
        await self._fetch_one(
            self._table()
            .update({"is_active": False, "updated_at": self._now_iso()})
            .eq("id", budget_id)
            .eq("user_id", user_id),
            operation_name="deactivate (budgets)",
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def insert_items(self, budget_id: str, items: list[BudgetItemCreate]) -> None:
        if not items:
            return
        payload = []
        for item in items:
            row = self._payload(item)
            row["budget_id"] = budget_id
            payload.append(row)
        await self._fetch_rows(
            self._table(self.ITEMS_TABLE).insert(payload),
            operation_name="insert (budget_items)",
        )

    async def delete_items_for_budget(self, budget_id: str) -> None:
        await self._fetch_rows(
            self._table(self.ITEMS_TABLE).delete().eq("budget_id", budget_id),
            operation_name="delete (budget_items)",
        )

    async def add_item(self, budget_id: str, item: BudgetItemCreate) -> BudgetItem:
        payload = self._payload(item)
        payload["budget_id"] = budget_id
        row = await self._fetch_one(
            self._table(self.ITEMS_TABLE).insert(payload),
            operation_name="add_item (budget_items)",
        )
        return BudgetItem.model_validate(row)

    async def remove_item(self, item_id: str) -> None:
        await self._fetch_one(
            self._table(self.ITEMS_TABLE).delete().eq("id", item_id),
            operation_name="remove_item (budget_items)",
        )

    # ------------------------------------------------------------------
    # Remote procedures
    # ------------------------------------------------------------------

    async def spending_details(self, budget_id: str) -> list[BudgetSpendingDetail]:
        data = await self._call_rpc(
            "get_budget_spending_details", {"p_budget_id": budget_id},
        )
        rows = data if isinstance(data, list) else []
        return [BudgetSpendingDetail.model_validate(row) for row in rows]

    async def refresh_spending(self, budget_id: str) -> None:
        """Recompute ``spent_amount`` of every item of *budget_id*."""
        await self._call_rpc("refresh_budget_spending", {"p_budget_id": budget_id})
