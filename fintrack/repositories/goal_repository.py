"""Financial Goal Repository."""

from __future__ import annotations

from fintrack.models.enums import GoalStatus
from fintrack.models.goal import (
    FinancialGoal,
    FinancialGoalCreate,
    FinancialGoalUpdate,
    GoalProgress,
)
from fintrack.repositories.base_repository import BaseRepository


class GoalRepository(BaseRepository):
    """Data access layer for FinancialGoal entities."""

    TABLE = "financial_goals"

    async def list_for_user(self, user_id: str) -> list[FinancialGoal]:
        """Fetch all goals, highest priority first, then nearest deadline."""
        rows = await self._fetch_rows(
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .order("priority", desc=False)
            .order("target_date", desc=False),
            operation_name="list (financial_goals)",
        )
        return self._to_models(FinancialGoal, rows)

    async def create(self, user_id: str, data: FinancialGoalCreate) -> FinancialGoal:
        payload = self._payload(data, exclude_none=True)
        payload["user_id"] = user_id
        row = await self._fetch_one(
            self._table().insert(payload),
            operation_name="create (financial_goals)",
        )
        return FinancialGoal.model_validate(row)

    async def update(
        self, goal_id: str, user_id: str, updates: FinancialGoalUpdate,
    ) -> FinancialGoal:
        payload = self._payload(updates, exclude_unset=True)
        payload["updated_at"] = self._now_iso()
        row = await self._fetch_one(
            self._table()
            .update(payload)
            .eq("id", goal_id)
            .eq("user_id", user_id),
            operation_name="update (financial_goals)",
        )
        return FinancialGoal.model_validate(row)

    async def set_status(self, goal_id: str, user_id: str, status: GoalStatus) -> FinancialGoal:
        return await self.update(goal_id, user_id, FinancialGoalUpdate(status=status))

    async def delete(self, goal_id: str, user_id: str) -> None:
        """Hard delete; goals have no dependants."""
        await self._fetch_one(
            self._table().delete().eq("id", goal_id).eq("user_id", user_id),
            operation_name="delete (financial_goals)",
        )

    async def goals_with_progress(self) -> list[GoalProgress]:
        data = await self._call_rpc("get_goals_with_progress")
        rows = data if isinstance(data, list) else []
        return [GoalProgress.model_validate(row) for row in rows]
