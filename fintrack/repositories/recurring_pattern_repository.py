"""
Recurring Pattern Repository.

Patterns are read with their category and both fund sources joined.  The
remote scheduler owns ``next_execution_date`` after creation.
"""

from __future__ import annotations

from fintrack.models.recurring_pattern import (
    RecurringPattern,
    RecurringPatternCreate,
    RecurringPatternUpdate,
)
from fintrack.repositories.base_repository import BaseRepository


class RecurringPatternRepository(BaseRepository):
    """Data access layer for RecurringPattern entities."""

    TABLE = "recurring_patterns"

    SELECT = (
        "*, "
        "category:categories(*), "
        "source_fund:fund_sources!recurring_patterns_source_fund_fkey(*), "
        "destination_fund:fund_sources!recurring_patterns_destination_fund_fkey(*)"
    )

    async def list_for_user(self, user_id: str) -> list[RecurringPattern]:
        """Fetch all patterns (active and paused), next due first."""
        rows = await self._fetch_rows(
            self._table()
            .select(self.SELECT)
            .eq("user_id", user_id)
            .order("next_execution_date", desc=False),
            operation_name="list (recurring_patterns)",
        )
        return self._to_models(RecurringPattern, rows)

    async def create(self, user_id: str, data: RecurringPatternCreate) -> RecurringPattern:
        payload = self._payload(data, exclude_none=True)
        payload["user_id"] = user_id
        payload["interval"] = data.interval or 1
        payload["next_execution_date"] = data.start_date.isoformat()
        payload["is_active"] = True
        row = await self._fetch_one(
            self._table().insert(payload),
            operation_name="create (recurring_patterns)",
        )
        return RecurringPattern.model_validate(row)

    async def update(
        self, pattern_id: str, user_id: str, updates: RecurringPatternUpdate,
    ) -> RecurringPattern:
        payload = self._payload(updates, exclude_unset=True)
        payload["updated_at"] = self._now_iso()
        row = await self._fetch_one(
            self._table()
            .update(payload)
            .eq("id", pattern_id)
            .eq("user_id", user_id),
            operation_name="update (recurring_patterns)",
        )
        return RecurringPattern.model_validate(row)

    async def set_active(self, pattern_id: str, user_id: str, is_active: bool) -> RecurringPattern:
        row = await self._fetch_one(
            self._table()
            .update({"is_active": is_active, "updated_at": self._now_iso()})
            .eq("id", pattern_id)
            .eq("user_id", user_id),
            operation_name="set_active (recurring_patterns)",
        )
        return RecurringPattern.model_validate(row)

    async def delete(self, pattern_id: str, user_id: str) -> None:
        await self._fetch_one(
            self._table().delete().eq("id", pattern_id).eq("user_id", user_id),
            operation_name="delete (recurring_patterns)",
        )
