"""
Fund Source Repository.

Fund sources are soft-deleted (``is_active = false``) so that historical
transactions keep their source / destination reference.
"""

from __future__ import annotations

from fintrack.models.fund_source import FundSource, FundSourceCreate, FundSourceUpdate
from fintrack.repositories.base_repository import BaseRepository


class FundSourceRepository(BaseRepository):
    """Data access layer for FundSource entities."""

    TABLE = "fund_sources"

    async def list_for_user(self, user_id: str) -> list[FundSource]:
        """Fetch the user's active fund sources, newest first."""
        rows = await self._fetch_rows(
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .order("created_at", desc=True),
            operation_name="list (fund_sources)",
        )
        return self._to_models(FundSource, rows)

    async def create(self, user_id: str, data: FundSourceCreate) -> FundSource:
        payload = self._payload(data, exclude_none=True)
        payload["user_id"] = user_id
        row = await self._fetch_one(
            self._table().insert(payload),
            operation_name="create (fund_sources)",
        )
        return FundSource.model_validate(row)

    async def update(
        self, fund_source_id: str, user_id: str, updates: FundSourceUpdate,
    ) -> FundSource:
        payload = self._payload(updates, exclude_unset=True)
        payload["updated_at"] = self._now_iso()
        row = await self._fetch_one(
            self._table()
            .update(payload)
            .eq("id", fund_source_id)
            .eq("user_id", user_id),
            operation_name="update (fund_sources)",
        )
        return FundSource.model_validate(row)

    async def deactivate(self, fund_source_id: str, user_id: str) -> None:
        """Soft delete."""
        await self._fetch_one(
            self._table()
            .update({"is_active": False, "updated_at": self._now_iso()})
            .eq("id", fund_source_id)
            .eq("user_id", user_id),
            operation_name="deactivate (fund_sources)",
        )
