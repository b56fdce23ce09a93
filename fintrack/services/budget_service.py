"""
Budget Service.

Budgets are cached together with their nested items.  Item writes and
spending refreshes are routed through the ``budget-items`` namespace,
whose single relation (``budgets``) drops the nested copies too.  Every
write except the soft delete re-fetches, because item spending is
computed remotely.
"""

from __future__ import annotations

from typing import Optional

from fintrack.auth import SessionManager
from fintrack.cache import (
    CacheStore,
    EntityKind,
    InvalidationRouter,
    RefreshPolicy,
    build_cache_key,
)
from fintrack.logger import StructuredLogger
from fintrack.models.budget import (
    Budget,
    BudgetCreate,
    BudgetItem,
    BudgetItemCreate,
    BudgetSpendingDetail,
    BudgetUpdate,
)
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.budget_repository import BudgetRepository
from fintrack.services.base_service import CachedEntityService
from fintrack.utils.general import error_message


class BudgetService(CachedEntityService[Budget]):

    ENTITY = EntityKind.BUDGETS
    WRITE_POLICIES = {
        "create_budget": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "update_budget": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "delete_budget": RefreshPolicy.INVALIDATE_ONLY,
        "add_budget_item": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "remove_budget_item": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "refresh_budget_spending": RefreshPolicy.INVALIDATE_AND_REFETCH,
    }

    def __init__(
        self,
        repo: BudgetRepository,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(cache, router, session, logger)
        self._repo = repo

    @property
    def budgets(self) -> list[Budget]:
        return self.items

    async def fetch_budgets(self, force_refresh: bool = False) -> ServiceResult[tuple[Budget, ...]]:
        async def _load(user_id: str) -> tuple[Budget, ...]:
            return tuple(await self._repo.list_for_user(user_id))

        result = await self._cached_read(
            build_cache_key(self.ENTITY),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch budgets",
        )
        if result.success and result.data is not None:
            self._set_items(result.data)
        return result

    async def _refetch(self) -> None:
        await self.fetch_budgets(force_refresh=True)

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    async def create_budget(
        self, data: BudgetCreate, items: Optional[list[BudgetItemCreate]] = None,
    ) -> ServiceResult[Budget]:
        return await self._mutate(
            "create_budget",
            lambda user_id: self._repo.create(user_id, data, items or []),
            failure_message="Failed to create budget",
        )

    async def update_budget(
        self,
        budget_id: str,
        updates: BudgetUpdate,
        items: Optional[list[BudgetItemCreate]] = None,
    ) -> ServiceResult[Budget]:
        """Apply a partial update.  *items*, when given, replaces the item set."""
        return await self._mutate(
            "update_budget",
            lambda user_id: self._repo.update(budget_id, user_id, updates, items),
            failure_message="Failed to update budget",
            entity_id=budget_id,
        )

    async def delete_budget(self, budget_id: str) -> ServiceResult[None]:
        return await self._mutate(
            "delete_budget",
            lambda user_id: self._repo.deactivate(budget_id, user_id),
            failure_message="Failed to delete budget",
            entity_id=budget_id,
            patch=lambda _: self._patch_remove(budget_id),
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def add_budget_item(
        self, budget_id: str, item: BudgetItemCreate,
    ) -> ServiceResult[BudgetItem]:
        return await self._mutate(
            "add_budget_item",
            lambda _user_id: self._repo.add_item(budget_id, item),
            failure_message="Failed to add budget item",
            entity=EntityKind.BUDGET_ITEMS,
        )

    async def remove_budget_item(self, item_id: str) -> ServiceResult[None]:
        return await self._mutate(
            "remove_budget_item",
            lambda _user_id: self._repo.remove_item(item_id),
            failure_message="Failed to remove budget item",
            entity_id=item_id,
            entity=EntityKind.BUDGET_ITEMS,
        )

    async def refresh_budget_spending(self, budget_id: str) -> ServiceResult[None]:
        """Ask the remote store to recompute item spending, then re-read."""
        return await self._mutate(
            "refresh_budget_spending",
            lambda _user_id: self._repo.refresh_spending(budget_id),
            failure_message="Failed to refresh budget spending",
            entity_id=budget_id,
            entity=EntityKind.BUDGET_ITEMS,
        )

    # ------------------------------------------------------------------
    # Uncached reads
    # ------------------------------------------------------------------

    async def get_budget_spending_details(
        self, budget_id: str,
    ) -> ServiceResult[list[BudgetSpendingDetail]]:
        """Per-category planned vs. spent figures, always read live."""
        try:
            details = await self._repo.spending_details(budget_id)
        except Exception as exc:
            message = error_message(exc, "Failed to fetch budget spending details")
            self._logger.error(
                "Failed to fetch spending details for budget %s: %s",
                budget_id, exc, exc_info=True,
            )
            return ServiceResult(
                success=False, error=message, status_code=self._status_for(exc),
            )
        return ServiceResult(success=True, data=details)
