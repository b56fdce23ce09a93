"""
Dashboard Service.

Read-only aggregates.  They are never written through this service; every
``invalidate_related`` call drops the whole ``dashboard`` namespace.
"""

from __future__ import annotations

from typing import Optional

from fintrack.auth import SessionManager
from fintrack.cache import CacheStore, EntityKind, InvalidationRouter, build_cache_key
from fintrack.logger import StructuredLogger
from fintrack.models.dashboard import DashboardSummary, MonthlySpending
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.dashboard_repository import DashboardRepository
from fintrack.services.base_service import CachedEntityService


class DashboardService(CachedEntityService[MonthlySpending]):
    """Cached dashboard summary and monthly spending breakdown.

    ``items`` holds the last monthly spending breakdown read.
    """

    ENTITY = EntityKind.DASHBOARD

    def __init__(
        self,
        repo: DashboardRepository,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(cache, router, session, logger)
        self._repo = repo
        self.summary: Optional[DashboardSummary] = None

    @property
    def monthly_spending(self) -> list[MonthlySpending]:
        return self.items

    async def fetch_summary(self, force_refresh: bool = False) -> ServiceResult[DashboardSummary]:
        async def _load(_user_id: str) -> DashboardSummary:
            return await self._repo.summary()

        result = await self._cached_read(
            build_cache_key(self.ENTITY, scope="summary"),
            _load,
            force_refresh=force_refresh,
            expected_type=DashboardSummary,
            failure_message="Failed to fetch dashboard summary",
        )
        if result.success:
            self.summary = result.data
        return result

    async def fetch_monthly_spending(
        self, month: int, year: int, force_refresh: bool = False,
    ) -> ServiceResult[tuple[MonthlySpending, ...]]:
        async def _load(_user_id: str) -> tuple[MonthlySpending, ...]:
            return tuple(await self._repo.monthly_spending(month, year))

        result = await self._cached_read(
            build_cache_key(
                self.ENTITY, {"month": month, "year": year}, scope="monthly-spending",
            ),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch monthly spending",
        )
        if result.success and result.data is not None:
            self._set_items(result.data)
        return result
