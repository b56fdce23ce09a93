"""
Fund Source Service.

Balances are owned by the remote store.  Fund-source writes patch the
local list from the returned row; the invalidation router drops cached
transactions and dashboard aggregates that embed the old values.
"""

from __future__ import annotations

from decimal import Decimal

from fintrack.auth import SessionManager
from fintrack.cache import (
    CacheStore,
    EntityKind,
    InvalidationRouter,
    RefreshPolicy,
    build_cache_key,
)
from fintrack.logger import StructuredLogger
from fintrack.models.fund_source import FundSource, FundSourceCreate, FundSourceUpdate
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.fund_source_repository import FundSourceRepository
from fintrack.services.base_service import CachedEntityService


class FundSourceService(CachedEntityService[FundSource]):

    ENTITY = EntityKind.FUND_SOURCES
    WRITE_POLICIES = {
        "create_fund_source": RefreshPolicy.INVALIDATE_ONLY,
        "update_fund_source": RefreshPolicy.INVALIDATE_ONLY,
        "delete_fund_source": RefreshPolicy.INVALIDATE_ONLY,
    }

    def __init__(
        self,
        repo: FundSourceRepository,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(cache, router, session, logger)
        self._repo = repo

    @property
    def fund_sources(self) -> list[FundSource]:
        return self.items

    @property
    def total_balance(self) -> Decimal:
        """Sum of the balances in the local list."""
        return sum((source.balance for source in self.items), Decimal("0"))

    async def fetch_fund_sources(
        self, force_refresh: bool = False,
    ) -> ServiceResult[tuple[FundSource, ...]]:
        async def _load(user_id: str) -> tuple[FundSource, ...]:
            return tuple(await self._repo.list_for_user(user_id))

        result = await self._cached_read(
            build_cache_key(self.ENTITY),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch fund sources",
        )
        if result.success and result.data is not None:
            self._set_items(result.data)
        return result

    async def create_fund_source(self, data: FundSourceCreate) -> ServiceResult[FundSource]:
        return await self._mutate(
            "create_fund_source",
            lambda user_id: self._repo.create(user_id, data),
            failure_message="Failed to create fund source",
            patch=self._patch_prepend,
        )

    async def update_fund_source(
        self, fund_source_id: str, updates: FundSourceUpdate,
    ) -> ServiceResult[FundSource]:
        return await self._mutate(
            "update_fund_source",
            lambda user_id: self._repo.update(fund_source_id, user_id, updates),
            failure_message="Failed to update fund source",
            entity_id=fund_source_id,
            patch=self._patch_replace,
        )

    async def delete_fund_source(self, fund_source_id: str) -> ServiceResult[None]:
        """Soft delete: the row stays for historical transactions."""
        return await self._mutate(
            "delete_fund_source",
            lambda user_id: self._repo.deactivate(fund_source_id, user_id),
            failure_message="Failed to delete fund source",
            entity_id=fund_source_id,
            patch=lambda _: self._patch_remove(fund_source_id),
        )
