"""Recurring Pattern Service."""

from __future__ import annotations

from fintrack.auth import SessionManager
from fintrack.cache import (
    CacheStore,
    EntityKind,
    InvalidationRouter,
    RefreshPolicy,
    build_cache_key,
)
from fintrack.logger import StructuredLogger
from fintrack.models.recurring_pattern import (
    RecurringPattern,
    RecurringPatternCreate,
    RecurringPatternUpdate,
)
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.recurring_pattern_repository import RecurringPatternRepository
from fintrack.services.base_service import CachedEntityService


class RecurringPatternService(CachedEntityService[RecurringPattern]):
    """Cache-aside access to recurring patterns.

    Creates and updates re-fetch so the joined category and fund sources
    are populated; deletes and pause / resume patch the local list.
    """

    ENTITY = EntityKind.RECURRING_PATTERNS
    WRITE_POLICIES = {
        "create_pattern": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "update_pattern": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "delete_pattern": RefreshPolicy.INVALIDATE_ONLY,
        "toggle_pattern": RefreshPolicy.INVALIDATE_ONLY,
    }

    def __init__(
        self,
        repo: RecurringPatternRepository,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(cache, router, session, logger)
        self._repo = repo

    @property
    def patterns(self) -> list[RecurringPattern]:
        return self.items

    @property
    def active_patterns(self) -> list[RecurringPattern]:
        return [p for p in self.items if p.is_active]

    @property
    def inactive_patterns(self) -> list[RecurringPattern]:
        return [p for p in self.items if not p.is_active]

    async def fetch_patterns(
        self, force_refresh: bool = False,
    ) -> ServiceResult[tuple[RecurringPattern, ...]]:
        async def _load(user_id: str) -> tuple[RecurringPattern, ...]:
            return tuple(await self._repo.list_for_user(user_id))

        result = await self._cached_read(
            build_cache_key(self.ENTITY),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch recurring patterns",
        )
        if result.success and result.data is not None:
            self._set_items(result.data)
        return result

    async def _refetch(self) -> None:
        await self.fetch_patterns(force_refresh=True)

    async def create_pattern(
        self, data: RecurringPatternCreate,
    ) -> ServiceResult[RecurringPattern]:
        return await self._mutate(
            "create_pattern",
            lambda user_id: self._repo.create(user_id, data),
            failure_message="Failed to create recurring pattern",
        )

    async def update_pattern(
        self, pattern_id: str, updates: RecurringPatternUpdate,
    ) -> ServiceResult[RecurringPattern]:
        return await self._mutate(
            "update_pattern",
            lambda user_id: self._repo.update(pattern_id, user_id, updates),
            failure_message="Failed to update recurring pattern",
            entity_id=pattern_id,
        )

    async def delete_pattern(self, pattern_id: str) -> ServiceResult[None]:
        return await self._mutate(
            "delete_pattern",
            lambda user_id: self._repo.delete(pattern_id, user_id),
            failure_message="Failed to delete recurring pattern",
            entity_id=pattern_id,
            patch=lambda _: self._patch_remove(pattern_id),
        )

    async def toggle_pattern(
        self, pattern_id: str, is_active: bool,
    ) -> ServiceResult[RecurringPattern]:
        """Pause (``False``) or resume (``True``) a pattern."""

        def _patch(updated: RecurringPattern) -> None:
            self.items = [
                p.model_copy(update={"is_active": updated.is_active}) if p.id == pattern_id else p
                for p in self.items
            ]

        return await self._mutate(
            "toggle_pattern",
            lambda user_id: self._repo.set_active(pattern_id, user_id, is_active),
            failure_message="Failed to toggle recurring pattern",
            entity_id=pattern_id,
            patch=_patch,
        )
