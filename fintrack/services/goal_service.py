"""
Financial Goal Service.

All goal writes patch the local list from the returned row.  The goal
progress view (``financial-goals-progress``) shares the entity prefix, so
every goal write also drops it.
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
from fintrack.models.enums import GoalStatus
from fintrack.models.goal import (
    FinancialGoal,
    FinancialGoalCreate,
    FinancialGoalUpdate,
    GoalProgress,
)
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.goal_repository import GoalRepository
from fintrack.services.base_service import CachedEntityService


class GoalService(CachedEntityService[FinancialGoal]):
    """Cache-aside access to financial goals and their progress view."""

    ENTITY = EntityKind.FINANCIAL_GOALS
    WRITE_POLICIES = {
        "create_goal": RefreshPolicy.INVALIDATE_ONLY,
        "update_goal": RefreshPolicy.INVALIDATE_ONLY,
        "update_goal_progress": RefreshPolicy.INVALIDATE_ONLY,
        "complete_goal": RefreshPolicy.INVALIDATE_ONLY,
        "cancel_goal": RefreshPolicy.INVALIDATE_ONLY,
        "delete_goal": RefreshPolicy.INVALIDATE_ONLY,
    }

    def __init__(
        self,
        repo: GoalRepository,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(cache, router, session, logger)
        self._repo = repo
        self.progress: list[GoalProgress] = []

    @property
    def goals(self) -> list[FinancialGoal]:
        return self.items

    @property
    def active_goals(self) -> list[FinancialGoal]:
        return [g for g in self.items if g.status == GoalStatus.ACTIVE]

    @property
    def completed_goals(self) -> list[FinancialGoal]:
        return [g for g in self.items if g.status == GoalStatus.COMPLETED]

    async def fetch_goals(
        self, force_refresh: bool = False,
    ) -> ServiceResult[tuple[FinancialGoal, ...]]:
        async def _load(user_id: str) -> tuple[FinancialGoal, ...]:
            return tuple(await self._repo.list_for_user(user_id))

        result = await self._cached_read(
            build_cache_key(self.ENTITY),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch goals",
        )
        if result.success and result.data is not None:
            self._set_items(result.data)
        return result

    async def get_goals_with_progress(
        self, force_refresh: bool = False,
    ) -> ServiceResult[tuple[GoalProgress, ...]]:
        async def _load(_user_id: str) -> tuple[GoalProgress, ...]:
            return tuple(await self._repo.goals_with_progress())

        result = await self._cached_read(
            build_cache_key(self.ENTITY, scope="progress"),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch goal progress",
        )
        if result.success and result.data is not None:
            self.progress = list(result.data)
        return result

    async def create_goal(self, data: FinancialGoalCreate) -> ServiceResult[FinancialGoal]:
        return await self._mutate(
            "create_goal",
            lambda user_id: self._repo.create(user_id, data),
            failure_message="Failed to create goal",
            patch=self._patch_append,
        )

    async def update_goal(
        self, goal_id: str, updates: FinancialGoalUpdate,
    ) -> ServiceResult[FinancialGoal]:
        return await self._mutate(
            "update_goal",
            lambda user_id: self._repo.update(goal_id, user_id, updates),
            failure_message="Failed to update goal",
            entity_id=goal_id,
            patch=self._patch_replace,
        )

    async def update_goal_progress(
        self, goal_id: str, current_amount: Decimal,
    ) -> ServiceResult[FinancialGoal]:
        updates = FinancialGoalUpdate(current_amount=current_amount)
        return await self._mutate(
            "update_goal_progress",
            lambda user_id: self._repo.update(goal_id, user_id, updates),
            failure_message="Failed to update goal progress",
            entity_id=goal_id,
            patch=self._patch_replace,
        )

    async def complete_goal(self, goal_id: str) -> ServiceResult[FinancialGoal]:
        return await self._mutate(
            "complete_goal",
            lambda user_id: self._repo.set_status(goal_id, user_id, GoalStatus.COMPLETED),
            failure_message="Failed to complete goal",
            entity_id=goal_id,
            patch=self._patch_replace,
        )

    async def cancel_goal(self, goal_id: str) -> ServiceResult[FinancialGoal]:
        return await self._mutate(
            "cancel_goal",
            lambda user_id: self._repo.set_status(goal_id, user_id, GoalStatus.CANCELLED),
            failure_message="Failed to cancel goal",
            entity_id=goal_id,
            patch=self._patch_replace,
        )

    async def delete_goal(self, goal_id: str) -> ServiceResult[None]:
        return await self._mutate(
            "delete_goal",
            lambda user_id: self._repo.delete(goal_id, user_id),
            failure_message="Failed to delete goal",
            entity_id=goal_id,
            patch=lambda _: self._patch_remove(goal_id),
        )
