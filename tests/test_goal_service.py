from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from fintrack.models.enums import GoalStatus
from fintrack.models.goal import FinancialGoal, GoalProgress
from fintrack.repositories.goal_repository import GoalRepository
from fintrack.services.goal_service import GoalService
from tests.fakes import goal_row


def _goal(goal_id: str = "goal-1", status: str = "active") -> FinancialGoal:
    return FinancialGoal.model_validate(goal_row(goal_id, status))


@pytest.fixture
def repo():
    repo = AsyncMock(spec=GoalRepository)
    repo.list_for_user.return_value = [_goal("goal-1"), _goal("goal-2", "completed")]
    repo.goals_with_progress.return_value = [
        GoalProgress(
            goal_id="goal-1",
            goal_name="Emergency fund",
            target_amount=Decimal("1000"),
            current_amount=Decimal("250"),
            target_date="2026-12-31",
            days_remaining=120,
            progress_percentage=Decimal("25"),
            status=GoalStatus.ACTIVE,
            is_on_track=True,
        )
    ]
    return repo


@pytest.fixture
def service(repo, cache, router, session, logger):
    return GoalService(repo=repo, cache=cache, router=router, session=session, logger=logger)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_active_and_completed_views(service):
    await service.fetch_goals()
    assert [g.id for g in service.active_goals] == ["goal-1"]
    assert [g.id for g in service.completed_goals] == ["goal-2"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_progress_is_cached_under_its_own_key(service, repo, cache):
    await service.get_goals_with_progress()
    again = await service.get_goals_with_progress()

    assert again.from_cache
    repo.goals_with_progress.assert_awaited_once()
    assert "financial-goals-progress" in cache.stats().keys
    assert service.progress[0].goal_id == "goal-1"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_complete_goal_drops_goal_views_and_patches_status(service, repo, cache):
    await service.fetch_goals()
    await service.get_goals_with_progress()
    repo.set_status.return_value = _goal("goal-1", "completed")

    result = await service.complete_goal("goal-1")

    assert result.success
    repo.set_status.assert_awaited_once()
    assert repo.set_status.await_args.args[2] is GoalStatus.COMPLETED
    assert cache.stats().size == 0
    assert [g.id for g in service.completed_goals] == ["goal-1", "goal-2"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_goal_write_leaves_unrelated_entities_cached(service, repo, cache):
    cache.set("budgets", ("kept",))
    repo.delete.return_value = None

    await service.delete_goal("goal-1")

    assert cache.get("budgets") == ("kept",)
