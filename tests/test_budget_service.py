from unittest.mock import AsyncMock

import pytest

from fintrack.cache import RefreshPolicy
from fintrack.models.budget import Budget, BudgetItem, BudgetItemCreate, BudgetUpdate
from fintrack.repositories.budget_repository import BudgetRepository
from fintrack.services.budget_service import BudgetService
from tests.fakes import budget_row


@pytest.fixture
def repo():
    repo = AsyncMock(spec=BudgetRepository)
    repo.list_for_user.return_value = [Budget.model_validate(budget_row())]
    return repo


@pytest.fixture
def service(repo, cache, router, session, logger):
    return BudgetService(repo=repo, cache=cache, router=router, session=session, logger=logger)


@pytest.mark.unit
def test_only_delete_patches_locally():
    policies = BudgetService.WRITE_POLICIES
    assert policies["delete_budget"] is RefreshPolicy.INVALIDATE_ONLY
    assert all(
        policy is RefreshPolicy.INVALIDATE_AND_REFETCH
        for name, policy in policies.items()
        if name != "delete_budget"
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_refresh_spending_routes_through_budget_items_and_refetches(service, repo, cache):
    await service.fetch_budgets()
    cache.set("budget-items", ("cached",))
    cache.set("transactions-{}", ("kept",))
    repo.list_for_user.return_value = [Budget.model_validate(budget_row(spent="120"))]

    result = await service.refresh_budget_spending("budget-1")

    assert result.success
    repo.refresh_spending.assert_awaited_once_with("budget-1")
    assert str(service.budgets[0].budget_items[0].spent_amount) == "120"
    assert set(cache.stats().keys) == {"budgets", "transactions-{}"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_item_refetches_budgets(service, repo):
    repo.add_item.return_value = BudgetItem(
        id="item-2", budget_id="budget-1", category_id="cat-2", planned_amount="50",
    )

    result = await service.add_budget_item(
        "budget-1", BudgetItemCreate(category_id="cat-2", planned_amount="50"),
    )

    assert result.success
    repo.list_for_user.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_forwards_item_set(service, repo):
    items = [BudgetItemCreate(category_id="cat-1", planned_amount="300")]
    repo.update.return_value = Budget.model_validate(budget_row())

    await service.update_budget("budget-1", BudgetUpdate(name="April"), items)

    args = repo.update.await_args.args
    assert args[0] == "budget-1"
    assert args[3] == items


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_patches_without_refetch(service, repo, cache):
    await service.fetch_budgets()

    result = await service.delete_budget("budget-1")

    assert result.success
    assert service.budgets == []
    assert repo.list_for_user.await_count == 1
    assert cache.get("budgets") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_spending_details_are_not_cached(service, repo, cache):
    repo.spending_details.return_value = []

    await service.get_budget_spending_details("budget-1")
    await service.get_budget_spending_details("budget-1")

    assert repo.spending_details.await_count == 2
    assert cache.stats().size == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_spending_details_failure_is_reported(service, repo):
    repo.spending_details.side_effect = ValueError("bad row")

    result = await service.get_budget_spending_details("budget-1")

    assert not result.success
    assert result.error == "bad row"
