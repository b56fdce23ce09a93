from unittest.mock import AsyncMock

import pytest
from postgrest.exceptions import APIError

from fintrack.cache import RefreshPolicy
from fintrack.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionQuery,
    TransactionUpdate,
)
from fintrack.repositories.transaction_repository import TransactionRepository
from fintrack.services.transaction_service import TransactionService
from tests.fakes import USER_ID, transaction_row


def _txn(txn_id: str = "txn-1", amount: str = "20") -> Transaction:
    return Transaction.model_validate(transaction_row(txn_id, amount))


@pytest.fixture
def repo():
    repo = AsyncMock(spec=TransactionRepository)
    repo.list_for_user.return_value = [_txn("txn-1"), _txn("txn-2")]
    return repo


@pytest.fixture
def service(repo, cache, router, session, config, logger):
    return TransactionService(
        repo=repo, cache=cache, router=router, session=session, config=config, logger=logger,
    )


@pytest.mark.unit
def test_write_policies_are_declared():
    assert TransactionService.WRITE_POLICIES == {
        "create_transaction": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "update_transaction": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "delete_transaction": RefreshPolicy.INVALIDATE_ONLY,
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_second_read_is_served_from_cache(service, repo):
    first = await service.fetch_transactions()
    second = await service.fetch_transactions()

    assert first.success and not first.from_cache
    assert second.success and second.from_cache
    assert second.data == first.data
    repo.list_for_user.assert_awaited_once_with(USER_ID, TransactionQuery())
    assert [t.id for t in service.transactions] == ["txn-1", "txn-2"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_force_refresh_bypasses_cache(service, repo):
    await service.fetch_transactions()
    result = await service.fetch_transactions(force_refresh=True)

    assert not result.from_cache
    assert repo.list_for_user.await_count == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_each_page_size_has_its_own_entry(service, repo, cache):
    await service.fetch_transactions(TransactionQuery(limit=20))
    await service.fetch_transactions(TransactionQuery(limit=50))
    await service.fetch_transactions(TransactionQuery(limit=20))

    assert repo.list_for_user.await_count == 2
    assert set(cache.stats().keys) == {
        'transactions-{"limit":20}',
        'transactions-{"limit":50}',
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_failure_keeps_previous_state(service, repo, cache):
    await service.fetch_transactions(TransactionQuery(limit=5))
    repo.list_for_user.side_effect = APIError({"message": "boom", "code": "500"})

    result = await service.fetch_transactions(TransactionQuery(limit=10))

    assert not result.success
    assert result.status_code == 500
    assert service.error == "boom"
    assert not service.loading
    assert [t.id for t in service.transactions] == ["txn-1", "txn-2"]
    assert cache.stats().keys == ['transactions-{"limit":5}']


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unauthenticated_read_touches_nothing(repo, cache, router, anonymous_session, config, logger):
    service = TransactionService(
        repo=repo, cache=cache, router=router, session=anonymous_session, config=config, logger=logger,
    )
    result = await service.fetch_transactions()

    assert result.status_code == 401
    repo.list_for_user.assert_not_awaited()
    assert cache.stats().size == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_invalidates_related_and_refetches(service, repo, cache):
    cache.set("fund-sources", ("stale",))
    cache.set("budgets", ("stale",))
    cache.set("budget-items", ("kept",))
    cache.set("dashboard-summary", ("stale",))
    repo.create_with_balance_update.return_value = _txn("txn-3")

    result = await service.create_transaction(
        TransactionCreate(type="expense", amount="20", source_fund_id="fund-1", transaction_date="2026-03-14"),
    )

    assert result.success
    assert result.data.id == "txn-3"
    repo.list_for_user.assert_awaited_once_with(USER_ID, TransactionQuery(limit=20))
    assert set(cache.stats().keys) == {"budget-items", 'transactions-{"limit":20}'}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_mutation_never_invalidates(service, repo, cache):
    cache.set("fund-sources", ("cached",))
    cache.set("transactions-{}", ("cached",))
    repo.create_with_balance_update.side_effect = APIError({"message": "insufficient funds"})

    result = await service.create_transaction(
        TransactionCreate(type="expense", amount="20", transaction_date="2026-03-14"),
    )

    assert not result.success
    assert result.error == "insufficient funds"
    assert set(cache.stats().keys) == {"fund-sources", "transactions-{}"}
    repo.list_for_user.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_defaults_date_to_today(service, repo):
    repo.update_with_balance_adjustment.return_value = _txn("txn-1", "30")

    await service.update_transaction("txn-1", TransactionUpdate(amount="30"))

    args = repo.update_with_balance_adjustment.await_args.args
    assert args[0] == "txn-1"
    assert args[2] is not None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_patches_local_list_without_refetch(service, repo, cache):
    await service.fetch_transactions()
    repo.delete_with_balance_adjustment.return_value = True

    result = await service.delete_transaction("txn-1")

    assert result.success
    assert [t.id for t in service.transactions] == ["txn-2"]
    assert repo.list_for_user.await_count == 1
    assert cache.stats().size == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_of_missing_row_is_a_404_without_invalidation(service, repo, cache):
    cache.set("fund-sources", ("cached",))
    repo.delete_with_balance_adjustment.return_value = False

    result = await service.delete_transaction("ghost")

    assert result.status_code == 404
    assert cache.get("fund-sources") == ("cached",)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_patching_local_list_leaves_cached_payload_alone(service, repo, cache):
    await service.fetch_transactions()
    cached_before = cache.get("transactions-{}")

    service.items.pop()

    assert cache.get("transactions-{}") is cached_before
    assert len(cached_before) == 2
