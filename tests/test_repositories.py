from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from fintrack.models.budget import BudgetItemCreate, BudgetUpdate
from fintrack.models.dashboard import DashboardSummary
from fintrack.models.fund_source import FundSourceCreate, FundSourceUpdate
from fintrack.models.recurring_pattern import RecurringPatternCreate
from fintrack.models.transaction import TransactionCreate, TransactionQuery
from fintrack.repositories.base_repository import RecordNotFoundError
from fintrack.repositories.budget_repository import BudgetRepository
from fintrack.repositories.dashboard_repository import DashboardRepository
from fintrack.repositories.fund_source_repository import FundSourceRepository
from fintrack.repositories.notification_repository import NotificationRepository, extract_record
from fintrack.repositories.recurring_pattern_repository import RecurringPatternRepository
from fintrack.repositories.transaction_repository import TransactionRepository
from tests.fakes import (
    USER_ID,
    FakeSupabase,
    budget_row,
    fund_source_row,
    notification_row,
    pattern_row,
    transaction_row,
)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_transaction_list_applies_filters(fake_db, fake_supabase, logger):
    fake_supabase.query.data = [transaction_row()]
    repo = TransactionRepository(db=fake_db, logger=logger)

    rows = await repo.list_for_user(
        USER_ID,
        TransactionQuery(
            start_date=date(2026, 3, 1),
            fund_source_id="fund-1",
            limit=20,
            offset=40,
        ),
    )

    query = fake_supabase.query
    assert rows[0].id == "txn-1"
    assert fake_supabase.tables == ["transactions"]
    assert query.called("gte") == [(("transaction_date", "2026-03-01"), {})]
    assert query.called("or_") == [(("source_fund_id.eq.fund-1,destination_fund_id.eq.fund-1",), {})]
    assert query.called("range") == [((40, 59), {})]
    assert query.called("order") == [(("transaction_date",), {"desc": True})]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_transaction_create_goes_through_balance_procedure(logger):
    supabase = FakeSupabase(rpc_data=[transaction_row("txn-9")])
    repo = TransactionRepository(db=SimpleNamespace(supabase=supabase), logger=logger)

    created = await repo.create_with_balance_update(
        TransactionCreate(
            type="expense", amount=Decimal("12.5"), source_fund_id="fund-1",
            transaction_date=date(2026, 3, 14),
        )
    )

    function, params = supabase.rpc_calls[0]
    assert function == "create_transaction_with_balance_update"
    assert params["p_amount"] == 12.5
    assert params["p_destination_fund_id"] == ""
    assert "p_notes" not in params
    assert "p_recurring_pattern_id" not in params
    assert created.id == "txn-9"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fund_source_create_sends_user_and_drops_unset(fake_db, fake_supabase, logger):
    fake_supabase.query.data = [fund_source_row("fund-7")]
    repo = FundSourceRepository(db=fake_db, logger=logger)

    await repo.create(USER_ID, FundSourceCreate(name="Cash", type="cash"))

    (payload,), _ = fake_supabase.query.called("insert")[0]
    assert payload == {"name": "Cash", "type": "cash", "user_id": USER_ID}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_partial_update_sends_only_set_fields(fake_db, fake_supabase, logger):
    fake_supabase.query.data = [fund_source_row()]
    repo = FundSourceRepository(db=fake_db, logger=logger)

    await repo.update("fund-1", USER_ID, FundSourceUpdate(name="Main"))

    (payload,), _ = fake_supabase.query.called("update")[0]
    assert set(payload) == {"name", "updated_at"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_single_row_write_without_match_raises(fake_db, fake_supabase, logger):
    fake_supabase.query.data = []
    repo = FundSourceRepository(db=fake_db, logger=logger)

    with pytest.raises(RecordNotFoundError):
        await repo.deactivate("missing", USER_ID)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_budget_update_reinserts_only_planned_items(fake_db, fake_supabase, logger):
    fake_supabase.query.data = [budget_row()]
    repo = BudgetRepository(db=fake_db, logger=logger)

    await repo.update(
        "budget-1",
        USER_ID,
        BudgetUpdate(name="April"),
        [
            BudgetItemCreate(category_id="cat-1", planned_amount="100"),
            BudgetItemCreate(category_id="cat-2", planned_amount="0"),
        ],
    )

    inserts = fake_supabase.query.called("insert")
    assert len(inserts) == 1
    (items,), _ = inserts[0]
    assert items == [{"category_id": "cat-1", "planned_amount": 100.0, "budget_id": "budget-1"}]
    assert "budget_items" in fake_supabase.tables


@pytest.mark.unit
@pytest.mark.asyncio
async def test_recurring_create_starts_at_start_date(fake_db, fake_supabase, logger):
    fake_supabase.query.data = [pattern_row()]
    repo = RecurringPatternRepository(db=fake_db, logger=logger)

    await repo.create(
        USER_ID,
        RecurringPatternCreate(
            name="Rent", frequency="monthly", amount="900",
            transaction_type="expense", start_date=date(2026, 5, 1),
        ),
    )

    (payload,), _ = fake_supabase.query.called("insert")[0]
    assert payload["interval"] == 1
    assert payload["next_execution_date"] == "2026-05-01"
    assert payload["is_active"] is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_dashboard_summary_defaults_when_empty(logger):
    repo = DashboardRepository(db=SimpleNamespace(supabase=FakeSupabase(rpc_data=[])), logger=logger)
    assert await repo.summary() == DashboardSummary()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unread_count_accepts_scalar_or_row(logger):
    scalar = NotificationRepository(
        db=SimpleNamespace(supabase=FakeSupabase(rpc_data=4)), logger=logger,
    )
    listed = NotificationRepository(
        db=SimpleNamespace(supabase=FakeSupabase(rpc_data=[7])), logger=logger,
    )
    assert await scalar.unread_count() == 4
    assert await listed.unread_count() == 7


@pytest.mark.unit
def test_extract_record_handles_payload_shapes():
    row = notification_row()
    assert extract_record({"data": {"record": row}}, "record") == row
    assert extract_record({"record": row}, "record") == row
    assert extract_record({"new": row}, "record") == row
    assert extract_record({"old": {"id": "n-1"}}, "old_record") == {"id": "n-1"}
    assert extract_record({"data": {}}, "record") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_transaction_create_forwards_notes_and_pattern_when_set(logger):
    supabase = FakeSupabase(rpc_data=[transaction_row("txn-10")])
    repo = TransactionRepository(db=SimpleNamespace(supabase=supabase), logger=logger)

    await repo.create_with_balance_update(
        TransactionCreate(
            type="expense", amount=Decimal("9"), source_fund_id="fund-1",
            transaction_date=date(2026, 3, 14), notes="rent share",
            recurring_pattern_id="pat-1",
        )
    )

    _, params = supabase.rpc_calls[0]
    assert params["p_notes"] == "rent share"
    assert params["p_recurring_pattern_id"] == "pat-1"
