"""Test doubles and row builders shared by the test modules."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from typing import Optional

USER_ID = "user-1"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder.

    Every builder method is recorded in ``calls`` and returns the same
    object; ``execute()`` resolves to a response carrying ``data``.
    """

    def __init__(self, data: object = None) -> None:
        self.data = data
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        if name.startswith("__"):
            raise AttributeError(name)

        def _method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return _method

    async def execute(self) -> SimpleNamespace:
        return SimpleNamespace(data=self.data)

    def called(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]


class FakeSupabase:
    """Records table and procedure access; serves canned responses."""

    def __init__(self, rows: object = None, rpc_data: object = None) -> None:
        self.query = FakeQuery(rows if rows is not None else [])
        self.rpc_data = rpc_data
        self.tables: list[str] = []
        self.rpc_calls: list[tuple[str, dict]] = []

    def table(self, name: str) -> FakeQuery:
        self.tables.append(name)
        return self.query

    def rpc(self, function: str, params: dict) -> FakeQuery:
        self.rpc_calls.append((function, params))
        return FakeQuery(self.rpc_data)


def fund_source_row(
    fund_id: str = "fund-1", balance: str = "100", name: str = "Checking",
) -> dict:
    return {
        "id": fund_id,
        "user_id": USER_ID,
        "name": name,
        "type": "bank",
        "balance": balance,
        "currency": "USD",
        "is_active": True,
    }


def transaction_row(
    txn_id: str = "txn-1",
    amount: str = "20",
    source_fund_id: Optional[str] = "fund-1",
) -> dict:
    return {
        "id": txn_id,
        "user_id": USER_ID,
        "type": "expense",
        "amount": amount,
        "source_fund_id": source_fund_id,
        "transaction_date": date(2026, 3, 14).isoformat(),
    }


def category_row(
    category_id: str = "cat-1",
    name: str = "Food",
    type_: str = "expense",
    parent_id: Optional[str] = None,
) -> dict:
    return {
        "id": category_id,
        "user_id": USER_ID,
        "name": name,
        "type": type_,
        "parent_id": parent_id,
        "is_active": True,
    }


def budget_row(budget_id: str = "budget-1", spent: str = "0") -> dict:
    return {
        "id": budget_id,
        "user_id": USER_ID,
        "name": "March",
        "period": "monthly",
        "start_date": "2026-03-01",
        "end_date": "2026-03-31",
        "total_limit": "500",
        "budget_items": [
            {
                "id": "item-1",
                "budget_id": budget_id,
                "category_id": "cat-1",
                "planned_amount": "200",
                "spent_amount": spent,
            }
        ],
    }


def goal_row(goal_id: str = "goal-1", status: str = "active", priority: int = 1) -> dict:
    return {
        "id": goal_id,
        "user_id": USER_ID,
        "name": "Emergency fund",
        "target_amount": "1000",
        "current_amount": "250",
        "category": "savings",
        "target_date": "2026-12-31",
        "status": status,
        "priority": priority,
    }


def pattern_row(pattern_id: str = "pattern-1", is_active: bool = True) -> dict:
    return {
        "id": pattern_id,
        "user_id": USER_ID,
        "name": "Rent",
        "frequency": "monthly",
        "interval": 1,
        "amount": "900",
        "transaction_type": "expense",
        "start_date": "2026-01-01",
        "next_execution_date": "2026-04-01",
        "is_active": is_active,
        "category": category_row(name="Housing"),
    }


def notification_row(notification_id: str = "n-1", is_read: bool = False) -> dict:
    return {
        "id": notification_id,
        "user_id": USER_ID,
        "type": "budget_alert",
        "title": "Budget alert",
        "message": "You have used 80% of March",
        "is_read": is_read,
    }
