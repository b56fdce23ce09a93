"""
Shared Enumerations for Finance Tracker Models.

All string enumerations for type-safe field constraints.
StrEnum values compare equal to their string equivalents,
so existing code like ``if txn.type == 'income'`` continues to work.
"""

from __future__ import annotations
from enum import StrEnum


class TransactionType(StrEnum):
    """Direction of money movement.

    ``TRANSFER`` moves money between two of the user's fund sources and
    therefore carries both a source and a destination fund.
    """

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class TransactionStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class CategoryType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


class FundSourceType(StrEnum):
    """Where the money is held."""

    BANK = "bank"
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    WALLET = "wallet"
    OTHER = "other"


class BudgetPeriod(StrEnum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class SpendingStatus(StrEnum):
    """Per-category budget health as computed by the remote procedure."""

    OK = "ok"
    WARNING = "warning"
    EXCEEDED = "exceeded"


class GoalCategory(StrEnum):
    SAVINGS = "savings"
    INVESTMENT = "investment"
    DEBT_PAYOFF = "debt_payoff"
    OTHER = "other"


class GoalStatus(StrEnum):
    """Lifecycle of a financial goal.

    Goals are closed with ``COMPLETED`` or ``CANCELLED`` instead of being
    deleted so their history stays visible.
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Frequency(StrEnum):
    """Recurrence unit of a recurring pattern (multiplied by ``interval``)."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class NotificationType(StrEnum):
    BUDGET_ALERT = "budget_alert"
    RECURRING_REMINDER = "recurring_reminder"
    GOAL_PROGRESS = "goal_progress"
    LOW_BALANCE = "low_balance"
    FINANCIAL_INSIGHT = "financial_insight"
    SECURITY = "security"


class NotificationColor(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"
    PRIMARY = "primary"
    INFO = "info"
