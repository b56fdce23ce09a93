"""
Data Models Package.

Re-exports all Pydantic models:
    from fintrack.models import Transaction, Budget, FundSource, Category
    from fintrack.models import TransactionType, GoalStatus, Frequency
    from fintrack.models import ServiceResult
"""

from fintrack.models.enums import (
    BudgetPeriod,
    CategoryType,
    Frequency,
    FundSourceType,
    GoalCategory,
    GoalStatus,
    NotificationColor,
    NotificationType,
    SpendingStatus,
    TransactionStatus,
    TransactionType,
)
from fintrack.models.category import Category, CategoryCreate, CategoryUpdate
from fintrack.models.fund_source import FundSource, FundSourceCreate, FundSourceUpdate
from fintrack.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionQuery,
    TransactionUpdate,
)
from fintrack.models.budget import (
    Budget,
    BudgetCreate,
    BudgetItem,
    BudgetItemCreate,
    BudgetSpendingDetail,
    BudgetUpdate,
)
from fintrack.models.goal import (
    FinancialGoal,
    FinancialGoalCreate,
    FinancialGoalUpdate,
    GoalProgress,
)
from fintrack.models.recurring_pattern import (
    RecurringPattern,
    RecurringPatternCreate,
    RecurringPatternUpdate,
)
from fintrack.models.notification import Notification
from fintrack.models.dashboard import DashboardSummary, MonthlySpending
from fintrack.models.user import SessionUser
from fintrack.models.service_models import ServiceResult

__all__ = [
    "Budget",
    "BudgetCreate",
    "BudgetItem",
    "BudgetItemCreate",
    "BudgetPeriod",
    "BudgetSpendingDetail",
    "BudgetUpdate",
    "Category",
    "CategoryCreate",
    "CategoryType",
    "CategoryUpdate",
    "DashboardSummary",
    "FinancialGoal",
    "FinancialGoalCreate",
    "FinancialGoalUpdate",
    "Frequency",
    "FundSource",
    "FundSourceCreate",
    "FundSourceType",
    "FundSourceUpdate",
    "GoalCategory",
    "GoalProgress",
    "GoalStatus",
    "MonthlySpending",
    "Notification",
    "NotificationColor",
    "NotificationType",
    "RecurringPattern",
    "RecurringPatternCreate",
    "RecurringPatternUpdate",
    "ServiceResult",
    "SessionUser",
    "SpendingStatus",
    "Transaction",
    "TransactionCreate",
    "TransactionQuery",
    "TransactionStatus",
    "TransactionType",
    "TransactionUpdate",
]
