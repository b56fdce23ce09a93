"""
Repository Layer Package.

Provides data-access abstractions over Supabase.  All remote operations
flow through repositories; services never touch ``db.supabase``
directly.

Usage:
    from fintrack.repositories.transaction_repository import TransactionRepository
    from fintrack.repositories.budget_repository import BudgetRepository
"""

from fintrack.repositories.base_repository import BaseRepository, RecordNotFoundError
from fintrack.repositories.budget_repository import BudgetRepository
from fintrack.repositories.category_repository import CategoryRepository
from fintrack.repositories.dashboard_repository import DashboardRepository
from fintrack.repositories.fund_source_repository import FundSourceRepository
from fintrack.repositories.goal_repository import GoalRepository
from fintrack.repositories.notification_repository import NotificationRepository
from fintrack.repositories.recurring_pattern_repository import RecurringPatternRepository
from fintrack.repositories.transaction_repository import TransactionRepository

__all__ = [
    "BaseRepository",
    "RecordNotFoundError",
    "BudgetRepository",
    "CategoryRepository",
    "DashboardRepository",
    "FundSourceRepository",
    "GoalRepository",
    "NotificationRepository",
    "RecurringPatternRepository",
    "TransactionRepository",
]
