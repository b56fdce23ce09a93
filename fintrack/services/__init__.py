"""
Business Logic Services Package.

Services depend on the Repository layer for data access, on the shared
entity cache for reads, and on the ``SessionManager`` for user context.

The ``create_services()`` factory wires every repository and service together,
returning a typed dict that the application layer can consume without
knowing the internal dependency graph.
"""

from __future__ import annotations

from typing import Optional, TypedDict

from fintrack.auth import SessionManager
from fintrack.cache import CacheStore, InvalidationRouter
from fintrack.config import AppConfig
from fintrack.database import DatabaseManager
from fintrack.logger import StructuredLogger, get_logger
from fintrack.repositories.budget_repository import BudgetRepository
from fintrack.repositories.category_repository import CategoryRepository
from fintrack.repositories.dashboard_repository import DashboardRepository
from fintrack.repositories.fund_source_repository import FundSourceRepository
from fintrack.repositories.goal_repository import GoalRepository
from fintrack.repositories.notification_repository import NotificationRepository
from fintrack.repositories.recurring_pattern_repository import RecurringPatternRepository
from fintrack.repositories.transaction_repository import TransactionRepository
from fintrack.services.auth_service import AuthService
from fintrack.services.budget_service import BudgetService
from fintrack.services.category_service import CategoryService
from fintrack.services.dashboard_service import DashboardService
from fintrack.services.fund_source_service import FundSourceService
from fintrack.services.goal_service import GoalService
from fintrack.services.notification_service import NotificationService
from fintrack.services.recurring_pattern_service import RecurringPatternService
from fintrack.services.transaction_service import TransactionService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    # --- Shared cache ---
    cache: CacheStore
    invalidation_router: InvalidationRouter

    # --- Identity ---
    auth_service: AuthService

    # --- Cached entity services ---
    transaction_service: TransactionService
    fund_source_service: FundSourceService
    category_service: CategoryService
    budget_service: BudgetService
    goal_service: GoalService
    recurring_pattern_service: RecurringPatternService
    dashboard_service: DashboardService

    # --- Uncached ---
    notification_service: NotificationService


def create_services(
    db: DatabaseManager,
    config: AppConfig,
    session: SessionManager,
    logger: Optional[StructuredLogger] = None,
) -> ServiceContainer:
    """
    Wire all repositories and services together.

    This is the single composition root for the service layer.  The
    application entry-point calls this once at startup.  It builds the
    one ``CacheStore`` of the process and hands the same instance to every
    cached service.

    Cache keys carry no user id, so the store is cleared whenever the
    session's user changes (sign-in as someone else, sign-out).

    Args:
        db: DatabaseManager (connected or not; offline calls fail per request).
        config: Application configuration.
        session: Shared identity provider.
        logger: Optional logger; defaults to ``get_logger("fintrack.services")``.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = logger or get_logger("fintrack.services")

    # ------------------------------------------------------------------
    # 1. Shared cache
    # ------------------------------------------------------------------
    cache_logger = logger.child("cache")
    cache = CacheStore(logger=cache_logger, default_ttl=config.CACHE_DEFAULT_TTL_S)
    router = InvalidationRouter(store=cache, logger=cache_logger)

    def _reset_cache_on_identity_change(previous: Optional[str], current: Optional[str]) -> None:
        logger.info(
            "Session user changed; clearing entity cache",
            extra={"event": "CACHE_RESET", "user_id": current},
        )
        cache.clear()

    session.add_identity_listener(_reset_cache_on_identity_change)

    # ------------------------------------------------------------------
    # 2. Repositories (data-access layer)
    # ------------------------------------------------------------------
    transaction_repo = TransactionRepository(db=db, logger=logger)
    fund_source_repo = FundSourceRepository(db=db, logger=logger)
    category_repo = CategoryRepository(db=db, logger=logger)
    budget_repo = BudgetRepository(db=db, logger=logger)
    goal_repo = GoalRepository(db=db, logger=logger)
    recurring_repo = RecurringPatternRepository(db=db, logger=logger)
    dashboard_repo = DashboardRepository(db=db, logger=logger)
    notification_repo = NotificationRepository(db=db, logger=logger)

    # ------------------------------------------------------------------
    # 3. Services
    # ------------------------------------------------------------------
    transaction_service = TransactionService(
        repo=transaction_repo,
        cache=cache,
        router=router,
        session=session,
        config=config,
        logger=logger,
    )
    fund_source_service = FundSourceService(
        repo=fund_source_repo, cache=cache, router=router, session=session, logger=logger,
    )
    category_service = CategoryService(
        repo=category_repo, cache=cache, router=router, session=session, logger=logger,
    )
    budget_service = BudgetService(
        repo=budget_repo, cache=cache, router=router, session=session, logger=logger,
    )
    goal_service = GoalService(
        repo=goal_repo, cache=cache, router=router, session=session, logger=logger,
    )
    recurring_pattern_service = RecurringPatternService(
        repo=recurring_repo, cache=cache, router=router, session=session, logger=logger,
    )
    dashboard_service = DashboardService(
        repo=dashboard_repo, cache=cache, router=router, session=session, logger=logger,
    )
    notification_service = NotificationService(
        repo=notification_repo, session=session, config=config, logger=logger,
    )
    auth_service = AuthService(db=db, session=session, logger=logger)

    return ServiceContainer(
        cache=cache,
        invalidation_router=router,
        auth_service=auth_service,
        transaction_service=transaction_service,
        fund_source_service=fund_source_service,
        category_service=category_service,
        budget_service=budget_service,
        goal_service=goal_service,
        recurring_pattern_service=recurring_pattern_service,
        dashboard_service=dashboard_service,
        notification_service=notification_service,
    )
