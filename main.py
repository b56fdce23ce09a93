"""
Finance Tracker Data Layer Entry Point.

Bootstraps the dependency graph via constructor injection, resolves the
persisted Supabase session, warms the entity cache and subscribes to
realtime notifications.  Every subsystem is wired here; no module-level
globals.

Usage::

    python main.py
"""

from __future__ import annotations

import asyncio
import sys
import traceback
from datetime import date

from fintrack.auth import SessionManager
from fintrack.config import get_config
from fintrack.database import DatabaseManager
from fintrack.logger import StructuredLogger, get_logger
from fintrack.services import ServiceContainer, create_services


async def warm_caches(services: ServiceContainer, logger: StructuredLogger) -> None:
    """Fill the entity cache with the reads the dashboard needs first."""
    today = date.today()
    results = await asyncio.gather(
        services["fund_source_service"].fetch_fund_sources(),
        services["category_service"].fetch_categories(),
        services["transaction_service"].fetch_transactions(),
        services["budget_service"].fetch_budgets(),
        services["goal_service"].fetch_goals(),
        services["recurring_pattern_service"].fetch_patterns(),
        services["dashboard_service"].fetch_summary(),
        services["dashboard_service"].fetch_monthly_spending(today.month, today.year),
    )
    failures = [r.error for r in results if not r.success]
    if failures:
        logger.warning("Cache warm-up finished with %d failures: %s", len(failures), failures)

    stats = services["cache"].stats()
    logger.info("Entity cache warm: %d entries", stats.size, extra={"keys": stats.keys})


async def main() -> None:
    """Wire dependencies, warm the cache, then follow notifications."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting finance tracker data layer...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Database Manager (remote store; offline calls fail per request)
    # ------------------------------------------------------------------
    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="database"),
    )
    await db.connect()

    # ------------------------------------------------------------------
    # 3. Session Manager (identity provider)
    # ------------------------------------------------------------------
    session = SessionManager(
        session_lookup=db.lookup_session_user_id,
        logger=StructuredLogger(name="session"),
    )

    # ------------------------------------------------------------------
    # 4. Service Container (cache + repositories + services)
    # ------------------------------------------------------------------
    services = create_services(db=db, config=config, session=session)

    try:
        if await session.get_user_id() is None:
            logger.info("No persisted session; sign in to load data.")
            return

        await warm_caches(services, logger)
        await services["notification_service"].fetch_notifications()
        await services["notification_service"].subscribe()
        logger.info("Listening for realtime notifications (Ctrl+C to stop).")
        await asyncio.Event().wait()
    finally:
        await services["notification_service"].unsubscribe()
        await db.close()
        logger.info("Finance tracker data layer shut down.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n{detail}")
        sys.exit(1)
