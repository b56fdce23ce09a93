"""
Shared pytest fixtures for the finance tracker data layer.

Nothing here talks to Supabase: repositories are exercised against a
chainable fake query, services against ``AsyncMock`` repositories.
"""

from __future__ import annotations

import io
import logging
from types import SimpleNamespace

import pytest

from fintrack.auth import SessionManager
from fintrack.cache import CacheStore, InvalidationRouter
from fintrack.config import AppConfig
from fintrack.logger import StructuredLogger
from fintrack.models.user import SessionUser
from tests.fakes import USER_ID, FakeClock, FakeSupabase


@pytest.fixture(scope="session")
def logger(tmp_path_factory: pytest.TempPathFactory) -> StructuredLogger:
    log_file = tmp_path_factory.mktemp("logs") / "fintrack-test.log"
    return StructuredLogger(
        name="fintrack.tests",
        level=logging.DEBUG,
        stream=io.StringIO(),
        log_file=str(log_file),
    )


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(SUPABASE_URL="", TRANSACTIONS_REFETCH_LIMIT=20)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(logger: StructuredLogger, clock: FakeClock) -> CacheStore:
    return CacheStore(logger=logger, default_ttl=300.0, clock=clock)


@pytest.fixture
def router(cache: CacheStore, logger: StructuredLogger) -> InvalidationRouter:
    return InvalidationRouter(store=cache, logger=logger)


@pytest.fixture
def session() -> SessionManager:
    manager = SessionManager()
    manager.set_current_user(SessionUser(id=USER_ID, email="me@example.com"))
    return manager


@pytest.fixture
def anonymous_session() -> SessionManager:
    return SessionManager()


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def fake_db(fake_supabase: FakeSupabase) -> SimpleNamespace:
    return SimpleNamespace(supabase=fake_supabase)
