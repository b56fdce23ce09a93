"""
Transaction Service.

Cache-aside access to the user's transactions.  Every transaction write
changes fund-source balances on the remote side, which is why creates and
updates re-fetch instead of patching the local list.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fintrack.auth import SessionManager
from fintrack.cache import (
    CacheStore,
    EntityKind,
    InvalidationRouter,
    RefreshPolicy,
    build_cache_key,
)
from fintrack.config import AppConfig
from fintrack.logger import StructuredLogger
from fintrack.models.service_models import ServiceResult
from fintrack.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionQuery,
    TransactionUpdate,
)
from fintrack.repositories.base_repository import RecordNotFoundError
from fintrack.repositories.transaction_repository import TransactionRepository
from fintrack.services.base_service import CachedEntityService


class TransactionService(CachedEntityService[Transaction]):
    """Reads and writes transactions through the shared cache."""

    ENTITY = EntityKind.TRANSACTIONS
    WRITE_POLICIES = {
        "create_transaction": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "update_transaction": RefreshPolicy.INVALIDATE_AND_REFETCH,
        "delete_transaction": RefreshPolicy.INVALIDATE_ONLY,
    }

    def __init__(
        self,
        repo: TransactionRepository,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        config: AppConfig,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(cache, router, session, logger)
        self._repo = repo
        self._config = config

    @property
    def transactions(self) -> list[Transaction]:
        return self.items

    async def fetch_transactions(
        self,
        query: Optional[TransactionQuery] = None,
        force_refresh: bool = False,
    ) -> ServiceResult[tuple[Transaction, ...]]:
        """Return transactions matching *query*.

        Each distinct filter / pagination combination is cached under its
        own key, e.g. ``transactions-{"limit":20}``.
        """
        query = query or TransactionQuery()

        async def _load(user_id: str) -> tuple[Transaction, ...]:
            return tuple(await self._repo.list_for_user(user_id, query))

        result = await self._cached_read(
            build_cache_key(self.ENTITY, query),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch transactions",
        )
        if result.success and result.data is not None:
            self._set_items(result.data)
        return result

    async def _refetch(self) -> None:
        await self.fetch_transactions(
            TransactionQuery(limit=self._config.TRANSACTIONS_REFETCH_LIMIT),
            force_refresh=True,
        )

    async def create_transaction(self, data: TransactionCreate) -> ServiceResult[Transaction]:
        return await self._mutate(
            "create_transaction",
            lambda _user_id: self._repo.create_with_balance_update(data),
            failure_message="Failed to create transaction",
        )

    async def update_transaction(
        self, transaction_id: str, updates: TransactionUpdate,
    ) -> ServiceResult[Transaction]:
        """Rewrite a transaction.  The date defaults to today when omitted."""
        transaction_date = updates.transaction_date or date.today()
        return await self._mutate(
            "update_transaction",
            lambda _user_id: self._repo.update_with_balance_adjustment(
                transaction_id, updates, transaction_date,
            ),
            failure_message="Failed to update transaction",
            entity_id=transaction_id,
        )

    async def delete_transaction(self, transaction_id: str) -> ServiceResult[None]:
        async def _delete(_user_id: str) -> None:
            if not await self._repo.delete_with_balance_adjustment(transaction_id):
                raise RecordNotFoundError(f"Transaction {transaction_id} not found")

        return await self._mutate(
            "delete_transaction",
            _delete,
            failure_message="Failed to delete transaction",
            entity_id=transaction_id,
            patch=lambda _: self._patch_remove(transaction_id),
        )
