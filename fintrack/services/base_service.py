"""
Base Service Classes.

``BaseService`` standardizes the logger pattern for all services.

``CachedEntityService`` is the cache-aside consumer every entity service
extends.  It owns the two paths that touch the shared cache:

* read path (:meth:`CachedEntityService._cached_read`): serve a live
  entry without touching the network, otherwise fetch, store, return.
  A failed fetch leaves the cache and the previous local list untouched.
* write path (:meth:`CachedEntityService._mutate`): run the remote
  mutation and, only if it succeeded, route the invalidation and apply
  the write path's declared :class:`RefreshPolicy`.

Cached payloads are tuples so that patching a service's local list never
alters what other readers of the same key receive.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel

from fintrack.auth import SessionManager
from fintrack.cache import CacheStore, EntityKind, InvalidationRouter, RefreshPolicy
from fintrack.logger import StructuredLogger
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.base_repository import RecordNotFoundError
from fintrack.utils.audit import log_audit_event
from fintrack.utils.general import error_message

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")
R = TypeVar("R")


class BaseService:
    """Base class for all service classes. Provides a logger."""

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger: StructuredLogger = logger

    @staticmethod
    def _status_for(exc: BaseException) -> int:
        """HTTP-style status code for a remote failure."""
        if isinstance(exc, RecordNotFoundError):
            return 404
        if isinstance(exc, RuntimeError):
            # No Supabase client (offline / not configured).
            return 503
        return 500

    @staticmethod
    def _unauthenticated() -> ServiceResult:
        return ServiceResult(
            success=False, error="User not authenticated", status_code=401,
        )


class CachedEntityService(BaseService, Generic[M]):
    """Cache-aside consumer for one entity namespace.

    Subclasses set ``ENTITY`` and declare the refresh policy of every
    write path in ``WRITE_POLICIES`` (keyed by operation name), and
    implement :meth:`_refetch` for the invalidate-and-refetch paths.

    Observable state: ``items`` (the local list), ``loading`` and
    ``error``.
    """

    ENTITY: ClassVar[EntityKind]
    WRITE_POLICIES: ClassVar[dict[str, RefreshPolicy]] = {}

    def __init__(
        self,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._cache = cache
        self._router = router
        self._session = session
        self.items: list[M] = []
        self.loading: bool = False
        self.error: Optional[str] = None

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def _cached_read(
        self,
        key: str,
        loader: Callable[[str], Awaitable[T]],
        *,
        force_refresh: bool,
        expected_type: type[T],
        failure_message: str,
    ) -> ServiceResult[T]:
        """Serve *key* from the cache, or load it with the user id.

        ``loader`` receives the resolved user id.  Its result is stored
        under *key* with the store's default TTL.
        """
        user_id = await self._session.get_user_id()
        if user_id is None:
            return self._unauthenticated()

        if not force_refresh:
            cached = self._cache.get_as(key, expected_type)
            if cached is not None:
                return ServiceResult(success=True, data=cached, from_cache=True)

        self.loading = True
        self.error = None
        try:
            value = await loader(user_id)
        except Exception as exc:
            self.error = error_message(exc, failure_message)
            self._logger.error("%s: %s", failure_message, exc, exc_info=True)
            return ServiceResult(
                success=False, error=self.error, status_code=self._status_for(exc),
            )
        finally:
            self.loading = False

        # The identity listener already cleared the store; rows loaded for
        # the previous user must not be written back under a shared key.
        if self._session.user_id != user_id:
            self._logger.info(
                "Session changed during load of %s; result discarded", key,
                extra={"event": "STALE_IDENTITY_LOAD", "user_id": user_id},
            )
            return self._unauthenticated()

        self._cache.set(key, value)
        return ServiceResult(success=True, data=value)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def _mutate(
        self,
        operation: str,
        action: Callable[[str], Awaitable[R]],
        *,
        failure_message: str,
        entity_id: str = "",
        entity: Optional[EntityKind] = None,
        patch: Optional[Callable[[R], None]] = None,
    ) -> ServiceResult[R]:
        """Run one remote mutation and refresh dependent caches.

        Nothing is invalidated unless *action* returns normally.  With
        ``INVALIDATE_ONLY`` the *patch* callback updates the local list
        from the mutation result; with ``INVALIDATE_AND_REFETCH`` the
        local list is re-read with ``force_refresh``.  A failed re-fetch
        is reported through ``error`` but does not fail the mutation.
        """
        policy = self.WRITE_POLICIES[operation]
        user_id = await self._session.get_user_id()
        if user_id is None:
            return self._unauthenticated()

        self.error = None
        try:
            result = await action(user_id)
        except Exception as exc:
            self.error = error_message(exc, failure_message)
            self._logger.error("%s: %s", failure_message, exc, exc_info=True)
            return ServiceResult(
                success=False, error=self.error, status_code=self._status_for(exc),
            )

        target = entity or self.ENTITY
        dropped = self._router.invalidate_related(target)
        log_audit_event(
            self._logger,
            action=operation,
            entity_type=str(target),
            entity_id=entity_id or self._result_id(result),
            user_id=user_id,
            details={"policy": str(policy), "invalidated": list(dropped)},
        )

        if policy is RefreshPolicy.INVALIDATE_AND_REFETCH:
            await self._refetch()
        elif patch is not None:
            patch(result)
        return ServiceResult(success=True, data=result)

    async def _refetch(self) -> None:
        """Re-read the local list after an invalidate-and-refetch write."""
        raise NotImplementedError(
            f"{type(self).__name__} declares no invalidate-and-refetch path"
        )

    @staticmethod
    def _result_id(result: object) -> str:
        identifier = getattr(result, "id", None)
        return str(identifier) if identifier is not None else ""

    # ------------------------------------------------------------------
    # Local list patches (invalidate-only write paths)
    # ------------------------------------------------------------------

    def _set_items(self, payload: tuple[M, ...]) -> None:
        self.items = list(payload)

    def _patch_prepend(self, item: M) -> None:
        self.items = [item, *self.items]

    def _patch_append(self, item: M) -> None:
        self.items = [*self.items, item]

    def _patch_replace(self, item: M) -> None:
        item_id = getattr(item, "id")
        self.items = [
            item if getattr(existing, "id") == item_id else existing
            for existing in self.items
        ]

    def _patch_remove(self, item_id: str) -> None:
        self.items = [
            existing for existing in self.items if getattr(existing, "id") != item_id
        ]
