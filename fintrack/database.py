"""
Remote Store Connection.

Owns the asynchronous Supabase client used for every remote read, write,
remote-procedure call, auth call and realtime subscription.

Data access is performed through the Repository pattern.  This module only
manages the client *connection*; it contains no query logic.

There is no local persistence: every cached read lives in
:class:`fintrack.cache.CacheStore` and is rebuilt from Supabase after a
restart.

Usage (dependency injection at app startup)::

    from fintrack.database import DatabaseManager
    from fintrack.logger import StructuredLogger

    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="fintrack.database"),
    )
    await db.connect()
    # Inject `db` into repositories that need it.
"""

from __future__ import annotations

from typing import Optional

from supabase import AsyncClient, acreate_client

from fintrack.logger import StructuredLogger


class DatabaseManager:
    """Manages the connection to the cloud Supabase instance.

    When ``supabase_url`` or ``supabase_key`` is empty the client is
    **not** created.  The ``supabase`` property then raises
    ``RuntimeError``, which every service catches and surfaces as a
    failed ``ServiceResult`` like any other remote failure.

    Parameters
    ----------
    supabase_url:
        The Supabase project URL (e.g. ``https://xyz.supabase.co``).
    supabase_key:
        The Supabase anonymous key.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        logger: StructuredLogger,
    ) -> None:
        self._url: str = supabase_url
        self._key: str = supabase_key
        self._logger: StructuredLogger = logger
        self._supabase: Optional[AsyncClient] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Create the async Supabase client.  Safe to call twice."""
        if self._supabase is not None:
            return
        if not (self._url and self._key):
            self._logger.warning(
                "Supabase credentials not configured; remote calls will fail."
            )
            return
        try:
            self._supabase = await acreate_client(self._url, self._key)
            self._logger.info("Supabase client initialized.")
        except (ValueError, TypeError) as exc:
            self._logger.warning(
                "Supabase credential format error: %s. Remote calls will fail.",
                exc,
            )
        except Exception as exc:
            self._logger.error(
                "Unexpected Supabase initialization failure: %s.",
                exc,
                exc_info=True,
            )

    async def close(self) -> None:
        """Drop realtime channels.  Subsequent calls are no-ops."""
        if self._supabase is None:
            return
        try:
            await self._supabase.remove_all_channels()
        except Exception as exc:
            self._logger.warning("Failed to close realtime channels: %s", exc)
        self._supabase = None
        self._logger.info("Supabase client released.")

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def supabase(self) -> AsyncClient:
        """Return the initialised Supabase client.

        Raises
        ------
        RuntimeError
            If the client was not initialised.
        """
        if self._supabase is None:
            raise RuntimeError(
                "Supabase client is not initialised. "
                "Configure SUPABASE_URL / SUPABASE_ANON_KEY and call connect()."
            )
        return self._supabase

    @property
    def is_online(self) -> bool:
        """``True`` when the Supabase client is available."""
        return self._supabase is not None

    # ------------------------------------------------------------------
    # Session lookup
    # ------------------------------------------------------------------

    async def lookup_session_user_id(self) -> Optional[str]:
        """Resolve the signed-in user id from the persisted auth session.

        Used as the asynchronous fallback of the session provider.
        Returns ``None`` when offline or when no session exists.
        """
        if self._supabase is None:
            return None
        session = await self._supabase.auth.get_session()
        if session is None or session.user is None:
            return None
        return session.user.id
