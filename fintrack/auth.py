"""
Authentication & Session State.

Provides an injectable ``SessionManager`` that holds the authenticated
user for the lifetime of the process and acts as the identity provider of
the data-access layer.

The user id is available synchronously once resolved.  Before that,
``get_user_id()`` falls back to an injected asynchronous session lookup
(normally :meth:`DatabaseManager.lookup_session_user_id`).

Usage::

    from fintrack.auth import SessionManager
    from fintrack.logger import StructuredLogger
from fintrack.models.user import SessionUser

    session = SessionManager(session_lookup=db.lookup_session_user_id)
    session.set_current_user(SessionUser(id="abc-123", email="me@example.com"))
    user_id = await session.get_user_id()
"""

from __future__ import annotations

import threading
from collections.abc import Awaitable, Callable
from typing import Optional

from fintrack.models.user import SessionUser

SessionLookup = Callable[[], Awaitable[Optional[str]]]
IdentityListener = Callable[[Optional[str], Optional[str]], None]


class SessionManager:
    """Injectable holder for the current authenticated user.

    Each instance maintains its own session state, eliminating the
    need for module-level globals.  Pass a single ``SessionManager``
    through your dependency-injection layer so every component shares
    the same session.

    Identity listeners are called with ``(previous_id, new_id)`` whenever
    the resolved user id changes, including sign-out (``new_id`` is
    ``None``).  The composition root registers the cache reset here.
    """

    def __init__(
        self,
        session_lookup: Optional[SessionLookup] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._current_user: Optional[SessionUser] = None
        self._session_lookup: Optional[SessionLookup] = session_lookup
        self._listeners: list[IdentityListener] = []
        self._logger: Optional[StructuredLogger] = logger

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def set_current_user(self, user: SessionUser) -> None:
        """Record *user* as the authenticated session user."""
        with self._lock:
            previous = self._current_user.id if self._current_user else None
            self._current_user = user
        self._notify(previous, user.id)

    def get_current_user(self) -> SessionUser:
        """Return the authenticated user.

        Raises:
            RuntimeError: If no user is currently authenticated.
        """
        with self._lock:
            if self._current_user is None:
                raise RuntimeError(
                    "No user is currently authenticated. Login required."
                )
            return self._current_user

    @property
    def user_id(self) -> Optional[str]:
        """The resolved user id, or ``None`` when not yet resolved."""
        with self._lock:
            return self._current_user.id if self._current_user else None

    async def get_user_id(self) -> Optional[str]:
        """Return the current user id, resolving it lazily if needed.

        Returns the synchronously known id when available.  Otherwise
        awaits the session lookup and, on success, records the result so
        later calls stay synchronous.  Returns ``None`` when nobody is
        signed in or the lookup fails (expired refresh token, network
        error); the failure is logged and callers report 401.
        """
        resolved = self.user_id
        if resolved is not None or self._session_lookup is None:
            return resolved

        try:
            looked_up = await self._session_lookup()
        except Exception as exc:
            if self._logger is not None:
                self._logger.warning(
                    "Session lookup failed: %s", exc,
                    extra={"event": "SESSION_LOOKUP_FAILED"},
                )
            return None
        if looked_up is None:
            return None
        if self.user_id is None:
            self.set_current_user(SessionUser(id=looked_up))
        return self.user_id

    def clear(self) -> None:
        """Remove the current user, ending the session."""
        with self._lock:
            previous = self._current_user.id if self._current_user else None
            self._current_user = None
        self._notify(previous, None)

    @property
    def is_authenticated(self) -> bool:
        """``True`` when a user is currently logged in."""
        with self._lock:
            return self._current_user is not None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_identity_listener(self, listener: IdentityListener) -> None:
        """Register *listener* for user-id changes."""
        with self._lock:
            self._listeners.append(listener)

    def _notify(self, previous: Optional[str], current: Optional[str]) -> None:
        if previous == current:
            return
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(previous, current)
