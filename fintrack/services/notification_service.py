"""
Notification Service.

Notifications bypass the cache entirely: the list is read live and then
kept current by realtime insert / delete events.  One instance per
process holds the shared list and the unread counter.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from fintrack.auth import SessionManager
from fintrack.config import AppConfig
from fintrack.logger import StructuredLogger
from fintrack.models.notification import Notification
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.base_repository import Row
from fintrack.repositories.notification_repository import NotificationRepository
from fintrack.services.base_service import BaseService
from fintrack.utils.audit import log_audit_event
from fintrack.utils.general import error_message


class NotificationService(BaseService):
    """Uncached notification list with realtime merge."""

    def __init__(
        self,
        repo: NotificationRepository,
        session: SessionManager,
        config: AppConfig,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._repo = repo
        self._session = session
        self._config = config
        self.notifications: list[Notification] = []
        self.unread_count: int = 0
        self.loading: bool = False
        self.error: Optional[str] = None

    def _fail(self, exc: Exception, fallback: str) -> ServiceResult:
        self.error = error_message(exc, fallback)
        self._logger.error("%s: %s", fallback, exc, exc_info=True)
        return ServiceResult(
            success=False, error=self.error, status_code=self._status_for(exc),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_notifications(
        self, limit: Optional[int] = None,
    ) -> ServiceResult[list[Notification]]:
        user_id = await self._session.get_user_id()
        if user_id is None:
            return self._unauthenticated()

        self.loading = True
        self.error = None
        try:
            rows = await self._repo.list_for_user(
                user_id, limit or self._config.NOTIFICATIONS_FETCH_LIMIT,
            )
        except Exception as exc:
            return self._fail(exc, "Failed to fetch notifications")
        finally:
            self.loading = False

        self.notifications = rows
        self.unread_count = sum(1 for n in rows if not n.is_read)
        return ServiceResult(success=True, data=list(rows))

    async def fetch_unread_count(self) -> ServiceResult[int]:
        try:
            count = await self._repo.unread_count()
        except Exception as exc:
            return self._fail(exc, "Failed to fetch unread count")
        self.unread_count = max(0, count)
        return ServiceResult(success=True, data=self.unread_count)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def mark_as_read(self, notification_id: str) -> ServiceResult[None]:
        try:
            await self._repo.mark_read(notification_id)
        except Exception as exc:
            return self._fail(exc, "Failed to mark notification as read")

        updated: list[Notification] = []
        for notification in self.notifications:
            if notification.id == notification_id and not notification.is_read:
                notification = notification.model_copy(update={"is_read": True})
                self.unread_count = max(0, self.unread_count - 1)
            updated.append(notification)
        self.notifications = updated
        return ServiceResult(success=True)

    async def mark_all_as_read(self) -> ServiceResult[None]:
        try:
            await self._repo.mark_all_read()
        except Exception as exc:
            return self._fail(exc, "Failed to mark all notifications as read")

        self.notifications = [
            n if n.is_read else n.model_copy(update={"is_read": True})
            for n in self.notifications
        ]
        self.unread_count = 0
        return ServiceResult(success=True)

    async def delete_notification(self, notification_id: str) -> ServiceResult[None]:
        user_id = await self._session.get_user_id()
        if user_id is None:
            return self._unauthenticated()
        try:
            await self._repo.delete(notification_id, user_id)
        except Exception as exc:
            return self._fail(exc, "Failed to delete notification")

        self._remove(notification_id)
        log_audit_event(
            self._logger,
            action="delete_notification",
            entity_type="notifications",
            entity_id=notification_id,
            user_id=user_id,
        )
        return ServiceResult(success=True)

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    async def subscribe(self) -> ServiceResult[None]:
        """Start merging realtime events.  Subscribing twice is a no-op."""
        if self._repo.is_subscribed:
            return ServiceResult(success=True)
        user_id = await self._session.get_user_id()
        if user_id is None:
            return self._unauthenticated()
        try:
            await self._repo.subscribe(user_id, self.apply_insert, self.apply_delete)
        except Exception as exc:
            return self._fail(exc, "Failed to subscribe to notifications")
        return ServiceResult(success=True)

    async def unsubscribe(self) -> ServiceResult[None]:
        try:
            await self._repo.unsubscribe()
        except Exception as exc:
            return self._fail(exc, "Failed to unsubscribe from notifications")
        return ServiceResult(success=True)

    def apply_insert(self, record: Row) -> None:
        """Merge a pushed row at the head of the list.

        Rows already present (by id) are ignored so a replayed event does
        not double-count.
        """
        try:
            notification = Notification.model_validate(record)
        except ValidationError as exc:
            self._logger.warning("Discarding malformed notification event: %s", exc)
            return
        if any(n.id == notification.id for n in self.notifications):
            return
        self.notifications = [notification, *self.notifications]
        if not notification.is_read:
            self.unread_count += 1

    def apply_delete(self, record: Row) -> None:
        notification_id = record.get("id")
        if not isinstance(notification_id, str):
            self._logger.warning("Delete event without an id: %s", record)
            return
        self._remove(notification_id)

    def _remove(self, notification_id: str) -> None:
        removed = [n for n in self.notifications if n.id == notification_id]
        if not removed:
            return
        self.notifications = [n for n in self.notifications if n.id != notification_id]
        if not removed[0].is_read:
            self.unread_count = max(0, self.unread_count - 1)
