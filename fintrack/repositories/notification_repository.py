"""
Notification Repository.

Reads and writes notifications and owns the realtime channel that pushes
inserts and deletes for the signed-in user.  Nothing here is cached.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Optional

from fintrack.models.notification import Notification
from fintrack.repositories.base_repository import BaseRepository, Row
from fintrack.utils.string_helpers import JsonValue, sanitize_postgrest_value

if TYPE_CHECKING:
    from realtime import AsyncRealtimeChannel

RealtimeHandler = Callable[[Row], None]

CHANNEL_NAME = "notifications"


def extract_record(payload: dict[str, JsonValue], key: str) -> Optional[Row]:
    """Pull the changed row out of a realtime payload.

    Depending on the client version the row sits under
    ``payload["data"][key]``, ``payload[key]`` or, for the legacy
    format, ``payload["new"]`` / ``payload["old"]``.
    """
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get(key), dict):
        return data[key]  # type: ignore[return-value]
    direct = payload.get(key)
    if isinstance(direct, dict):
        return direct
    legacy = payload.get("new" if key == "record" else "old")
    if isinstance(legacy, dict) and legacy:
        return legacy
    return None


class NotificationRepository(BaseRepository):
    """Data access layer for Notification entities."""

    TABLE = "notifications"

    _channel: Optional[AsyncRealtimeChannel] = None

    async def list_for_user(self, user_id: str, limit: int) -> list[Notification]:
        rows = await self._fetch_rows(
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit),
            operation_name="list (notifications)",
        )
        return self._to_models(Notification, rows)

    async def unread_count(self) -> int:
        data = await self._call_rpc("get_unread_notifications_count")
        if isinstance(data, list):
            data = data[0] if data else 0
        return int(data) if isinstance(data, (int, float, str)) and data != "" else 0

    async def mark_read(self, notification_id: str) -> None:
        await self._call_rpc(
            "mark_notification_read", {"p_notification_id": notification_id},
        )

    async def mark_all_read(self) -> None:
        await self._call_rpc("mark_all_notifications_read")

    async def delete(self, notification_id: str, user_id: str) -> None:
        await self._fetch_one(
            self._table().delete().eq("id", notification_id).eq("user_id", user_id),
            operation_name="delete (notifications)",
        )

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    @property
    def is_subscribed(self) -> bool:
        return self._channel is not None

    async def subscribe(
        self,
        user_id: str,
        on_insert: RealtimeHandler,
        on_delete: RealtimeHandler,
    ) -> None:
        """Open the per-user realtime channel.  A second call is a no-op."""
        if self._channel is not None:
            return

        row_filter = f"user_id=eq.{sanitize_postgrest_value(user_id)}"

        def _dispatch(key: str, handler: RealtimeHandler) -> Callable[[dict[str, JsonValue]], None]:
            def _callback(payload: dict[str, JsonValue]) -> None:
                record = extract_record(payload, key)
                if record is None:
                    self._logger.warning("Realtime %s payload without a row", key)
                    return
                handler(record)
            return _callback

        channel = self.supabase.channel(CHANNEL_NAME)
        channel.on_postgres_changes(
            "INSERT",
            callback=_dispatch("record", on_insert),
            table=self.TABLE,
            schema="public",
            filter=row_filter,
        )
        channel.on_postgres_changes(
            "DELETE",
            callback=_dispatch("old_record", on_delete),
            table=self.TABLE,
            schema="public",
            filter=row_filter,
        )
        await channel.subscribe()
        self._channel = channel
        self._logger.info("Subscribed to realtime notifications")

    async def unsubscribe(self) -> None:
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        await self.supabase.remove_channel(channel)
        self._logger.info("Unsubscribed from realtime notifications")
