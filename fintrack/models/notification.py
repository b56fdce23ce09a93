"""
Notification Model.

Server-generated alerts.  Rows arrive through a normal read and through
realtime insert/delete events; they are never cached.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.enums import NotificationColor, NotificationType


class Notification(BaseModel):
    id: str
    user_id: Optional[str] = None
    type: NotificationType
    title: str
    message: str
    icon: Optional[str] = None
    color: NotificationColor = NotificationColor.PRIMARY
    link: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
    metadata: dict[str, object] = Field(default_factory=dict)

    model_config = {"from_attributes": True}
