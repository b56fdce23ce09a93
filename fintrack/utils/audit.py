"""
Audit trail for data changes.

Each successful write is recorded as one ``AUDIT:`` log line whose
``extra.audit`` block holds the validated :class:`AuditEvent`.  The trail
lives only in the log; nothing is persisted.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Union

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from fintrack.logger import StructuredLogger

__all__ = ["AuditEvent", "log_audit_event"]

DetailValue = Union[str, int, float, bool, None, list[str]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """One write against the remote store, as seen by the client."""

    timestamp: datetime = Field(default_factory=_utc_now)
    action: str
    entity_type: str
    entity_id: str = ""
    user_id: str
    details: dict[str, DetailValue] = Field(default_factory=dict)


def log_audit_event(
    logger: StructuredLogger,
    action: str,
    entity_type: str,
    entity_id: str,
    user_id: str,
    details: Optional[dict[str, DetailValue]] = None,
) -> AuditEvent:
    """Validate, log and return an audit event.

    *action* is the service operation (``"create_transaction"``),
    *entity_type* the cache namespace it wrote to (``"budget-items"``) and
    *details* carries things like the refresh policy and the cache keys
    the write dropped.
    """
    event = AuditEvent(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user_id,
        details=details or {},
    )
    logger.info(
        "AUDIT: %s %s %s", event.action, event.entity_type, event.entity_id or "-",
        extra={"audit": event.model_dump(mode="json")},
    )
    return event
