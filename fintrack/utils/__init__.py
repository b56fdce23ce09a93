"""Shared utility functions and models for the finance tracker.

This package provides convenience re-exports so that consumers can import
directly from ``fintrack.utils`` (e.g. ``from fintrack.utils import
error_message``) while full absolute imports remain supported.
"""

from fintrack.utils.audit import AuditEvent, log_audit_event
from fintrack.utils.general import convert_to_json_safe, error_message
from fintrack.utils.string_helpers import JsonValue, sanitize_postgrest_value

__all__ = [
    "AuditEvent",
    "JsonValue",
    "convert_to_json_safe",
    "error_message",
    "log_audit_event",
    "sanitize_postgrest_value",
]
