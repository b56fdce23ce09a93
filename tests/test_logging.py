import io
import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from fintrack.logger import StructuredLogger
from fintrack.utils import convert_to_json_safe, error_message, log_audit_event


def _logger(tmp_path, name: str) -> tuple[StructuredLogger, io.StringIO]:
    stream = io.StringIO()
    log = StructuredLogger(
        name=name, level=logging.DEBUG, stream=stream, log_file=str(tmp_path / "t.log"),
    )
    return log, stream


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


@pytest.mark.unit
def test_records_are_json_with_structured_extra(tmp_path):
    log, stream = _logger(tmp_path, "fintrack.tests.json")

    log.info("Cache hit: %s", "budgets", extra={"keys": ("budgets", "dashboard")})

    (entry,) = _lines(stream)
    assert entry["message"] == "Cache hit: budgets"
    assert entry["level"] == "INFO"
    assert entry["logger_name"] == "fintrack.tests.json"
    assert entry["extra"] == {"keys": ["budgets", "dashboard"]}


@pytest.mark.unit
def test_child_logger_shares_targets(tmp_path):
    log, stream = _logger(tmp_path, "fintrack.tests.parent")

    log.child("cache").debug("evicted")

    (entry,) = _lines(stream)
    assert entry["logger_name"] == "fintrack.tests.parent.cache"


@pytest.mark.unit
def test_audit_event_is_logged_and_returned(tmp_path):
    log, stream = _logger(tmp_path, "fintrack.tests.audit")

    event = log_audit_event(
        log,
        action="delete_budget",
        entity_type="budgets",
        entity_id="b-1",
        user_id="u-1",
        details={"policy": "invalidate_only", "invalidated": ["budgets", "dashboard"]},
    )

    (entry,) = _lines(stream)
    assert entry["message"] == "AUDIT: delete_budget budgets b-1"
    assert entry["extra"]["audit"]["user_id"] == "u-1"
    assert entry["extra"]["audit"]["details"]["invalidated"] == ["budgets", "dashboard"]
    assert event.timestamp.tzinfo is not None


@pytest.mark.unit
def test_convert_to_json_safe():
    assert convert_to_json_safe(
        {"on": date(2024, 5, 1), "amount": Decimal("12.50"), "bad": float("nan"), "ids": ("a",)}
    ) == {"on": "2024-05-01", "amount": 12.5, "bad": None, "ids": ["a"]}


@pytest.mark.unit
def test_error_message_prefers_message_attribute():
    class ApiError(Exception):
        message = "duplicate key"

    assert error_message(ApiError("raw"), "fallback") == "duplicate key"
    assert error_message(ValueError(), "fallback") == "fallback"
