"""Conversion helpers shared by cache keys, repository payloads and logging."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Union

from pydantic import BaseModel

__all__ = ["JsonSafeType", "JsonInputType", "convert_to_json_safe", "error_message"]

JsonSafeType = Union[None, str, int, bool, float, Dict[str, "JsonSafeType"], List["JsonSafeType"]]

# Anything convert_to_json_safe accepts.  Unknown objects fall back to str().
JsonInputType = Any


def convert_to_json_safe(data: JsonInputType) -> JsonSafeType:
    """Turn *data* into plain JSON values.

    Dates (and datetimes) become ISO strings, ``Decimal`` becomes ``float``,
    non-finite floats become ``None``, tuples become lists and pydantic
    models are dumped first.  The same conversion feeds RPC parameters,
    canonical cache keys and the ``extra`` block of log records, so a
    ``date(2024, 5, 1)`` filter always serializes as ``"2024-05-01"``.
    """
    if data is None or isinstance(data, (str, bool, int)):
        return data
    if isinstance(data, float):
        return data if math.isfinite(data) else None
    if isinstance(data, Decimal):
        return float(data)
    if isinstance(data, date):
        return data.isoformat()
    if isinstance(data, BaseModel):
        return convert_to_json_safe(data.model_dump())
    if isinstance(data, Mapping):
        return {str(key): convert_to_json_safe(value) for key, value in data.items()}
    if isinstance(data, (set, frozenset)):
        return [convert_to_json_safe(item) for item in sorted(data, key=str)]
    if isinstance(data, (list, tuple)):
        return [convert_to_json_safe(item) for item in data]
    return str(data)


def error_message(exc: BaseException, fallback: str) -> str:
    """Best user-facing text for *exc*.

    PostgREST ``APIError`` and gotrue errors expose ``.message``; anything
    else uses ``str(exc)``, and *fallback* covers exceptions with no text.
    """
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or fallback
