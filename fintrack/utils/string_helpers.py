"""
String Helpers.

JSON value typing for raw PostgREST rows, and sanitisation of values that
are interpolated into PostgREST filter expressions (``or_`` clauses).
"""

from __future__ import annotations

import re
from typing import Union

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "JsonValue",
    "sanitize_postgrest_value",
]

# ---------------------------------------------------------------------------
# Recursive JSON value type (PEP 484, no ``Any``)
# ---------------------------------------------------------------------------

JsonValue = Union[
    str,
    int,
    float,
    bool,
    None,
    dict[str, "JsonValue"],
    list["JsonValue"],
]

# ---------------------------------------------------------------------------
# PostgREST filter sanitisation
# ---------------------------------------------------------------------------

# PostgREST operators (``.``, ``,``, ``(``, ``)``), wildcards and escape
# characters would let a value rewrite the surrounding filter.  The
# allowlist keeps alphanumerics, whitespace and hyphens, which covers
# UUIDs and accented Latin names.
_POSTGREST_UNSAFE_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9\s\-À-ɏ]")


def sanitize_postgrest_value(value: str) -> str:
    """Strip characters unsafe for PostgREST filter interpolation.

    Parameters
    ----------
    value:
        The raw value, typically a record id.

    Returns
    -------
    str
        A sanitized string safe for interpolation into a PostgREST
        ``or`` filter such as ``source_fund_id.eq.<value>``.
    """
    return _POSTGREST_UNSAFE_RE.sub("", value)
