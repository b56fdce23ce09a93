"""
Cache Key Construction & TTL Policy.

Every cached read is identified by a string key that starts with the
namespace of the entity it belongs to.  Invalidation works on those
namespaces as plain string prefixes, so a consumer must always build its
keys through :func:`build_cache_key` and never by hand.

Key shapes::

    budgets                                   bare entity read
    dashboard-summary                         scoped read
    transactions-{"limit":20}                 parameterized read
    dashboard-monthly-spending-{"month":3,"year":2026}
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Optional, Union

from pydantic import BaseModel

from fintrack.utils.general import JsonInputType, convert_to_json_safe

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "EntityKind",
    "build_cache_key",
    "canonical_options",
]

DEFAULT_TTL_SECONDS: float = 5 * 60.0

# Read-path flags that change *how* a read is served, not *what* it
# returns.  They must never leak into a key.
_NON_KEY_OPTIONS: frozenset[str] = frozenset({"force_refresh"})


class EntityKind(StrEnum):
    """Closed set of cache namespaces.

    Values are the literal key prefixes.  StrEnum members compare equal to
    their string values, so ``EntityKind.BUDGETS == "budgets"``.
    """

    TRANSACTIONS = "transactions"
    FUND_SOURCES = "fund-sources"
    CATEGORIES = "categories"
    BUDGETS = "budgets"
    BUDGET_ITEMS = "budget-items"
    FINANCIAL_GOALS = "financial-goals"
    RECURRING_PATTERNS = "recurring-patterns"
    NOTIFICATIONS = "notifications"
    DASHBOARD = "dashboard"


KeyOptions = Union[BaseModel, Mapping[str, JsonInputType]]


def canonical_options(options: KeyOptions) -> str:
    """Serialize read options into a stable, compact JSON string.

    Keys are sorted, ``None`` values and read-path flags are dropped, and
    dates/decimals are converted to JSON-safe scalars, so two option sets
    that select the same rows always produce the same string.
    """
    if isinstance(options, BaseModel):
        raw: Mapping[str, JsonInputType] = options.model_dump(mode="json")
    else:
        raw = options

    cleaned: dict[str, JsonInputType] = {
        str(name): value
        for name, value in raw.items()
        if value is not None and name not in _NON_KEY_OPTIONS
    }
    return json.dumps(
        convert_to_json_safe(cleaned),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def build_cache_key(
    entity: Union[EntityKind, str],
    options: Optional[KeyOptions] = None,
    *,
    scope: Optional[str] = None,
) -> str:
    """Build the cache key for one read result.

    Parameters
    ----------
    entity:
        Namespace the read belongs to.  Always the first segment so that
        prefix invalidation on the entity reaches the key.
    options:
        Filter / pagination options of a parameterized read.  An empty
        mapping still appends ``-{}`` so that the unfiltered variant of a
        parameterized read has its own stable key.
    scope:
        Optional sub-namespace for secondary reads of the same entity
        (``"summary"``, ``"progress"``).
    """
    key = str(entity)
    if scope:
        key = f"{key}-{scope}"
    if options is not None:
        key = f"{key}-{canonical_options(options)}"
    return key
