"""
Relationship-Aware Cache Invalidation.

Translates "entity E was just mutated" into the set of cache-key prefixes
that must be dropped, so no consumer needs to know which other entities
derive data from its own.

Routing rules for ``invalidate_related(E)``:

1. drop every key under ``E`` (all parameterized variants included);
2. drop every key under ``dashboard``; dashboard aggregates derive from
   nearly every entity and are never tracked selectively;
3. drop every key under each entity that ``RELATIONSHIPS[E]`` lists.

Propagation is a single hop.  ``transactions`` lists ``budgets`` and
``budgets`` lists ``budget-items``, yet a transaction write leaves
``budget-items`` cached.  Write paths that need fresher derived state
force a re-fetch (``RefreshPolicy.INVALIDATE_AND_REFETCH``) or the table
below must list the extra entity directly.  The graph contains cycles
(``budgets`` <-> ``budget-items``); one hop per call means they never
loop.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Union

from fintrack.cache.keys import EntityKind
from fintrack.cache.store import CacheStore
from fintrack.logger import StructuredLogger

__all__ = ["RELATIONSHIPS", "InvalidationRouter", "RefreshPolicy"]


RELATIONSHIPS: Mapping[EntityKind, tuple[EntityKind, ...]] = MappingProxyType({
    EntityKind.TRANSACTIONS: (
        EntityKind.FUND_SOURCES,
        EntityKind.BUDGETS,
        EntityKind.CATEGORIES,
    ),
    EntityKind.FUND_SOURCES: (EntityKind.TRANSACTIONS, EntityKind.DASHBOARD),
    EntityKind.CATEGORIES: (EntityKind.TRANSACTIONS, EntityKind.BUDGETS),
    EntityKind.BUDGETS: (EntityKind.BUDGET_ITEMS,),
    EntityKind.BUDGET_ITEMS: (EntityKind.BUDGETS,),
    EntityKind.FINANCIAL_GOALS: (),
    EntityKind.RECURRING_PATTERNS: (),
    EntityKind.NOTIFICATIONS: (),
    EntityKind.DASHBOARD: (),
})

_KNOWN_ENTITIES: frozenset[str] = frozenset(kind.value for kind in EntityKind)


class RefreshPolicy(StrEnum):
    """What a write path does after the remote mutation succeeded.

    ``INVALIDATE_ONLY``
        Drop related caches and patch the local list in place.  Used
        when the mutation result is the whole new state of one row.
    ``INVALIDATE_AND_REFETCH``
        Drop related caches and force a re-fetch.  Used when the remote
        side computes derived fields the caller cannot know (balance
        adjustments, nested budget items).
    """

    INVALIDATE_ONLY = "invalidate-only"
    INVALIDATE_AND_REFETCH = "invalidate-and-refetch"


class InvalidationRouter:
    """Applies the relationship graph to a :class:`CacheStore`.

    Has no failure mode of its own: it touches only local memory, never
    the network, and never raises.
    """

    def __init__(
        self,
        store: CacheStore,
        logger: StructuredLogger,
        relationships: Mapping[EntityKind, tuple[EntityKind, ...]] = RELATIONSHIPS,
    ) -> None:
        self._store: CacheStore = store
        self._logger: StructuredLogger = logger
        self._relationships = relationships

    def related_to(self, entity: Union[EntityKind, str]) -> tuple[EntityKind, ...]:
        """Directly related entities of *entity*; empty for unlisted names."""
        try:
            kind = EntityKind(entity)
        except ValueError:
            return ()
        return self._relationships.get(kind, ())

    def invalidate_related(self, entity: Union[EntityKind, str]) -> tuple[str, ...]:
        """Drop the caches of *entity*, the dashboard and direct relations.

        Names outside :class:`EntityKind` are accepted and routed as an
        entity with no relations (own prefix and dashboard only).

        Returns
        -------
        tuple[str, ...]
            The prefixes dropped, in routing order, without duplicates.
        """
        name = str(entity)
        if name not in _KNOWN_ENTITIES:
            self._logger.debug(
                "Unlisted entity '%s' routed with no related entities.", name,
            )

        prefixes: list[str] = [name, str(EntityKind.DASHBOARD)]
        prefixes.extend(str(related) for related in self.related_to(name))

        dropped: list[str] = []
        for prefix in prefixes:
            if prefix in dropped:
                continue
            self._store.invalidate_prefix(prefix)
            dropped.append(prefix)

        self._logger.debug(
            "Invalidated caches related to '%s': %s", name, ", ".join(dropped),
        )
        return tuple(dropped)
