"""
Base Repository.

Provides shared infrastructure for all repositories:
- DatabaseManager reference (async Supabase client)
- Logger reference
- Helpers to execute PostgREST queries and remote procedures
- Payload conversion for inserts, updates and procedure arguments

Repositories are the remote data source of the cache-aside services.
They never catch remote errors: a failed query raises, and the calling
service turns the exception into a failed ``ServiceResult``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, TypeVar, cast

from pydantic import BaseModel
from supabase import AsyncClient

from fintrack.database import DatabaseManager
from fintrack.logger import StructuredLogger
from fintrack.utils.general import JsonSafeType, convert_to_json_safe
from fintrack.utils.string_helpers import JsonValue

if TYPE_CHECKING:
    from postgrest import AsyncRequestBuilder

M = TypeVar("M", bound=BaseModel)

Row = dict[str, JsonValue]


class RecordNotFoundError(LookupError):
    """A single-row write matched no row (wrong id, or not the user's row)."""


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    TABLE: str = ""

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db = db
        self._logger = logger

    @property
    def supabase(self) -> AsyncClient:
        """Returns the Supabase client for cloud operations."""
        return self._db.supabase

    def _table(self, name: Optional[str] = None) -> AsyncRequestBuilder:
        return self.supabase.table(name or self.TABLE)

    async def _fetch_rows(self, query: object, *, operation_name: str) -> list[Row]:
        """Execute a select / mutation builder and return its rows."""
        response = await query.execute()  # type: ignore[attr-defined]
        rows: list[Row] = list(response.data or [])
        self._logger.debug("%s returned %d rows", operation_name, len(rows))
        return rows

    async def _fetch_one(self, query: object, *, operation_name: str) -> Row:
        """Execute a single-row write and return the affected row.

        Raises
        ------
        RecordNotFoundError
            If the statement affected no row.
        """
        rows = await self._fetch_rows(query, operation_name=operation_name)
        if not rows:
            raise RecordNotFoundError(f"{operation_name}: no matching row")
        return rows[0]

    async def _call_rpc(
        self,
        function: str,
        params: Optional[dict[str, JsonSafeType]] = None,
        *,
        operation_name: Optional[str] = None,
    ) -> JsonValue:
        """Invoke a remote procedure and return its raw ``data``."""
        response = await self.supabase.rpc(function, params or {}).execute()
        self._logger.debug("RPC %s completed", operation_name or function)
        return response.data

    @staticmethod
    def _rpc_row(data: JsonValue, *, operation_name: str) -> Row:
        """Normalise a one-row procedure result (object or 1-element list)."""
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            raise RecordNotFoundError(f"{operation_name}: procedure returned no row")
        return data

    @staticmethod
    def _payload(
        model: BaseModel,
        *,
        exclude_unset: bool = False,
        exclude_none: bool = False,
    ) -> dict[str, JsonSafeType]:
        """Dump *model* to a JSON-safe dict (decimals as floats, ISO dates)."""
        dumped = model.model_dump(exclude_unset=exclude_unset, exclude_none=exclude_none)
        return cast(dict[str, JsonSafeType], convert_to_json_safe(dumped))

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _to_models(model_type: type[M], rows: list[Row]) -> list[M]:
        return [model_type.model_validate(row) for row in rows]
