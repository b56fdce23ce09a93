"""
Transaction Repository.

Reads transactions with their joined category and fund sources, and
writes them exclusively through remote procedures that adjust the
affected fund-source balances in the same database transaction.
"""

from __future__ import annotations

from datetime import date

from fintrack.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionQuery,
    TransactionUpdate,
)
from fintrack.repositories.base_repository import BaseRepository
from fintrack.utils.general import JsonSafeType, convert_to_json_safe
from fintrack.utils.string_helpers import sanitize_postgrest_value

_DEFAULT_PAGE_SIZE: int = 10


class TransactionRepository(BaseRepository):
    """Data access layer for Transaction entities."""

    TABLE = "transactions"

    SELECT = (
        "*, "
        "category:categories(*), "
        "source_fund:fund_sources!transactions_source_fund_fkey(*), "
        "destination_fund:fund_sources!transactions_destination_fund_fkey(*)"
    )

    async def list_for_user(self, user_id: str, query: TransactionQuery) -> list[Transaction]:
        """Fetch the user's transactions matching *query*, newest first.

        ``offset`` selects the window ``offset .. offset + (limit or 10) - 1``.
        ``fund_source_id`` matches either side of a transfer.
        """
        builder = (
            self._table()
            .select(self.SELECT)
            .eq("user_id", user_id)
            .order("transaction_date", desc=True)
        )

        if query.start_date:
            builder = builder.gte("transaction_date", query.start_date.isoformat())
        if query.end_date:
            builder = builder.lte("transaction_date", query.end_date.isoformat())
        if query.type:
            builder = builder.eq("type", str(query.type))
        if query.category_id:
            builder = builder.eq("category_id", query.category_id)
        if query.fund_source_id:
            fund_id = sanitize_postgrest_value(query.fund_source_id)
            builder = builder.or_(
                f"source_fund_id.eq.{fund_id},destination_fund_id.eq.{fund_id}"
            )
        if query.limit:
            builder = builder.limit(query.limit)
        if query.offset:
            page_size = query.limit or _DEFAULT_PAGE_SIZE
            builder = builder.range(query.offset, query.offset + page_size - 1)

        rows = await self._fetch_rows(builder, operation_name="list (transactions)")
        return self._to_models(Transaction, rows)

    async def create_with_balance_update(self, data: TransactionCreate) -> Transaction:
        """Insert a transaction and adjust fund balances atomically."""
        params: dict[str, JsonSafeType] = {
            "p_type": str(data.type),
            "p_amount": convert_to_json_safe(data.amount),
            "p_description": data.description or "",
            "p_category_id": data.category_id or "",
            "p_source_fund_id": data.source_fund_id or "",
            "p_destination_fund_id": data.destination_fund_id or "",
            "p_transaction_date": data.transaction_date.isoformat(),
        }
        # Unset optionals are left out so the procedure defaults apply.
        if data.notes is not None:
            params["p_notes"] = data.notes
        if data.recurring_pattern_id is not None:
            params["p_recurring_pattern_id"] = data.recurring_pattern_id
        result = await self._call_rpc("create_transaction_with_balance_update", params)
        row = self._rpc_row(result, operation_name="create_transaction_with_balance_update")
        return Transaction.model_validate(row)

    async def update_with_balance_adjustment(
        self,
        transaction_id: str,
        updates: TransactionUpdate,
        transaction_date: date,
    ) -> Transaction:
        """Rewrite a transaction and re-balance old and new fund sources."""
        result = await self._call_rpc(
            "update_transaction_with_balance_adjustment",
            {
                "p_transaction_id": transaction_id,
                "p_amount": convert_to_json_safe(updates.amount),
                "p_source_fund_id": updates.source_fund_id or "",
                "p_destination_fund_id": updates.destination_fund_id or "",
                "p_transaction_date": transaction_date.isoformat(),
                "p_description": updates.description or "",
                "p_category_id": updates.category_id or "",
                "p_notes": updates.notes or "",
            },
        )
        row = self._rpc_row(result, operation_name="update_transaction_with_balance_adjustment")
        return Transaction.model_validate(row)

    async def delete_with_balance_adjustment(self, transaction_id: str) -> bool:
        """Delete a transaction and revert its balance effect."""
        result = await self._call_rpc(
            "delete_transaction_with_balance_adjustment",
            {"p_transaction_id": transaction_id},
        )
        return bool(result)
