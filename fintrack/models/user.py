"""
Session User Model.

The authenticated identity as seen by the data-access layer.  Only
``id`` is used for query scoping; the rest is display data.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class SessionUser(BaseModel):
    """Represents the signed-in user."""

    id: str  # Supabase UUID
    email: Optional[str] = None
    display_name: Optional[str] = None

    model_config = {"from_attributes": True}
