"""
Service Layer Data Transfer Objects.

The standard return envelope of every service operation.  Services never
raise past their own boundary: a remote failure becomes
``ServiceResult(success=False, error=...)``.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

__all__ = ["ServiceResult"]


class ServiceResult(BaseModel, Generic[T]):
    """
    Standard service return envelope.

    Generic over ``T`` so callers can annotate return types precisely
    (e.g. ``ServiceResult[list[Budget]]``).  ``from_cache`` tells callers
    and tests whether a read was answered without touching the network.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: int = 200
    from_cache: bool = False
