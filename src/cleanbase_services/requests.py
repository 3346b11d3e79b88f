"""Request and result models shared by CRUD services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

from cleanbase_filtering import FilterRequest

T = TypeVar("T")


class KeyedRequest(BaseModel):
    """Save request addressed by an optional entity id."""

    id: UUID | None = None


class GetAllRequest(FilterRequest):
    """Paging and ordering for list endpoints.

    Subclasses add their filter fields with ``FilterField`` markers.
    ``skip`` wins over ``page_index`` when both are set.
    """

    page_index: int | None = 1
    page_size: int = 20
    skip: int | None = None
    sort_field: str | None = None
    asc: bool | None = None


@dataclass(frozen=True)
class ListResult(Generic[T]):
    """One page of results plus the total match count."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    skipped: int = 0
    page_size: int = 0


@dataclass(frozen=True)
class UpsertResult:
    added: int = 0
    updated: int = 0
    deleted: int = 0
