"""IRepository — generic repository protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from ..domain.specification import ISpecification
    from ..query import QueryOptions

T = TypeVar("T")


@runtime_checkable
class IRepository(Protocol[T]):
    """
    Generic repository for entities keyed by ``UUID``.

    Write methods only stage changes; the caller's unit of work makes them
    durable.  Soft-deleted entities are invisible to ``find``, ``query``
    and ``count``::

        items = await repo.query(QueryOptions(spec, sort_field="name", take=20))
        total = await repo.count(spec)
    """

    async def find(self, entity_id: UUID) -> T | None: ...

    async def add(self, entity: T) -> T: ...

    async def add_many(self, entities: Sequence[T]) -> None: ...

    async def update(self, entity: T) -> T: ...

    async def update_many(self, entities: Sequence[T]) -> None: ...

    async def remove(self, entity: T) -> None: ...

    async def soft_delete(self, entity_id: UUID) -> bool: ...

    async def hard_delete(self, entity_id: UUID) -> bool: ...

    async def query(self, options: QueryOptions) -> list[T]: ...

    async def count(self, specification: ISpecification[Any] | None = None) -> int: ...
