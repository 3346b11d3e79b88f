"""InMemoryRepository — dict-backed fake for unit tests."""

from __future__ import annotations

import builtins
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from uuid import UUID, uuid4

from ...exceptions import ValidationError
from ...ports.repository import IRepository

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...domain.specification import ISpecification
    from ...query import QueryOptions

T = TypeVar("T")


def _sort_key(value: Any) -> tuple[bool, Any]:
    if isinstance(value, Enum):
        value = value.value
    return (value is None, value)


class InMemoryRepository(IRepository[T], Generic[T]):
    """In-memory implementation of ``IRepository[T]``.

    Stores entities in a plain dict keyed by their ``id``.  Writes are
    visible immediately; pair it with ``InMemoryUnitOfWork`` to observe
    commits.
    """

    def __init__(self) -> None:
        self._store: dict[UUID, T] = {}

    def _visible(self) -> builtins.list[T]:
        return [e for e in self._store.values() if not getattr(e, "is_deleted", False)]

    async def find(self, entity_id: UUID) -> T | None:
        entity = self._store.get(entity_id)
        if entity is None or getattr(entity, "is_deleted", False):
            return None
        return entity

    async def add(self, entity: T) -> T:
        if getattr(entity, "id", None) is None:
            entity.id = uuid4()  # type: ignore[attr-defined]
        self._store[entity.id] = entity  # type: ignore[attr-defined]
        return entity

    async def add_many(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.add(entity)

    async def update(self, entity: T) -> T:
        self._store[entity.id] = entity  # type: ignore[attr-defined]
        return entity

    async def update_many(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.update(entity)

    async def remove(self, entity: T) -> None:
        self._store.pop(entity.id, None)  # type: ignore[attr-defined]

    async def soft_delete(self, entity_id: UUID) -> bool:
        entity = await self.find(entity_id)
        if entity is None:
            return False
        entity.is_deleted = True  # type: ignore[attr-defined]
        return True

    async def hard_delete(self, entity_id: UUID) -> bool:
        return self._store.pop(entity_id, None) is not None

    async def query(self, options: QueryOptions) -> builtins.list[T]:
        items = self._matching(options.specification)
        if options.sort_field:
            if items and not hasattr(items[0], options.sort_field):
                raise ValidationError(
                    {"sort_field": [f"Unknown sort field {options.sort_field!r}"]}
                )
            items.sort(
                key=lambda e: _sort_key(getattr(e, options.sort_field)),  # type: ignore[arg-type]
                reverse=not options.ascending,
            )
        start = options.skip or 0
        end = start + options.take if options.take is not None else None
        return items[start:end]

    async def count(self, specification: ISpecification[Any] | None = None) -> int:
        return len(self._matching(specification))

    def _matching(self, specification: ISpecification[Any] | None) -> builtins.list[T]:
        items = self._visible()
        if specification is None:
            return items
        return [e for e in items if specification.is_satisfied_by(e)]

    # ── Test helpers ─────────────────────────────────────────────

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
