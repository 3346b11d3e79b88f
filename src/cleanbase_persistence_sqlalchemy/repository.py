"""SQLAlchemyRepository — ``IRepository`` over an ``AsyncSession``."""

from __future__ import annotations

import builtins
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import asc, delete, desc, func, select

from cleanbase_core.exceptions import ValidationError
from cleanbase_core.ports.repository import IRepository

from .compiler import build_sqla_filter
from .mapping import ModelMapper

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy import Select

    from cleanbase_core.domain.specification import ISpecification
    from cleanbase_core.query import QueryOptions

    from .uow import SQLAlchemyUnitOfWork

T = TypeVar("T")

logger = logging.getLogger("cleanbase.persistence")


class SQLAlchemyRepository(IRepository[T], Generic[T]):
    """
    Repository that stores pydantic entities in a SQLAlchemy model table.

    ``entity_cls`` is the domain type handed to callers; ``db_model_cls``
    is the declarative model.  Rows with ``is_deleted`` set are hidden
    from ``find``, ``query`` and ``count`` when the model has that column.
    Writes go through the unit of work's session and are made durable by
    its ``commit()``::

        repo = SQLAlchemyRepository(Person, PersonModel, uow)
        people = await repo.query(QueryOptions(spec, sort_field="name", take=20))
    """

    def __init__(
        self,
        entity_cls: type[T],
        db_model_cls: type[Any],
        uow: SQLAlchemyUnitOfWork,
    ) -> None:
        self.entity_cls = entity_cls
        self.db_model_cls = db_model_cls
        self.uow = uow
        self._mapper: ModelMapper[T] = ModelMapper(entity_cls, db_model_cls)
        self._soft_delete = "is_deleted" in self._mapper.columns

    # -- helpers -------------------------------------------------------------

    def _visible(self, stmt: Select[Any]) -> Select[Any]:
        if self._soft_delete:
            stmt = stmt.where(self.db_model_cls.is_deleted.is_(False))
        return stmt

    def _filtered(
        self, stmt: Select[Any], specification: ISpecification[Any] | None
    ) -> Select[Any]:
        stmt = self._visible(stmt)
        if specification is not None:
            stmt = stmt.where(build_sqla_filter(self.db_model_cls, specification))
        return stmt

    async def _get_model(self, entity_id: UUID) -> Any | None:
        model = await self.uow.session.get(self.db_model_cls, entity_id)
        if model is None or (self._soft_delete and model.is_deleted):
            return None
        return model

    # -- reads ---------------------------------------------------------------

    async def find(self, entity_id: UUID) -> T | None:
        model = await self._get_model(entity_id)
        return self._mapper.from_model(model) if model is not None else None

    async def query(self, options: QueryOptions) -> builtins.list[T]:
        stmt = self._filtered(select(self.db_model_cls), options.specification)
        if options.sort_field:
            if options.sort_field not in self._mapper.columns:
                raise ValidationError(
                    {"sort_field": [f"Unknown sort field {options.sort_field!r}"]}
                )
            column = getattr(self.db_model_cls, options.sort_field)
            stmt = stmt.order_by(asc(column) if options.ascending else desc(column))
        if options.skip:
            stmt = stmt.offset(options.skip)
        if options.take is not None:
            stmt = stmt.limit(options.take)
        result = await self.uow.session.execute(stmt)
        return [self._mapper.from_model(m) for m in result.scalars().all()]

    async def count(self, specification: ISpecification[Any] | None = None) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(self.db_model_cls), specification
        )
        result = await self.uow.session.execute(stmt)
        return int(result.scalar_one())

    # -- writes --------------------------------------------------------------

    async def add(self, entity: T) -> T:
        self.uow.session.add(self._mapper.to_model(entity))
        return entity

    async def add_many(self, entities: Sequence[T]) -> None:
        self.uow.session.add_all([self._mapper.to_model(e) for e in entities])
        logger.debug("Staged %d new %s rows", len(entities), self.db_model_cls.__name__)

    async def update(self, entity: T) -> T:
        await self.uow.session.merge(self._mapper.to_model(entity))
        return entity

    async def update_many(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.update(entity)

    async def remove(self, entity: T) -> None:
        model = await self.uow.session.get(self.db_model_cls, entity.id)  # type: ignore[attr-defined]
        if model is not None:
            await self.uow.session.delete(model)

    async def soft_delete(self, entity_id: UUID) -> bool:
        if not self._soft_delete:
            return await self.hard_delete(entity_id)
        model = await self._get_model(entity_id)
        if model is None:
            return False
        model.is_deleted = True
        return True

    async def hard_delete(self, entity_id: UUID) -> bool:
        result = await self.uow.session.execute(
            delete(self.db_model_cls).where(self.db_model_cls.id == entity_id)
        )
        return bool(result.rowcount)
