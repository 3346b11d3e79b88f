"""
ModelMapper — maps pydantic entities to SQLAlchemy models by column name.

Only columns declared on the model's ``__table__`` are copied; entity
fields without a matching column are ignored on the way in and left at
their defaults on the way out.
"""

from __future__ import annotations

import enum
from typing import Any, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import inspect as sa_inspect

from .exceptions import MappingError

T_Entity = TypeVar("T_Entity")


class ModelMapper(Generic[T_Entity]):
    """Bidirectional mapper between an entity and a persistence model."""

    def __init__(self, entity_cls: type[T_Entity], db_model_cls: type[Any]) -> None:
        self.entity_cls = entity_cls
        self.db_model_cls = db_model_cls
        self.columns: frozenset[str] = frozenset(
            sa_inspect(db_model_cls).column_attrs.keys()
        )

    def to_model(self, entity: T_Entity) -> Any:
        """Entity → new model instance."""
        values = {}
        for name in self.columns:
            if not hasattr(entity, name):
                continue
            value = getattr(entity, name)
            values[name] = value.value if isinstance(value, enum.Enum) else value
        return self.db_model_cls(**values)

    def from_model(self, model: Any) -> T_Entity:
        """Model instance → entity."""
        data = {name: getattr(model, name) for name in self.columns}
        try:
            return self.entity_cls.model_validate(data)  # type: ignore[attr-defined, no-any-return]
        except PydanticValidationError as exc:
            raise MappingError(
                self.entity_cls.__name__, type(model).__name__, str(exc)
            ) from exc
