"""SQLAlchemy adapters: filter compiler, unit of work and repository."""

from __future__ import annotations

from .compiler import DEFAULT_SQLA_OPERATORS, build_sqla_filter
from .exceptions import (
    MappingError,
    SessionManagementError,
    SQLAlchemyPersistenceError,
    UnitOfWorkError,
)
from .mapping import ModelMapper
from .repository import SQLAlchemyRepository
from .uow import SQLAlchemyUnitOfWork

__all__ = [
    "DEFAULT_SQLA_OPERATORS",
    "MappingError",
    "ModelMapper",
    "SQLAlchemyPersistenceError",
    "SQLAlchemyRepository",
    "SQLAlchemyUnitOfWork",
    "SessionManagementError",
    "UnitOfWorkError",
    "build_sqla_filter",
]
