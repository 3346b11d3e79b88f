"""Core primitives shared by every cleanbase package."""

from .adapters import InMemoryRepository, InMemoryUnitOfWork, PydanticObjectMapper
from .domain import Entity, ISpecification
from .exceptions import (
    CleanBaseError,
    DomainError,
    EntityNotFoundError,
    InfrastructureError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .ports import IIdentityProvider, IObjectMapper, IRepository, UnitOfWork
from .query import QueryOptions

__all__ = [
    # Domain
    "Entity",
    "ISpecification",
    # Query
    "QueryOptions",
    # Ports
    "IIdentityProvider",
    "IObjectMapper",
    "IRepository",
    "UnitOfWork",
    # Adapters
    "InMemoryRepository",
    "InMemoryUnitOfWork",
    "PydanticObjectMapper",
    # Exceptions
    "CleanBaseError",
    "DomainError",
    "EntityNotFoundError",
    "InfrastructureError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
