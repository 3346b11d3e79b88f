"""Errors raised by the SQLAlchemy adapter.

Each one is a ``cleanbase_core.exceptions.PersistenceError``, so services
can handle storage failures without importing this package.
"""

from __future__ import annotations

from typing import Any

from cleanbase_core.exceptions import PersistenceError


class SQLAlchemyPersistenceError(PersistenceError):
    """Root of the SQLAlchemy adapter errors."""


class SessionManagementError(SQLAlchemyPersistenceError):
    """A unit of work was configured without a usable session source."""


class UnitOfWorkError(SQLAlchemyPersistenceError):
    """A session operation failed; ``operation`` names it (``commit``, ...)."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        self.operation = operation
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNIT_OF_WORK_ERROR",
            "message": str(self),
            "operation": self.operation,
        }


class MappingError(SQLAlchemyPersistenceError):
    """A table row could not be turned into its entity, or the reverse."""

    def __init__(self, entity_type: str, model_type: str, detail: str) -> None:
        self.entity_type = entity_type
        self.model_type = model_type
        self.detail = detail
        super().__init__(f"Cannot map {model_type} to {entity_type}: {detail}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MAPPING_ERROR",
            "message": str(self),
            "entity_type": self.entity_type,
            "model_type": self.model_type,
        }


__all__: list[str] = [
    "MappingError",
    "SQLAlchemyPersistenceError",
    "SessionManagementError",
    "UnitOfWorkError",
]
