"""Entity base class shared by every persisted model."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Entity(BaseModel):
    """Base class for entities handled by repositories and services.

    ``id`` stays ``None`` until the entity is first saved; the service
    layer assigns a fresh UUID on insert.

    Usage::

        class Customer(Entity):
            name: str
            age: int | None = None
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: UUID | None = None
    created_date: datetime = Field(default_factory=_utcnow)
    is_deleted: bool = False

    @property
    def is_transient(self) -> bool:
        """True while the entity has no identity yet."""
        return self.id is None
