"""UnitOfWork — abstract base class for the Unit of Work pattern."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger("cleanbase.uow")


class UnitOfWork(ABC):
    """
    Abstract base class for Unit of Work implementations.

    Services stage writes through a repository and call ``commit()`` once
    per operation.  Used as an async context manager, the unit of work
    commits on a clean exit and rolls back when the block raises::

        async with uow:
            await repo.add(entity)
    """

    @abstractmethod
    async def commit(self) -> None:
        """Make staged changes durable."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Discard staged changes."""
        ...

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            await self.commit()
        else:
            logger.debug("Rolling back unit of work after %s", exc_type.__name__)
            await self.rollback()
