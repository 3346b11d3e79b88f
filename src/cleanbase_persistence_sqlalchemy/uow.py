"""Unit of work bound to one SQLAlchemy ``AsyncSession``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from cleanbase_core.ports.unit_of_work import UnitOfWork

from .exceptions import SessionManagementError, UnitOfWorkError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncSession

    AsyncSessionFactory = Callable[[], AsyncSession]


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Unit of Work over a SQLAlchemy ``AsyncSession``.

    Either pass a live session (the caller owns its lifecycle) or a
    ``session_factory`` (the unit of work opens the session on entry and
    closes it on exit)::

        async with SQLAlchemyUnitOfWork(session_factory=factory) as uow:
            repo = SQLAlchemyRepository(Person, PersonModel, uow)
            await repo.add(person)
    """

    def __init__(
        self,
        session: AsyncSession | None = None,
        session_factory: AsyncSessionFactory | None = None,
    ) -> None:
        if (session is None) == (session_factory is None):
            raise SessionManagementError(
                "Provide exactly one of 'session' or 'session_factory'."
            )
        self._session = session
        self._session_factory = session_factory
        self._owns_session = session_factory is not None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise UnitOfWorkError(
                "Session not yet created. Ensure __aenter__ was called.", "session"
            )
        return self._session

    async def __aenter__(self) -> SQLAlchemyUnitOfWork:
        if self._owns_session and self._session_factory is not None:
            self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc_val, exc_tb)
        finally:
            if self._owns_session and self._session is not None:
                await self._session.close()
                self._session = None

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise UnitOfWorkError(
                f"Failed to commit transaction: {exc}", "commit"
            ) from exc

    async def rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            raise UnitOfWorkError(
                f"Failed to rollback transaction: {exc}", "rollback"
            ) from exc
