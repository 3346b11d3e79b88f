"""InMemoryUnitOfWork — records commits and rollbacks for assertions."""

from __future__ import annotations

from ...ports.unit_of_work import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """No-op unit of work that counts calls."""

    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1
