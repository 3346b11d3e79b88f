"""BatchOperation — pull pages and process them until the source runs dry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

T = TypeVar("T")

logger = logging.getLogger("cleanbase.services")


class BatchOperation(Generic[T]):
    """
    Runs ``operation`` over successive pages returned by ``fetch_page``.

    Pages are 1-based.  The loop stops after an empty page or a page
    shorter than ``page_size``.

    Usage::

        async def fetch(index: int, size: int) -> list[Order]:
            return await repo.query(QueryOptions().with_paging((index - 1) * size, size))

        pages = await BatchOperation(fetch, archive, page_size=500).run()
    """

    def __init__(
        self,
        fetch_page: Callable[[int, int], Awaitable[Sequence[T]]],
        operation: Callable[[Sequence[T]], Awaitable[None]],
        page_size: int = 100,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.fetch_page = fetch_page
        self.operation = operation
        self.page_size = page_size

    async def run(self) -> int:
        """Process every page; return the number of pages handled."""
        index = 1
        processed = 0
        while True:
            items = await self.fetch_page(index, self.page_size)
            if not items:
                break
            await self.operation(items)
            processed += 1
            logger.debug("Batch page %d processed (%d items)", index, len(items))
            if len(items) < self.page_size:
                break
            index += 1
        return processed
