"""IObjectMapper — protocol for object-to-object mapping."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class IObjectMapper(Protocol):
    """Copy state between requests, entities and summaries.

    Implementations range from a field-name copier to a full mapping
    library; the service layer only relies on these two calls.
    """

    def map(self, source: Any, destination_type: type[T]) -> T:
        """Create a new ``destination_type`` instance from *source*."""
        ...

    def map_into(self, source: Any, destination: Any) -> None:
        """Copy matching state from *source* onto an existing *destination*."""
        ...
