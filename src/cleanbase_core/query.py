"""
Query options for filtering, ordering and paging.

``QueryOptions`` wraps a specification with result-shaping parameters.
The specification defines *what* to select; ``QueryOptions`` defines
*how* results come back.  Repositories consume it, the specification
itself never sees it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .domain.specification import ISpecification


@dataclass(frozen=True)
class QueryOptions:
    """
    Immutable container for result-shaping parameters.

    Attributes:
        specification: The filter (``None`` = no filter).
        sort_field: Attribute to order by (``None`` = storage order).
        ascending: Sort direction.
        skip: Number of results to skip.
        take: Maximum number of results.
    """

    specification: ISpecification[Any] | None = None
    sort_field: str | None = None
    ascending: bool = True
    skip: int | None = None
    take: int | None = None

    def with_specification(self, spec: ISpecification[Any] | None) -> QueryOptions:
        """Return a copy with the specification replaced."""
        return replace(self, specification=spec)

    def with_paging(self, skip: int | None = None, take: int | None = None) -> QueryOptions:
        """Return a copy with updated paging; ``None`` keeps the current value."""
        return replace(
            self,
            skip=skip if skip is not None else self.skip,
            take=take if take is not None else self.take,
        )

    def with_ordering(self, sort_field: str | None, *, ascending: bool = True) -> QueryOptions:
        """Return a copy with updated ordering."""
        return replace(self, sort_field=sort_field, ascending=ascending)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        result: dict[str, Any] = {}
        if self.specification is not None:
            result["specification"] = self.specification.to_dict()
        if self.sort_field is not None:
            result["sort_field"] = self.sort_field
            result["ascending"] = self.ascending
        if self.skip is not None:
            result["skip"] = self.skip
        if self.take is not None:
            result["take"] = self.take
        return result
