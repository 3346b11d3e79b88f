"""FilterDescriptor — one declarative predicate: field, operator and payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from .exceptions import FilterValidationError

if TYPE_CHECKING:
    from .operators.base import FilterOperator
    from .registry import FilterRegistry


@dataclass(frozen=True)
class SingleValue:
    value: Any


@dataclass(frozen=True)
class Bounds:
    start: Any = None
    end: Any = None


@dataclass(frozen=True)
class ValueSet:
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))


FilterPayload = Union[SingleValue, Bounds, ValueSet]  # noqa: UP007


@dataclass(frozen=True)
class FilterDescriptor:
    """
    Declarative description of a single filter.

    Example::

        FilterDescriptor("age", "Range", Bounds(18, 30)).to_operator(registry)
    """

    field_name: str
    operator: str
    payload: FilterPayload

    def __post_init__(self) -> None:
        if not self.field_name or not self.field_name.strip():
            raise FilterValidationError("Filter field name must not be blank")

    def to_operator(self, registry: FilterRegistry) -> FilterOperator:
        op = registry.create(self.operator)
        op.field_name = self.field_name
        op.assign(self.payload)
        return op
