"""Range operator: inclusive lower and/or upper bound."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import FilterValidationError
from ..predicates import FieldPredicate, PredicateOperator, all_of
from ..values import coerce
from .base import RangeOperatorBase

if TYPE_CHECKING:
    from ..predicates import Predicate


class Range(RangeOperatorBase):
    """``start <= field <= end``; either bound may be omitted."""

    name = "Range"

    def build(self, entity_type: type[Any]) -> Predicate:
        if self.start_value is None and self.end_value is None:
            raise FilterValidationError(
                "Range requires a start value, an end value or both",
                self.field_name,
            )
        field = self._field()
        field_type = self._field_type(entity_type)
        parts: list[Predicate] = []
        if self.start_value is not None:
            parts.append(
                FieldPredicate(
                    field, PredicateOperator.GE, coerce(field_type, self.start_value)
                )
            )
        if self.end_value is not None:
            parts.append(
                FieldPredicate(
                    field, PredicateOperator.LE, coerce(field_type, self.end_value)
                )
            )
        return all_of(parts)
