"""Equality and ordering operators: Equals, NotEquals, GreaterThan, LessThan."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from ..exceptions import FilterValidationError
from ..predicates import FieldPredicate, PredicateOperator
from ..values import coerce, is_ordinal
from .base import ScalarOperator

if TYPE_CHECKING:
    from ..predicates import Predicate


class ComparisonOperator(ScalarOperator):
    predicate_op: ClassVar[PredicateOperator]
    requires_ordinal: ClassVar[bool] = False

    def build(self, entity_type: type[Any]) -> Predicate:
        value = self._require_value()
        field_type = self._field_type(entity_type)
        if self.requires_ordinal and not is_ordinal(field_type):
            raise FilterValidationError(
                f"{self.name}: field '{self.field_name}' must be a comparable type "
                "(number, decimal, date/time or enum)",
                self.field_name,
            )
        return FieldPredicate(self._field(), self.predicate_op, coerce(field_type, value))


class Equals(ComparisonOperator):
    name = "Equals"
    predicate_op = PredicateOperator.EQ


class NotEquals(ComparisonOperator):
    name = "NotEquals"
    predicate_op = PredicateOperator.NE


class GreaterThan(ComparisonOperator):
    name = "GreaterThan"
    predicate_op = PredicateOperator.GT
    requires_ordinal = True


class LessThan(ComparisonOperator):
    name = "LessThan"
    predicate_op = PredicateOperator.LT
    requires_ordinal = True
