"""Set membership operators: In, NotIn."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from ..exceptions import FilterValidationError
from ..predicates import FieldPredicate, PredicateOperator
from ..values import coerce, unwrap_optional
from .base import SetOperator

if TYPE_CHECKING:
    from ..predicates import Predicate


class MembershipOperator(SetOperator):
    predicate_op: ClassVar[PredicateOperator]

    def build(self, entity_type: type[Any]) -> Predicate:
        if not self.values:
            raise FilterValidationError(
                f"{self.name} requires at least one value", self.field_name
            )
        field = self._field()
        element_type, _ = unwrap_optional(self._field_type(entity_type))
        # All-or-nothing: the first bad element aborts the build.
        coerced = tuple(coerce(element_type, v) for v in self.values if v is not None)
        return FieldPredicate(field, self.predicate_op, coerced)


class In(MembershipOperator):
    name = "In"
    predicate_op = PredicateOperator.IN


class NotIn(MembershipOperator):
    name = "NotIn"
    predicate_op = PredicateOperator.NOT_IN
