"""String matching operators: Contains, StartsWith, EndsWith."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from ..exceptions import FilterValidationError
from ..predicates import AllOf, FieldPredicate, PredicateOperator
from ..values import ValueKind, classify, unwrap_optional
from .base import TextOperator

if TYPE_CHECKING:
    from ..predicates import Predicate


class StringMatchOperator(TextOperator):
    predicate_op: ClassVar[PredicateOperator]
    folded_op: ClassVar[PredicateOperator]

    def build(self, entity_type: type[Any]) -> Predicate:
        field = self._field()
        field_type = self._field_type(entity_type)
        _, is_optional = unwrap_optional(field_type)
        if classify(field_type) is not ValueKind.TEXT:
            raise FilterValidationError(
                f"{self.name}: field '{field}' must be a string type",
                field,
            )
        if not isinstance(self.value, str) or not self.value.strip():
            raise FilterValidationError(
                f"{self.name} requires a non-blank string value", field
            )

        if self.ignore_case:
            match = FieldPredicate(field, self.folded_op, self.value.lower())
        else:
            match = FieldPredicate(field, self.predicate_op, self.value)
        if is_optional:
            return AllOf(
                (FieldPredicate(field, PredicateOperator.IS_NOT_NULL), match)
            )
        return match


class Contains(StringMatchOperator):
    name = "Contains"
    predicate_op = PredicateOperator.CONTAINS
    folded_op = PredicateOperator.ICONTAINS


class StartsWith(StringMatchOperator):
    name = "StartsWith"
    predicate_op = PredicateOperator.STARTSWITH
    folded_op = PredicateOperator.ISTARTSWITH


class EndsWith(StringMatchOperator):
    name = "EndsWith"
    predicate_op = PredicateOperator.ENDSWITH
    folded_op = PredicateOperator.IENDSWITH
