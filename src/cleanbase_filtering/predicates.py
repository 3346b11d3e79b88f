"""
Immutable predicate AST produced by filter operators.

Every node implements the core ``ISpecification`` protocol, so predicates
can be evaluated in memory (``is_satisfied_by`` / ``__call__``) or handed
to a query compiler through ``to_dict()``::

    {"op": ">=", "attr": "age", "val": 18}
    {"op": "and", "conditions": [...]}

Nodes compose with ``&``, ``|`` and ``~``.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import FieldNotFoundError, OperatorNotFoundError


class PredicateOperator(str, Enum):
    """Operators a predicate node can carry."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    IN = "in"
    NOT_IN = "not_in"
    CONTAINS = "contains"
    ICONTAINS = "icontains"
    STARTSWITH = "startswith"
    ISTARTSWITH = "istartswith"
    ENDSWITH = "endswith"
    IENDSWITH = "iendswith"
    IS_NOT_NULL = "is_not_null"

    # Logical
    AND = "and"
    OR = "or"
    NOT = "not"


LOGICAL_OPERATORS = frozenset(
    {PredicateOperator.AND, PredicateOperator.OR, PredicateOperator.NOT}
)

_MEMBERSHIP_OPERATORS = frozenset({PredicateOperator.IN, PredicateOperator.NOT_IN})

_MISSING = object()


# ── In-memory evaluation ─────────────────────────────────────────────


def _ordinal(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return compare(_ordinal(field_value), _ordinal(condition_value))

    return evaluate


def _text(
    match: Callable[[str, str], bool], *, fold: bool = False
) -> Callable[[Any, Any], bool]:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        text, needle = str(field_value), str(condition_value)
        if fold:
            text, needle = text.lower(), needle.lower()
        return match(text, needle)

    return evaluate


_EVALUATORS: dict[PredicateOperator, Callable[[Any, Any], bool]] = {
    PredicateOperator.EQ: operator.eq,
    PredicateOperator.NE: operator.ne,
    PredicateOperator.GT: _ordered(operator.gt),
    PredicateOperator.LT: _ordered(operator.lt),
    PredicateOperator.GE: _ordered(operator.ge),
    PredicateOperator.LE: _ordered(operator.le),
    PredicateOperator.IN: lambda field, values: field in values,
    PredicateOperator.NOT_IN: lambda field, values: field not in values,
    PredicateOperator.CONTAINS: _text(lambda t, n: n in t),
    PredicateOperator.ICONTAINS: _text(lambda t, n: n in t, fold=True),
    PredicateOperator.STARTSWITH: _text(str.startswith),
    PredicateOperator.ISTARTSWITH: _text(str.startswith, fold=True),
    PredicateOperator.ENDSWITH: _text(str.endswith),
    PredicateOperator.IENDSWITH: _text(str.endswith, fold=True),
    PredicateOperator.IS_NOT_NULL: lambda field, _: field is not None,
}


def _resolve(candidate: Any, attr: str) -> Any:
    if isinstance(candidate, Mapping):
        value = candidate.get(attr, _MISSING)
    else:
        value = getattr(candidate, attr, _MISSING)
    if value is _MISSING:
        raise FieldNotFoundError(attr, type(candidate).__name__, [])
    return value


# ── Nodes ────────────────────────────────────────────────────────────


class Predicate:
    """Base class for predicate nodes."""

    def is_satisfied_by(self, candidate: Any) -> bool:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    def __call__(self, candidate: Any) -> bool:
        return self.is_satisfied_by(candidate)

    def __and__(self, other: Predicate) -> AllOf:
        return AllOf((*_flatten(self, AllOf), *_flatten(other, AllOf)))

    def __or__(self, other: Predicate) -> AnyOf:
        return AnyOf((*_flatten(self, AnyOf), *_flatten(other, AnyOf)))

    def __invert__(self) -> Not:
        return Not(self)


def _flatten(node: Predicate, kind: type[AllOf] | type[AnyOf]) -> tuple[Predicate, ...]:
    if type(node) is kind:
        return node.conditions
    if isinstance(node, MatchAll) and kind is AllOf:
        return ()
    return (node,)


@dataclass(frozen=True)
class FieldPredicate(Predicate):
    """``field <op> value`` leaf."""

    field: str
    op: PredicateOperator
    value: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.op, PredicateOperator):
            try:
                object.__setattr__(self, "op", PredicateOperator(self.op))
            except ValueError as exc:
                raise OperatorNotFoundError(
                    str(self.op), [str(o.value) for o in _EVALUATORS]
                ) from exc
        if self.op in LOGICAL_OPERATORS:
            raise OperatorNotFoundError(
                self.op.value, [str(o.value) for o in _EVALUATORS]
            )
        # Membership sets are frozen; other operators compare the value as is.
        if self.op in _MEMBERSHIP_OPERATORS and isinstance(
            self.value, (list, set, frozenset)
        ):
            object.__setattr__(self, "value", tuple(self.value))

    def is_satisfied_by(self, candidate: Any) -> bool:
        return _EVALUATORS[self.op](_resolve(candidate, self.field), self.value)

    def to_dict(self) -> dict[str, Any]:
        val = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"op": self.op.value, "attr": self.field, "val": val}


@dataclass(frozen=True)
class AllOf(Predicate):
    """Logical AND; an empty conjunction is true."""

    conditions: tuple[Predicate, ...] = ()

    def is_satisfied_by(self, candidate: Any) -> bool:
        return all(c.is_satisfied_by(candidate) for c in self.conditions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": PredicateOperator.AND.value,
            "conditions": [c.to_dict() for c in self.conditions],
        }


@dataclass(frozen=True)
class AnyOf(Predicate):
    """Logical OR; an empty disjunction is false."""

    conditions: tuple[Predicate, ...] = ()

    def is_satisfied_by(self, candidate: Any) -> bool:
        return any(c.is_satisfied_by(candidate) for c in self.conditions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": PredicateOperator.OR.value,
            "conditions": [c.to_dict() for c in self.conditions],
        }


@dataclass(frozen=True)
class Not(Predicate):
    condition: Predicate

    def is_satisfied_by(self, candidate: Any) -> bool:
        return not self.condition.is_satisfied_by(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": PredicateOperator.NOT.value,
            "conditions": [self.condition.to_dict()],
        }


@dataclass(frozen=True)
class MatchAll(Predicate):
    """Predicate that accepts every candidate."""

    def is_satisfied_by(self, candidate: Any) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"op": PredicateOperator.AND.value, "conditions": []}


def all_of(predicates: list[Predicate] | tuple[Predicate, ...]) -> Predicate:
    """AND-combine ``predicates``; ``MatchAll`` when there are none."""
    if not predicates:
        return MatchAll()
    if len(predicates) == 1:
        return predicates[0]
    return AllOf(tuple(predicates))
