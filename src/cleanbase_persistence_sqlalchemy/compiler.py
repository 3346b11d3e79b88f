"""
Compile a filter predicate (or its JSON AST) into a SQLAlchemy expression.

Leaf nodes ``{"op", "attr", "val"}`` are looked up in an operator table;
``and`` / ``or`` / ``not`` nodes are walked recursively::

    stmt = select(PersonModel).where(build_sqla_filter(PersonModel, predicate))
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, false, not_, or_, true
from sqlalchemy import inspect as sa_inspect

from cleanbase_filtering.exceptions import (
    FieldNotFoundError,
    FilterValidationError,
    OperatorNotFoundError,
)
from cleanbase_filtering.predicates import PredicateOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

SQLAlchemyOperator = Callable[[Any, Any], "ColumnElement[bool]"]

DEFAULT_SQLA_OPERATORS: dict[str, SQLAlchemyOperator] = {
    PredicateOperator.EQ.value: lambda col, val: col == val,
    PredicateOperator.NE.value: lambda col, val: col != val,
    PredicateOperator.GT.value: lambda col, val: col > val,
    PredicateOperator.LT.value: lambda col, val: col < val,
    PredicateOperator.GE.value: lambda col, val: col >= val,
    PredicateOperator.LE.value: lambda col, val: col <= val,
    PredicateOperator.IN.value: lambda col, val: col.in_(list(val)),
    PredicateOperator.NOT_IN.value: lambda col, val: col.not_in(list(val)),
    PredicateOperator.CONTAINS.value: lambda col, val: col.contains(
        val, autoescape=True
    ),
    PredicateOperator.ICONTAINS.value: lambda col, val: col.icontains(
        val, autoescape=True
    ),
    PredicateOperator.STARTSWITH.value: lambda col, val: col.startswith(
        val, autoescape=True
    ),
    PredicateOperator.ISTARTSWITH.value: lambda col, val: col.istartswith(
        val, autoescape=True
    ),
    PredicateOperator.ENDSWITH.value: lambda col, val: col.endswith(
        val, autoescape=True
    ),
    PredicateOperator.IENDSWITH.value: lambda col, val: col.iendswith(
        val, autoescape=True
    ),
    PredicateOperator.IS_NOT_NULL.value: lambda col, _: col.is_not(None),
}


def build_sqla_filter(
    model: type[Any],
    predicate: Any,
    *,
    operators: dict[str, SQLAlchemyOperator] | None = None,
) -> ColumnElement[bool]:
    """
    Build a SQLAlchemy boolean expression.

    Args:
        model: The SQLAlchemy model class.
        predicate: A predicate node (anything with ``to_dict()``) or the
            AST dictionary itself.
        operators: Optional replacement operator table.

    Raises:
        FieldNotFoundError: A leaf names a column the model lacks.
        OperatorNotFoundError: A leaf uses an operator not in the table.
    """
    data = predicate.to_dict() if hasattr(predicate, "to_dict") else predicate
    return _compile_node(model, data, operators or DEFAULT_SQLA_OPERATORS)


def _compile_node(
    model: type[Any],
    data: dict[str, Any],
    operators: dict[str, SQLAlchemyOperator],
) -> ColumnElement[bool]:
    op_str = str(data.get("op", "")).lower()

    if op_str == PredicateOperator.AND.value:
        parts = [_compile_node(model, c, operators) for c in data.get("conditions", [])]
        return cast("ColumnElement[bool]", and_(*parts) if parts else true())
    if op_str == PredicateOperator.OR.value:
        parts = [_compile_node(model, c, operators) for c in data.get("conditions", [])]
        return cast("ColumnElement[bool]", or_(*parts) if parts else false())
    if op_str == PredicateOperator.NOT.value:
        parts = [_compile_node(model, c, operators) for c in data.get("conditions", [])]
        if not parts:
            raise FilterValidationError("'not' node needs a condition")
        inner = parts[0] if len(parts) == 1 else and_(*parts)
        return cast("ColumnElement[bool]", not_(inner))

    return _compile_leaf(model, data, op_str, operators)


def _compile_leaf(
    model: type[Any],
    data: dict[str, Any],
    op_str: str,
    operators: dict[str, SQLAlchemyOperator],
) -> ColumnElement[bool]:
    attr = data.get("attr")
    if not attr:
        raise FilterValidationError(f"Filter node missing 'attr': {data}")

    apply = operators.get(op_str)
    if apply is None:
        raise OperatorNotFoundError(op_str, sorted(operators))

    column_attrs = sa_inspect(model).column_attrs
    if attr not in column_attrs:
        raise FieldNotFoundError(attr, model.__name__, list(column_attrs.keys()))
    return apply(getattr(model, attr), _db_value(data.get("val")))


def _db_value(value: Any) -> Any:
    # Enum members are stored by value, see ModelMapper.to_model.
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_db_value(v) for v in value]
    return value
