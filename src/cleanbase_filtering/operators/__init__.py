"""
Built-in filter operators.

Usage::

    from cleanbase_filtering.operators import Equals

    predicate = Equals("age", 30).build(Person)
"""

from __future__ import annotations

from .base import (
    FilterOperator,
    FilterShape,
    RangeOperatorBase,
    ScalarOperator,
    SetOperator,
    TextOperator,
)
from .comparison import Equals, GreaterThan, LessThan, NotEquals
from .membership import In, NotIn
from .range import Range
from .text import Contains, EndsWith, StartsWith

DEFAULT_OPERATORS: tuple[type[FilterOperator], ...] = (
    Equals,
    NotEquals,
    Contains,
    StartsWith,
    EndsWith,
    GreaterThan,
    LessThan,
    Range,
    In,
    NotIn,
)

__all__ = [
    "DEFAULT_OPERATORS",
    "Contains",
    "EndsWith",
    "Equals",
    "FilterOperator",
    "FilterShape",
    "GreaterThan",
    "In",
    "LessThan",
    "NotEquals",
    "NotIn",
    "Range",
    "RangeOperatorBase",
    "ScalarOperator",
    "SetOperator",
    "StartsWith",
    "TextOperator",
]
