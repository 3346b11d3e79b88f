"""
Dynamic filter-expression builder.

Turns declarative filter requests into typed predicates::

    class PersonFilter(FilterRequest):
        age: Annotated[DataRange[int] | None, FilterField("Range")] = None
        name: Annotated[str | None, FilterField("Contains")] = None

    assembler = FilterAssembler(build_default_registry())
    predicate = assembler.build_predicate(
        PersonFilter(age=DataRange[int](start=18, end=30), name="jo"), Person
    )
"""

from __future__ import annotations

from .assembler import FilterAssembler
from .descriptor import Bounds, FilterDescriptor, FilterPayload, SingleValue, ValueSet
from .exceptions import (
    ConversionError,
    FieldNotFoundError,
    FilterAssemblyError,
    FilterError,
    FilterValidationError,
    OperatorNotFoundError,
)
from .introspection import field_names, resolve_field_type
from .operators import (
    Contains,
    EndsWith,
    Equals,
    FilterOperator,
    FilterShape,
    GreaterThan,
    In,
    LessThan,
    NotEquals,
    NotIn,
    Range,
    StartsWith,
)
from .predicates import (
    AllOf,
    AnyOf,
    FieldPredicate,
    MatchAll,
    Not,
    Predicate,
    PredicateOperator,
    all_of,
)
from .registry import FilterRegistry, build_default_registry
from .request import (
    DataRange,
    FilterBinding,
    FilterField,
    FilterRequest,
    collect_bindings,
)
from .values import ValueKind, classify, coerce, is_ordinal, unwrap_optional

__all__ = [
    # Assembly
    "FilterAssembler",
    "FilterRegistry",
    "build_default_registry",
    # Requests
    "DataRange",
    "FilterBinding",
    "FilterField",
    "FilterRequest",
    "collect_bindings",
    # Descriptors
    "Bounds",
    "FilterDescriptor",
    "FilterPayload",
    "SingleValue",
    "ValueSet",
    # Operators
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
    "StartsWith",
    # Predicates
    "AllOf",
    "AnyOf",
    "FieldPredicate",
    "MatchAll",
    "Not",
    "Predicate",
    "PredicateOperator",
    "all_of",
    # Values
    "ValueKind",
    "classify",
    "coerce",
    "field_names",
    "is_ordinal",
    "resolve_field_type",
    "unwrap_optional",
    # Exceptions
    "ConversionError",
    "FieldNotFoundError",
    "FilterAssemblyError",
    "FilterError",
    "FilterValidationError",
    "OperatorNotFoundError",
]
