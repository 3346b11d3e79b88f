"""
FilterOperator — compiles one request value into a typed predicate.

Operators are grouped by the *shape* of the value they accept:

* ``SCALAR`` — a single value (Equals, GreaterThan, ...)
* ``TEXT``   — a single string plus ``ignore_case`` (Contains, ...)
* ``SET``    — a list of values (In, NotIn)
* ``RANGE``  — optional lower and upper bounds (Range)

Instances are cheap and short-lived: the assembler creates a fresh one per
request field, assigns the payload and calls ``build`` once.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from ..descriptor import Bounds, SingleValue, ValueSet
from ..exceptions import FilterValidationError
from ..introspection import resolve_field_type

if TYPE_CHECKING:
    from ..descriptor import FilterPayload
    from ..predicates import Predicate


class FilterShape(str, Enum):
    SCALAR = "scalar"
    TEXT = "text"
    SET = "set"
    RANGE = "range"


_PAYLOAD_FOR_SHAPE: dict[FilterShape, type[Any]] = {
    FilterShape.SCALAR: SingleValue,
    FilterShape.TEXT: SingleValue,
    FilterShape.SET: ValueSet,
    FilterShape.RANGE: Bounds,
}


class FilterOperator(ABC):
    """Strategy interface for a named filter kind."""

    name: ClassVar[str]
    shape: ClassVar[FilterShape]

    def __init__(self, field_name: str | None = None) -> None:
        self.field_name = field_name

    def assign(self, payload: FilterPayload) -> None:
        """Store ``payload`` after checking it matches this operator's shape."""
        expected = _PAYLOAD_FOR_SHAPE[self.shape]
        if not isinstance(payload, expected):
            raise FilterValidationError(
                f"{self.name} expects a {expected.__name__} payload, "
                f"got {type(payload).__name__}",
                self.field_name,
            )
        self._assign(payload)

    @abstractmethod
    def _assign(self, payload: Any) -> None: ...

    @abstractmethod
    def build(self, entity_type: type[Any]) -> Predicate:
        """
        Compile into a predicate over ``entity_type``.

        Raises:
            FilterValidationError: Missing value or unsupported field type.
            FieldNotFoundError: ``field_name`` is not a member of the type.
            ConversionError: A value cannot be coerced to the field type.
        """
        ...

    def _field(self) -> str:
        if not self.field_name or not self.field_name.strip():
            raise FilterValidationError(f"{self.name} requires a field name")
        return self.field_name

    def _field_type(self, entity_type: type[Any]) -> Any:
        return resolve_field_type(entity_type, self._field())

    def __repr__(self) -> str:
        state = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({state})"


class ScalarOperator(FilterOperator):
    shape = FilterShape.SCALAR

    def __init__(self, field_name: str | None = None, value: Any = None) -> None:
        super().__init__(field_name)
        self.value = value

    def _assign(self, payload: SingleValue) -> None:
        self.value = payload.value

    def _require_value(self) -> Any:
        if self.value is None:
            raise FilterValidationError(f"{self.name} requires a value", self.field_name)
        return self.value


class TextOperator(FilterOperator):
    shape = FilterShape.TEXT

    def __init__(
        self,
        field_name: str | None = None,
        value: str | None = None,
        *,
        ignore_case: bool = True,
    ) -> None:
        super().__init__(field_name)
        self.value = value
        self.ignore_case = ignore_case

    def _assign(self, payload: SingleValue) -> None:
        self.value = payload.value


class SetOperator(FilterOperator):
    shape = FilterShape.SET

    def __init__(
        self, field_name: str | None = None, values: list[Any] | None = None
    ) -> None:
        super().__init__(field_name)
        self.values = values

    def _assign(self, payload: ValueSet) -> None:
        self.values = list(payload.values)


class RangeOperatorBase(FilterOperator):
    shape = FilterShape.RANGE

    def __init__(
        self,
        field_name: str | None = None,
        start_value: Any = None,
        end_value: Any = None,
    ) -> None:
        super().__init__(field_name)
        self.start_value = start_value
        self.end_value = end_value

    def _assign(self, payload: Bounds) -> None:
        self.start_value = payload.start
        self.end_value = payload.end
