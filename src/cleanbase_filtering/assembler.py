"""
FilterAssembler — turns a filter request into operators and predicates.

Walks the request's bindings in declaration order, skips unset fields,
creates one operator per remaining field through the registry and assigns
its payload according to the operator's shape.  Any failure aborts the
whole pass with a ``FilterAssemblyError`` naming the field and filter kind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .descriptor import Bounds, SingleValue, ValueSet
from .exceptions import FilterAssemblyError, FilterError, FilterValidationError
from .operators.base import FilterShape
from .predicates import all_of
from .request import collect_bindings
from .values import coerce

if TYPE_CHECKING:
    from .operators.base import FilterOperator
    from .predicates import Predicate
    from .registry import FilterRegistry
    from .request import FilterBinding

logger = logging.getLogger("cleanbase.filtering")


def _is_pair(value: Any) -> bool:
    return hasattr(value, "start") and hasattr(value, "end")


def _read(request: Any, name: str) -> Any:
    if isinstance(request, Mapping):
        return request.get(name)
    return getattr(request, name, None)


class FilterAssembler:
    """Builds filters from declarative request objects.

    Usage::

        assembler = FilterAssembler(build_default_registry())
        predicate = assembler.build_predicate(request, Person)
        people = [p for p in people if predicate(p)]
    """

    def __init__(self, registry: FilterRegistry) -> None:
        self.registry = registry

    def assemble(
        self,
        request: Any,
        bindings: Mapping[str, FilterBinding] | None = None,
    ) -> list[FilterOperator]:
        """Create one operator per bound, non-``None`` request field."""
        return [op for _, _, op in self._assemble(request, bindings)]

    def build_predicates(
        self,
        request: Any,
        entity_type: type[Any],
        bindings: Mapping[str, FilterBinding] | None = None,
    ) -> list[Predicate]:
        predicates: list[Predicate] = []
        for name, binding, op in self._assemble(request, bindings):
            try:
                predicates.append(op.build(entity_type))
            except (FilterError, ValueError) as exc:
                raise FilterAssemblyError(name, binding.operator, exc) from exc
        return predicates

    def build_predicate(
        self,
        request: Any,
        entity_type: type[Any],
        bindings: Mapping[str, FilterBinding] | None = None,
    ) -> Predicate:
        """AND of every request filter; ``MatchAll`` when none apply."""
        return all_of(self.build_predicates(request, entity_type, bindings))

    # -- internals -----------------------------------------------------------

    def _assemble(
        self,
        request: Any,
        bindings: Mapping[str, FilterBinding] | None,
    ) -> list[tuple[str, FilterBinding, FilterOperator]]:
        if request is None:
            return []
        if bindings is None:
            bindings = collect_bindings(type(request))

        assembled: list[tuple[str, FilterBinding, FilterOperator]] = []
        for name, binding in bindings.items():
            value = _read(request, name)
            if value is None:
                continue
            try:
                op = self._create(binding, value)
            except (FilterError, ValueError) as exc:
                raise FilterAssemblyError(name, binding.operator, exc) from exc
            logger.debug(
                "Assembled %s on %s from request field %s",
                binding.operator,
                binding.target,
                name,
            )
            assembled.append((name, binding, op))
        return assembled

    def _create(self, binding: FilterBinding, value: Any) -> FilterOperator:
        op = self.registry.create(binding.operator)
        op.field_name = binding.target

        if op.shape is FilterShape.RANGE:
            if not _is_pair(value):
                raise FilterValidationError(
                    f"{binding.operator} expects a value with start and end",
                    binding.field,
                )
            op.assign(Bounds(value.start, value.end))
        elif op.shape is FilterShape.TEXT:
            if not isinstance(value, str):
                raise FilterValidationError(
                    f"{binding.operator} expects a string value", binding.field
                )
            op.assign(SingleValue(value))
            op.ignore_case = binding.ignore_case  # type: ignore[attr-defined]
        elif op.shape is FilterShape.SET:
            op.assign(ValueSet(self._set_values(binding, value)))
        else:
            op.assign(SingleValue(value))
        return op

    @staticmethod
    def _set_values(binding: FilterBinding, value: Any) -> list[Any]:
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise FilterValidationError(
                f"{binding.operator} expects a collection of values", binding.field
            )
        items = list(value)
        first = next((item for item in items if item is not None), None)
        if first is None:
            raise FilterValidationError(
                f"{binding.operator} needs at least one non-null value",
                binding.field,
            )
        # Element type comes from the first non-null element.
        element_type = type(first)
        return [coerce(element_type, item) for item in items]
