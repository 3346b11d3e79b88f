"""
Declarative filter requests.

A request class marks each filterable field with ``FilterField`` inside
``Annotated`` metadata.  The field → filter mapping is captured once,
when the class is defined::

    class PersonFilter(FilterRequest):
        name: Annotated[str | None, FilterField("Contains")] = None
        age: Annotated[DataRange[int] | None, FilterField("Range")] = None
        city: Annotated[str | None, FilterField("Equals", target="home_city")] = None
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any, ClassVar, Generic, TypeVar, get_args, get_origin

from pydantic import BaseModel

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class FilterField:
    """Marks a request field as a filter of kind ``operator``."""

    operator: str
    target: str | None = None
    ignore_case: bool = True


@dataclasses.dataclass(frozen=True)
class FilterBinding:
    """A request field resolved to its filter kind and target entity field."""

    field: str
    operator: str
    target: str
    ignore_case: bool = True

    @classmethod
    def from_marker(cls, field: str, marker: FilterField) -> FilterBinding:
        return cls(
            field=field,
            operator=marker.operator,
            target=marker.target or field,
            ignore_case=marker.ignore_case,
        )


def _marker(metadata: Any) -> FilterField | None:
    for item in metadata:
        if isinstance(item, FilterField):
            return item
    return None


def _from_model(model: type[BaseModel]) -> dict[str, FilterBinding]:
    bindings: dict[str, FilterBinding] = {}
    for name, info in model.model_fields.items():
        marker = _marker(info.metadata)
        if marker is not None:
            bindings[name] = FilterBinding.from_marker(name, marker)
    return bindings


def _from_annotations(request_type: type[Any]) -> dict[str, FilterBinding]:
    hints = typing.get_type_hints(request_type, include_extras=True)
    bindings: dict[str, FilterBinding] = {}
    for name, hint in hints.items():
        if get_origin(hint) is not typing.Annotated:
            continue
        marker = _marker(get_args(hint)[1:])
        if marker is not None:
            bindings[name] = FilterBinding.from_marker(name, marker)
    return bindings


class FilterRequest(BaseModel):
    """Base class for request models that carry filters."""

    __filter_bindings__: ClassVar[Mapping[str, FilterBinding]] = MappingProxyType({})

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        cls.__filter_bindings__ = MappingProxyType(_from_model(cls))

    @classmethod
    def filter_bindings(cls) -> Mapping[str, FilterBinding]:
        return cls.__filter_bindings__


@lru_cache(maxsize=256)
def collect_bindings(request_type: type[Any]) -> Mapping[str, FilterBinding]:
    """Filter bindings declared on ``request_type``.

    Works for ``FilterRequest`` subclasses, any pydantic model and
    dataclasses / annotated classes.
    """
    if issubclass(request_type, FilterRequest):
        return request_type.__filter_bindings__
    if issubclass(request_type, BaseModel):
        return MappingProxyType(_from_model(request_type))
    return MappingProxyType(_from_annotations(request_type))


class DataRange(BaseModel, Generic[T]):
    """Inclusive ``start`` / ``end`` pair; either side may be omitted."""

    start: T | None = None
    end: T | None = None
