"""PydanticObjectMapper — field-name based ``IObjectMapper``."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from ..ports.mapper import IObjectMapper

T = TypeVar("T")


def _field_names(target: Any) -> set[str] | None:
    cls = target if isinstance(target, type) else type(target)
    if issubclass(cls, BaseModel):
        return set(cls.model_fields)
    if dataclasses.is_dataclass(cls):
        return {f.name for f in dataclasses.fields(cls)}
    return None


def _read_state(source: Any) -> dict[str, Any]:
    """Shallow attribute snapshot; nested models are kept as objects."""
    if isinstance(source, Mapping):
        return dict(source)
    names = _field_names(source)
    if names is not None:
        return {name: getattr(source, name) for name in names}
    return {k: v for k, v in vars(source).items() if not k.startswith("_")}


class PydanticObjectMapper(IObjectMapper):
    """Copies state between objects by matching field names.

    Works with pydantic models, dataclasses, mappings and plain objects.
    Fields that exist only on one side are ignored.
    """

    def map(self, source: Any, destination_type: type[T]) -> T:
        data = _read_state(source)
        names = _field_names(destination_type)
        if names is not None:
            data = {k: v for k, v in data.items() if k in names}
        if issubclass(destination_type, BaseModel):
            return destination_type.model_validate(data)  # type: ignore[return-value]
        return destination_type(**data)

    def map_into(self, source: Any, destination: Any) -> None:
        names = _field_names(destination)
        for key, value in _read_state(source).items():
            if names is None or key in names:
                setattr(destination, key, value)
