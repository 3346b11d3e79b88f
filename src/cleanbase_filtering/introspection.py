"""Resolve the declared type of an entity field."""

from __future__ import annotations

import typing
from functools import lru_cache
from typing import Any, ClassVar, Optional, get_args, get_origin

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, Mapper

from .exceptions import FieldNotFoundError


def _resolve_hint(klass: type[Any], name: str, hint: Any) -> Any:
    """Evaluate a single annotation of ``klass``; ``Any`` when it cannot be."""
    if not isinstance(hint, str):
        return hint
    holder = type(
        klass.__name__,
        (),
        {"__annotations__": {name: hint}, "__module__": klass.__module__},
    )
    try:
        return typing.get_type_hints(holder, localns=dict(vars(klass)))[name]
    except (NameError, TypeError):
        if hint.startswith(("ClassVar", "typing.ClassVar")):
            return ClassVar
        return Any


def _type_hints(entity_type: type[Any]) -> dict[str, Any]:
    try:
        hints = typing.get_type_hints(entity_type)
    except (NameError, TypeError):
        # Some annotation names a type that only exists for type checkers;
        # resolve the rest one at a time.
        hints = {}
        for klass in reversed(entity_type.__mro__):
            for name, hint in klass.__dict__.get("__annotations__", {}).items():
                hints[name] = _resolve_hint(klass, name, hint)
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_") and get_origin(hint) is not ClassVar
    }


def _mapper(entity_type: type[Any]) -> Mapper[Any] | None:
    insp = sa_inspect(entity_type, raiseerr=False)
    return insp if isinstance(insp, Mapper) else None


def _column_type(mapper: Mapper[Any], field_name: str) -> Any:
    column = mapper.columns.get(field_name)
    if column is None:
        return None
    try:
        python_type: Any = column.type.python_type
    except NotImplementedError:
        python_type = Any
    if column.nullable and python_type is not Any:
        return Optional[python_type]  # noqa: UP007
    return python_type


def field_names(entity_type: type[Any]) -> list[str]:
    """All filterable member names of ``entity_type``."""
    if isinstance(entity_type, type) and issubclass(entity_type, BaseModel):
        return list(entity_type.model_fields)
    names = list(_type_hints(entity_type))
    mapper = _mapper(entity_type)
    if mapper is not None:
        names.extend(k for k in mapper.columns.keys() if k not in names)
    return names


@lru_cache(maxsize=1024)
def resolve_field_type(entity_type: type[Any], field_name: str) -> Any:
    """
    Return the declared type of ``entity_type.field_name``.

    Supports pydantic models, dataclasses, annotated classes and
    SQLAlchemy declarative models (``Mapped[X]`` annotations or plain
    ``Column`` attributes).  ``Mapped[X]`` is unwrapped to ``X``.

    Raises:
        FieldNotFoundError: If the type has no such member.
    """
    if isinstance(entity_type, type) and issubclass(entity_type, BaseModel):
        info = entity_type.model_fields.get(field_name)
        hint = info.annotation if info is not None else None
    else:
        hint = _type_hints(entity_type).get(field_name)
        if get_origin(hint) is Mapped:
            hint = get_args(hint)[0]
    if hint is not None and hint is not Any:
        return hint

    # ``Any`` says nothing; a mapped column may know better.
    mapper = _mapper(entity_type)
    if mapper is not None:
        column_type = _column_type(mapper, field_name)
        if column_type is not None:
            return column_type
    if hint is Any:
        return Any

    raise FieldNotFoundError(
        field_name,
        getattr(entity_type, "__name__", repr(entity_type)),
        field_names(entity_type),
    )
