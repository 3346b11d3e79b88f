"""
Value coercion for filter literals.

``coerce(target_type, raw)`` converts a raw request value into the type of
the entity field it is compared against.  Dispatch is keyed by
``ValueKind``: every kind has exactly one converter, and kinds without a
dedicated rule fall back to a cached pydantic ``TypeAdapter``.
"""

from __future__ import annotations

import collections.abc
import types
from collections.abc import Callable, Iterable
from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Union, get_args, get_origin
from uuid import UUID

from pydantic import PydanticSchemaGenerationError, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConversionError


class ValueKind(str, Enum):
    """Closed set of scalar kinds a target type classifies to."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    DATE = "date"
    TIME = "time"
    IDENTIFIER = "identifier"
    ENUM = "enum"
    COLLECTION = "collection"
    OTHER = "other"


ORDINAL_KINDS = frozenset(
    {
        ValueKind.INTEGER,
        ValueKind.FLOAT,
        ValueKind.DECIMAL,
        ValueKind.TIMESTAMP,
        ValueKind.DATE,
        ValueKind.TIME,
        ValueKind.ENUM,
    }
)

_TRUE_WORDS = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "n", "off"})

_LIST_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)
_SET_ORIGINS = (set, collections.abc.Set, collections.abc.MutableSet)
_COLLECTION_ORIGINS = (*_LIST_ORIGINS, *_SET_ORIGINS, frozenset, tuple)


# ── Type helpers ─────────────────────────────────────────────────────


def _strip_annotated(tp: Any) -> Any:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Return ``(inner, is_optional)`` for ``Optional[X]`` / ``X | None``.

    A union with several non-``None`` members is returned as a union of
    those members.  Non-optional types come back unchanged.
    """
    tp = _strip_annotated(tp)
    if not _is_union(tp):
        return tp, False
    args = get_args(tp)
    rest = tuple(a for a in args if a is not type(None))
    if len(rest) == len(args):
        return tp, False
    if len(rest) == 1:
        return rest[0], True
    return Union[rest], True  # noqa: UP007


def classify(tp: Any) -> ValueKind:
    """Map a (possibly optional) type to its ``ValueKind``."""
    inner, _ = unwrap_optional(tp)
    inner = _strip_annotated(inner)
    if isinstance(inner, type) and get_origin(inner) is None:
        # Order matters: bool < int, IntEnum < int, datetime < date.
        if issubclass(inner, Enum):
            return ValueKind.ENUM
        if issubclass(inner, bool):
            return ValueKind.BOOLEAN
        if issubclass(inner, int):
            return ValueKind.INTEGER
        if issubclass(inner, float):
            return ValueKind.FLOAT
        if issubclass(inner, Decimal):
            return ValueKind.DECIMAL
        if issubclass(inner, str):
            return ValueKind.TEXT
        if issubclass(inner, datetime):
            return ValueKind.TIMESTAMP
        if issubclass(inner, date):
            return ValueKind.DATE
        if issubclass(inner, time):
            return ValueKind.TIME
        if issubclass(inner, UUID):
            return ValueKind.IDENTIFIER
    origin = get_origin(inner) or inner
    if origin in _COLLECTION_ORIGINS:
        return ValueKind.COLLECTION
    return ValueKind.OTHER


def is_ordinal(tp: Any) -> bool:
    """True when values of ``tp`` support ``<`` / ``>`` comparisons."""
    return classify(tp) in ORDINAL_KINDS


# ── Converters ───────────────────────────────────────────────────────


def _is_instance(raw: Any, target: Any) -> bool:
    if not isinstance(target, type) or get_origin(target) is not None:
        return False
    if isinstance(raw, bool) and target in (int, float, Decimal):
        return False
    if isinstance(raw, datetime) and target is date:
        return False
    return isinstance(raw, target)


def _reject_bool(raw: Any, target: Any) -> None:
    if isinstance(raw, bool):
        raise ConversionError(raw, target, "booleans are not numeric")


def _to_bool(target: Any, raw: Any) -> bool:
    if isinstance(raw, str):
        word = raw.strip().casefold()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    elif isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    raise ConversionError(raw, target)


def _to_int(target: Any, raw: Any) -> int:
    _reject_bool(raw, target)
    try:
        if isinstance(raw, Decimal):
            return target(int(raw.to_integral_value(rounding=ROUND_HALF_EVEN)))
        if isinstance(raw, float):
            return target(round(raw))
        if isinstance(raw, (int, str)):
            return target(raw.strip() if isinstance(raw, str) else raw)
    except (ValueError, OverflowError) as exc:
        raise ConversionError(raw, target, str(exc)) from exc
    raise ConversionError(raw, target)


def _to_float(target: Any, raw: Any) -> float:
    _reject_bool(raw, target)
    if isinstance(raw, (int, float, Decimal, str)):
        try:
            return target(raw)
        except (ValueError, OverflowError) as exc:
            raise ConversionError(raw, target, str(exc)) from exc
    raise ConversionError(raw, target)


def _to_decimal(target: Any, raw: Any) -> Decimal:
    _reject_bool(raw, target)
    if isinstance(raw, float):
        raw = repr(raw)
    if isinstance(raw, (int, str)):
        try:
            return target(raw.strip() if isinstance(raw, str) else raw)
        except InvalidOperation as exc:
            raise ConversionError(raw, target, "not a decimal number") from exc
    raise ConversionError(raw, target)


def _to_text(target: Any, raw: Any) -> str:
    if isinstance(raw, Enum):
        raw = raw.value
    return target(raw)


def _to_timestamp(target: Any, raw: Any) -> datetime:
    if isinstance(raw, str):
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return target.fromisoformat(text)
        except ValueError as exc:
            raise ConversionError(raw, target, str(exc)) from exc
    if isinstance(raw, date):
        return target.combine(raw, time())
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return target.fromtimestamp(raw, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ConversionError(raw, target, str(exc)) from exc
    raise ConversionError(raw, target)


def _to_date(target: Any, raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, str):
        try:
            return target.fromisoformat(raw.strip())
        except ValueError as exc:
            raise ConversionError(raw, target, str(exc)) from exc
    raise ConversionError(raw, target)


def _to_time(target: Any, raw: Any) -> time:
    if isinstance(raw, datetime):
        return raw.time()
    if isinstance(raw, str):
        try:
            return target.fromisoformat(raw.strip())
        except ValueError as exc:
            raise ConversionError(raw, target, str(exc)) from exc
    raise ConversionError(raw, target)


def _to_uuid(target: Any, raw: Any) -> UUID:
    try:
        if isinstance(raw, str):
            return target(raw.strip())
        if isinstance(raw, bytes) and len(raw) == 16:
            return target(bytes=raw)
        if isinstance(raw, int) and not isinstance(raw, bool):
            return target(int=raw)
    except ValueError as exc:
        raise ConversionError(raw, target, "malformed UUID") from exc
    raise ConversionError(raw, target)


def _to_enum(target: Any, raw: Any) -> Enum:
    """Match a member by name (case-insensitive), then by underlying value."""
    if isinstance(raw, bool):
        raise ConversionError(raw, target)
    if isinstance(raw, str):
        text = raw.strip()
        folded = text.casefold()
        for member in target:
            if member.name.casefold() == folded:
                return member
        candidates: list[Any] = [text]
        try:
            candidates.insert(0, int(text))
        except ValueError:
            candidates.append(folded)
        for member in target:
            value = member.value
            for candidate in candidates:
                if value == candidate or (
                    isinstance(value, str) and value.casefold() == candidate
                ):
                    return member
        raise ConversionError(raw, target, "no member with that name or value")
    for member in target:
        if member.value == raw:
            return member
    raise ConversionError(raw, target, "no member with that value")


def _to_collection(target: Any, raw: Any) -> Any:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        raise ConversionError(raw, target, "expected a collection")
    origin = get_origin(target) or target
    args = get_args(target)
    items = list(raw)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(coerce(args[0], item) for item in items)
        if args:
            if len(args) != len(items):
                raise ConversionError(
                    raw, target, f"expected {len(args)} items, got {len(items)}"
                )
            return tuple(coerce(a, item) for a, item in zip(args, items))
        return tuple(items)

    element = args[0] if args else Any
    converted = [coerce(element, item) for item in items]
    if origin in _SET_ORIGINS:
        return set(converted)
    if origin is frozenset:
        return frozenset(converted)
    return converted


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _via_adapter(target: Any, raw: Any) -> Any:
    try:
        return _adapter(target).validate_python(raw, strict=False)
    except PydanticSchemaGenerationError as exc:
        raise ConversionError(raw, target, "unsupported target type") from exc
    except PydanticValidationError as exc:
        raise ConversionError(raw, target, str(exc)) from exc


_CONVERTERS: dict[ValueKind, Callable[[Any, Any], Any]] = {
    ValueKind.BOOLEAN: _to_bool,
    ValueKind.INTEGER: _to_int,
    ValueKind.FLOAT: _to_float,
    ValueKind.DECIMAL: _to_decimal,
    ValueKind.TEXT: _to_text,
    ValueKind.TIMESTAMP: _to_timestamp,
    ValueKind.DATE: _to_date,
    ValueKind.TIME: _to_time,
    ValueKind.IDENTIFIER: _to_uuid,
    ValueKind.ENUM: _to_enum,
    ValueKind.COLLECTION: _to_collection,
    ValueKind.OTHER: _via_adapter,
}

_missing = set(ValueKind) - set(_CONVERTERS)
if _missing:
    raise RuntimeError(f"No converter registered for {sorted(k.name for k in _missing)}")


def coerce(target_type: Any, raw: Any) -> Any:
    """
    Convert ``raw`` to ``target_type``.

    Rules, first match wins:

    1. ``None`` passes through; values already of the target type are
       returned unchanged (``bool`` never counts as numeric).
    2. Enum targets match member names case-insensitively, then values.
    3. ``Optional[X]`` unwraps to ``X``; other unions try each member
       in declaration order.
    4. Kind-specific conversion (see ``ValueKind``).

    Raises:
        ConversionError: If no conversion path exists.
    """
    if raw is None or target_type is Any:
        return raw
    target = _strip_annotated(target_type)
    if _is_instance(raw, target):
        return raw

    if _is_union(target):
        inner, is_optional = unwrap_optional(target)
        if is_optional:
            return coerce(inner, raw)
        last: ConversionError | None = None
        for member in get_args(target):
            try:
                return coerce(member, raw)
            except ConversionError as exc:
                last = exc
        raise ConversionError(raw, target, "no union member accepted it") from last

    return _CONVERTERS[classify(target)](target, raw)
