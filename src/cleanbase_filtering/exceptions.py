"""
Filter exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``FilterError`` (itself a ``CleanBaseError``)
and provide ``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any

from cleanbase_core.exceptions import CleanBaseError, ValidationError


class FilterError(CleanBaseError):
    """Base exception for all filtering errors."""


class FilterValidationError(FilterError, ValidationError):
    """A filter request or descriptor is structurally invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__({field or "__root__": [message]})

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FILTER_VALIDATION_ERROR",
            "message": self.message,
            "field": self.field,
        }


def _close(word: str, candidates: list[str], limit: int, cutoff: float = 0.6) -> list[str]:
    return get_close_matches(word, candidates, n=limit, cutoff=cutoff)


class FieldNotFoundError(FilterValidationError):
    """
    The target entity has no member with the requested name.

    ``str(err)`` reads like::

        Unknown field 'nmae' on Person (did you mean: name).
        Known fields: age, id, name
    """

    max_listed = 15

    def __init__(
        self,
        invalid_field: str,
        model_name: str,
        available_fields: list[str],
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.model_name = model_name
        self.available_fields = sorted(available_fields)
        self.suggestions = _close(invalid_field, available_fields, 5, cutoff)

        head = f"Unknown field '{invalid_field}' on {model_name}"
        if self.suggestions:
            head += f" (did you mean: {', '.join(self.suggestions)})"
        known = self.available_fields[: self.max_listed]
        tail = "" if len(self.available_fields) <= self.max_listed else ", ..."
        super().__init__(
            f"{head}.\nKnown fields: {', '.join(known)}{tail}", field=invalid_field
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            error="FIELD_NOT_FOUND",
            model=self.model_name,
            suggestions=self.suggestions,
            available_fields=self.available_fields,
        )
        return data


class ConversionError(FilterError, ValueError):
    """A raw value cannot be converted to the target field type."""

    def __init__(self, value: Any, target_type: Any, reason: str | None = None) -> None:
        self.value = value
        self.target_type = target_type
        self.reason = reason
        name = getattr(target_type, "__name__", repr(target_type))
        message = f"Cannot convert {value!r} to {name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONVERSION_ERROR",
            "message": str(self),
            "value": repr(self.value),
            "target_type": getattr(self.target_type, "__name__", repr(self.target_type)),
        }


class OperatorNotFoundError(FilterError, LookupError):
    """No filter type (or predicate operator) is registered under that name."""

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = sorted(valid_operators)
        self.suggestions = _close(operator, valid_operators, 3)

        parts = [f"Unsupported filter type: '{operator}'."]
        if self.suggestions:
            parts.append(f"Closest match: {', '.join(self.suggestions)}.")
        if self.valid_operators:
            parts.append(f"Known filter types: {', '.join(self.valid_operators)}")
        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_FOUND",
            "message": str(self),
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": self.valid_operators,
        }


class FilterAssemblyError(FilterError):
    """Building the filters for one request field failed.

    The underlying error is also available as ``__cause__``.
    """

    def __init__(self, field: str, operator: str, cause: BaseException) -> None:
        self.field = field
        self.operator = operator
        self.cause = cause
        super().__init__(
            f"Error assigning value to filter type {operator} "
            f"for field '{field}': {cause}"
        )

    def to_dict(self) -> dict[str, Any]:
        inner = self.cause.to_dict() if isinstance(self.cause, CleanBaseError) else None
        return {
            "error": "FILTER_ASSEMBLY_ERROR",
            "message": str(self),
            "request_field": self.field,
            "filter_type": self.operator,
            "cause": inner,
        }
