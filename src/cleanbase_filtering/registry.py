"""
FilterRegistry — maps filter-type names to operator factories.

Names are case-insensitive.  The registry is safe to share between
threads: registration and creation are guarded by a re-entrant lock and
the last writer wins.

Usage::

    registry = build_default_registry()
    registry.register("Between", Range)
    op = registry.create("between")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .exceptions import FilterValidationError, OperatorNotFoundError
from .operators import DEFAULT_OPERATORS
from .operators.base import FilterOperator

logger = logging.getLogger("cleanbase.filtering")

OperatorFactory = Callable[[], FilterOperator]


def _key(name: str) -> str:
    return name.strip().casefold()


class FilterRegistry:
    """Case-insensitive name → factory mapping."""

    def __init__(self, *, include_defaults: bool = True) -> None:
        self._lock = threading.RLock()
        self._factories: dict[str, tuple[str, OperatorFactory]] = {}
        if include_defaults:
            for operator_cls in DEFAULT_OPERATORS:
                self.register(operator_cls.name, operator_cls)

    # -- registration --------------------------------------------------------

    def register(self, name: str, factory: OperatorFactory) -> None:
        """Insert or overwrite ``name``."""
        if not isinstance(name, str) or not name.strip():
            raise FilterValidationError("Filter type name must not be blank")
        if factory is None or not callable(factory):
            raise FilterValidationError(
                f"Factory for filter type '{name}' must be callable"
            )
        with self._lock:
            self._factories[_key(name)] = (name.strip(), factory)
        logger.debug("Registered filter type %s", name)

    def unregister(self, name: str) -> None:
        """Remove ``name``; unknown names are ignored."""
        with self._lock:
            self._factories.pop(_key(name), None)

    # -- look-up -------------------------------------------------------------

    def has(self, name: str) -> bool:
        with self._lock:
            return _key(name) in self._factories

    @property
    def names(self) -> list[str]:
        with self._lock:
            return [original for original, _ in self._factories.values()]

    def create(self, name: str) -> FilterOperator:
        """
        Return a fresh operator for ``name``.

        Raises:
            FilterValidationError: Blank name, or the factory returned
                something other than a ``FilterOperator``.
            OperatorNotFoundError: No factory is registered for ``name``.
        """
        if not isinstance(name, str) or not name.strip():
            raise FilterValidationError("Filter type name must not be blank")
        with self._lock:
            entry = self._factories.get(_key(name))
            if entry is None:
                raise OperatorNotFoundError(
                    name, [original for original, _ in self._factories.values()]
                )
            factory = entry[1]
        op = factory()
        if not isinstance(op, FilterOperator):
            raise FilterValidationError(
                f"Factory for filter type '{name}' returned "
                f"{type(op).__name__}, not a FilterOperator"
            )
        return op

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._factories)


def build_default_registry() -> FilterRegistry:
    """Create a registry populated with the built-in filter types."""
    return FilterRegistry()
