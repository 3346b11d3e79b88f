"""IIdentityProvider — access to the caller's identity."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IIdentityProvider(Protocol):
    """Resolve who is performing the current operation.

    Authentication happens elsewhere; services only read the result.
    """

    @property
    def user_id(self) -> str | None: ...

    @property
    def user_name(self) -> str | None: ...
