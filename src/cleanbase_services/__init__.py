"""Generic CRUD service layer built on the repository and filter ports."""

from __future__ import annotations

from .base import ServiceBase
from .batch import BatchOperation
from .common import CommonService, CoreProvider
from .options import ServiceOptions
from .requests import GetAllRequest, KeyedRequest, ListResult, UpsertResult

__all__ = [
    "BatchOperation",
    "CommonService",
    "CoreProvider",
    "GetAllRequest",
    "KeyedRequest",
    "ListResult",
    "ServiceBase",
    "ServiceOptions",
    "UpsertResult",
]
