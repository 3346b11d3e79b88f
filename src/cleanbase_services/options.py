"""ServiceOptions — tunables for ``ServiceBase``."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceOptions:
    """Paging, ordering and logging defaults for CRUD services.

    Passed to the service constructor; one instance can be shared by
    every service of an application.
    """

    page_size_min: int = 1
    page_size_max: int = 100
    default_sort_field: str = "created_date"
    default_ascending: bool = False
    enable_tracking_log: bool = True
    batch_page_size: int = 100

    def __post_init__(self) -> None:
        if self.page_size_min < 1:
            raise ValueError("page_size_min must be at least 1")
        if self.page_size_max < self.page_size_min:
            raise ValueError("page_size_max must not be below page_size_min")
        if self.batch_page_size < 1:
            raise ValueError("batch_page_size must be at least 1")
