"""CoreProvider and CommonService — collaborators every service needs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cleanbase_core.adapters.mapping import PydanticObjectMapper
from cleanbase_filtering import FilterAssembler, FilterRegistry, build_default_registry

if TYPE_CHECKING:
    from cleanbase_core.ports import IIdentityProvider, IObjectMapper, UnitOfWork


@dataclass
class CoreProvider:
    """Bundle of shared collaborators handed to each service."""

    mapper: IObjectMapper = field(default_factory=PydanticObjectMapper)
    identity_provider: IIdentityProvider | None = None
    registry: FilterRegistry = field(default_factory=build_default_registry)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("cleanbase.services")
    )


class CommonService:
    """Base for services: exposes the unit of work and core collaborators."""

    def __init__(self, core: CoreProvider, unit_of_work: UnitOfWork) -> None:
        self._core = core
        self._unit_of_work = unit_of_work
        self._assembler = FilterAssembler(core.registry)

    @property
    def unit_of_work(self) -> UnitOfWork:
        return self._unit_of_work

    @property
    def mapper(self) -> IObjectMapper:
        return self._core.mapper

    @property
    def identity_provider(self) -> IIdentityProvider | None:
        return self._core.identity_provider

    @property
    def logger(self) -> logging.Logger:
        return self._core.logger

    @property
    def assembler(self) -> FilterAssembler:
        return self._assembler

    @property
    def current_user_id(self) -> str | None:
        provider = self._core.identity_provider
        return provider.user_id if provider is not None else None
