"""
ServiceBase — generic CRUD service over one entity type.

Subclasses pick the entity (and optional summary) type and may override
the protected hooks::

    class CustomerService(ServiceBase[Customer, CustomerRequest, CustomerFilter]):
        entity_type = Customer
        summary_type = CustomerSummary
        sort_fields_mapping = {"name": "last_name"}

        def get_filter_for_get_all_internal(self, request):
            return FieldPredicate("is_active", "=", True)

Every write operation ends with exactly one ``commit()`` on the unit of
work; nothing is committed when an operation raises.
"""

from __future__ import annotations

import builtins
import time
from collections.abc import Awaitable, Callable, Hashable, Iterable, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar
from uuid import UUID, uuid4

from cleanbase_core.query import QueryOptions
from cleanbase_filtering import Predicate, all_of

from .batch import BatchOperation
from .common import CommonService
from .options import ServiceOptions
from .requests import GetAllRequest, ListResult, UpsertResult

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cleanbase_core.ports import IRepository, UnitOfWork

    from .common import CoreProvider

TEntity = TypeVar("TEntity")
TRequest = TypeVar("TRequest")
TGetAllRequest = TypeVar("TGetAllRequest", bound=GetAllRequest)
TSource = TypeVar("TSource")
TKey = TypeVar("TKey", bound=Hashable)


class ServiceBase(CommonService, Generic[TEntity, TRequest, TGetAllRequest]):
    """CRUD operations for ``entity_type`` backed by an ``IRepository``."""

    entity_type: ClassVar[type[Any]]
    summary_type: ClassVar[type[Any] | None] = None
    sort_fields_mapping: ClassVar[Mapping[str, str]] = {}
    update_excluded_fields: ClassVar[frozenset[str]] = frozenset({"id", "created_date"})

    def __init__(
        self,
        core: CoreProvider,
        unit_of_work: UnitOfWork,
        repository: IRepository[TEntity],
        options: ServiceOptions | None = None,
    ) -> None:
        super().__init__(core, unit_of_work)
        self.repository = repository
        self.options = options or ServiceOptions()
        self._entity_name = self.entity_type.__name__

    # -- tracking ------------------------------------------------------------

    def _begin_track(self) -> tuple[datetime, float] | None:
        if not self.options.enable_tracking_log:
            return None
        return datetime.now(timezone.utc), time.perf_counter()

    def _track(self, action: str, tracker: tuple[datetime, float] | None) -> None:
        if tracker is None:
            return
        started, start = tracker
        elapsed = (time.perf_counter() - start) * 1000
        self.logger.info(
            "[%s] Process %s started at %s and took %.2f milliseconds to complete.",
            self._entity_name,
            action,
            started.isoformat(),
            elapsed,
        )

    # -- mapping hooks -------------------------------------------------------

    def map_entity_for_insert(self, request: Any) -> TEntity:
        return self.mapper.map(request, self.entity_type)

    def map_entity_for_update(self, source: Any, entity: TEntity) -> None:
        preserved = {
            name: getattr(entity, name)
            for name in self.update_excluded_fields
            if hasattr(entity, name)
        }
        self.mapper.map_into(source, entity)
        for name, value in preserved.items():
            setattr(entity, name, value)

    # -- save ----------------------------------------------------------------

    async def save(self, request: TRequest) -> TEntity:
        """Insert or update from ``request`` depending on whether its id exists."""
        tracker = self._begin_track()
        request_id = getattr(request, "id", None)
        entity = await self.repository.find(request_id) if request_id else None

        if entity is None:
            entity = self.map_entity_for_insert(request)
            if getattr(entity, "id", None) is None:
                entity.id = request_id or uuid4()  # type: ignore[attr-defined]
            entity = await self.repository.add(entity)
            action = "save add new"
        else:
            self.map_entity_for_update(request, entity)
            await self.repository.update(entity)
            action = "save update"

        await self.unit_of_work.commit()
        self._track(action, tracker)
        return entity

    async def save_entity(self, entity: TEntity) -> TEntity:
        """Insert ``entity`` or copy its state onto the stored instance."""
        tracker = self._begin_track()
        entity_id = getattr(entity, "id", None)
        existing = await self.repository.find(entity_id) if entity_id else None

        if existing is None:
            if entity_id is None:
                entity.id = uuid4()  # type: ignore[attr-defined]
            result = await self.repository.add(entity)
            action = "save add new"
        else:
            self.map_entity_for_update(entity, existing)
            result = await self.repository.update(existing)
            action = "save update"

        await self.unit_of_work.commit()
        self._track(action, tracker)
        return result

    # -- read ----------------------------------------------------------------

    def get_filter_for_get_all_internal(self, request: TGetAllRequest) -> Predicate | None:
        """Extra service-specific condition AND-ed with the request filters."""
        return None

    def get_filter(self, request: TGetAllRequest) -> Predicate:
        predicates = self.assembler.build_predicates(request, self.entity_type)
        extra = self.get_filter_for_get_all_internal(request)
        if extra is not None:
            predicates.append(extra)
        return all_of(predicates)

    def _page_options(
        self, request: TGetAllRequest, page_size_max: int | None
    ) -> QueryOptions:
        sort_field = request.sort_field or self.options.default_sort_field
        sort_field = self.sort_fields_mapping.get(sort_field, sort_field)
        ascending = (
            request.asc if request.asc is not None else self.options.default_ascending
        )

        upper = page_size_max if page_size_max is not None else self.options.page_size_max
        page_size = max(self.options.page_size_min, min(request.page_size, upper))

        if request.skip is not None:
            skip = request.skip
        else:
            skip = ((request.page_index or 0) - 1) * page_size
        return QueryOptions(
            sort_field=sort_field,
            ascending=ascending,
            skip=max(0, skip),
            take=page_size,
        )

    async def get_all(
        self, request: TGetAllRequest, page_size_max: int | None = None
    ) -> list[TEntity]:
        """One filtered, ordered page of entities."""
        tracker = self._begin_track()
        options = self._page_options(request, page_size_max).with_specification(
            self.get_filter(request)
        )
        items = await self.repository.query(options)
        self._track("GetAll", tracker)
        return items

    async def list(self, request: TGetAllRequest) -> ListResult[TEntity]:
        """Like ``get_all`` but also reports the total match count."""
        tracker = self._begin_track()
        spec = self.get_filter(request)
        total = await self.repository.count(spec)
        options = self._page_options(request, None).with_specification(spec)
        items = await self.repository.query(options)
        self._track("List", tracker)
        return ListResult(
            items=items,
            total=total,
            skipped=options.skip or 0,
            page_size=options.take or 0,
        )

    async def get_all_summary(
        self,
        request: TGetAllRequest,
        selector: Callable[[TEntity], Any] | None = None,
    ) -> builtins.list[Any]:
        """``get_all`` projected through ``selector`` or into ``summary_type``."""
        if selector is not None:
            return [selector(entity) for entity in await self.get_all(request)]
        summary_type = self.summary_type
        if summary_type is None:
            raise ValueError(
                f"{type(self).__name__} has no summary_type; pass a selector"
            )
        return [
            self.mapper.map(entity, summary_type)
            for entity in await self.get_all(request)
        ]

    async def get_by_id(self, *ids: Any) -> TEntity | None:
        """Entity for the first id; ``None`` when missing or not a UUID."""
        if not ids or not isinstance(ids[0], UUID):
            return None
        return await self.repository.find(ids[0])

    # -- delete --------------------------------------------------------------

    async def soft_delete(self, entity_id: UUID) -> bool:
        deleted = await self.repository.soft_delete(entity_id)
        if deleted:
            await self.unit_of_work.commit()
        return deleted

    async def hard_delete(self, entity_id: UUID) -> bool:
        deleted = await self.repository.hard_delete(entity_id)
        if deleted:
            await self.unit_of_work.commit()
        return deleted

    # -- upsert --------------------------------------------------------------

    async def _reconcile(
        self,
        source_by_key: dict[Any, Any],
        keys: Iterable[Any],
        existing: Sequence[TEntity],
        entity_key_selector: Callable[[TEntity], Any],
        on_add: Callable[[Any, TEntity], None] | None,
        on_update: Callable[[Any, TEntity], None] | None,
        allow_add: bool,
        allow_update: bool,
        allow_delete: bool,
    ) -> UpsertResult:
        wanted = list(dict.fromkeys(keys))
        existing_by_key = {entity_key_selector(e): e for e in existing}
        added: builtins.list[TEntity] = []
        updated: builtins.list[TEntity] = []
        deleted = 0

        if allow_add:
            for key in wanted:
                if key in existing_by_key:
                    continue
                item = source_by_key[key]
                entity = self.mapper.map(item, self.entity_type)
                if getattr(entity, "id", None) is None:
                    entity.id = uuid4()  # type: ignore[attr-defined]
                if on_add is not None:
                    on_add(item, entity)
                added.append(entity)
            if added:
                self.logger.info("[%s] Adding %d new entities.", self._entity_name, len(added))
                await self.repository.add_many(added)

        if allow_update:
            for key in wanted:
                entity = existing_by_key.get(key)
                if entity is None:
                    continue
                item = source_by_key[key]
                self.map_entity_for_update(item, entity)
                if on_update is not None:
                    on_update(item, entity)
                updated.append(entity)
            if updated:
                self.logger.info("[%s] Updating %d entities.", self._entity_name, len(updated))
                await self.repository.update_many(updated)

        if allow_delete:
            for key, entity in existing_by_key.items():
                if key in source_by_key:
                    continue
                if await self.repository.soft_delete(entity.id):  # type: ignore[attr-defined]
                    deleted += 1
            if deleted:
                self.logger.info("[%s] Deleted %d obsolete entities.", self._entity_name, deleted)

        return UpsertResult(added=len(added), updated=len(updated), deleted=deleted)

    async def upsert(
        self,
        source: Iterable[TSource],
        key_selector: Callable[[TSource], TKey],
        entity_key_selector: Callable[[TEntity], TKey],
        load_existing: Callable[[IRepository[TEntity], builtins.list[TKey]], Awaitable[Sequence[TEntity]]],
        on_add: Callable[[TSource, TEntity], None] | None = None,
        on_update: Callable[[TSource, TEntity], None] | None = None,
        *,
        allow_add: bool = True,
        allow_update: bool = True,
        allow_delete: bool = False,
    ) -> UpsertResult:
        """
        Reconcile stored entities with ``source`` by key, then commit once.

        ``load_existing`` receives the repository and the source keys and
        returns the stored entities for them.  With ``allow_delete`` every
        loaded entity whose key is absent from ``source`` is soft-deleted.
        """
        source_by_key = {key_selector(item): item for item in source}
        keys = list(source_by_key)
        existing = await load_existing(self.repository, keys)
        result = await self._reconcile(
            source_by_key,
            keys,
            existing,
            entity_key_selector,
            on_add,
            on_update,
            allow_add,
            allow_update,
            allow_delete,
        )
        await self.unit_of_work.commit()
        return result

    async def upsert_batch(
        self,
        source: Iterable[TSource],
        key_selector: Callable[[TSource], TKey],
        entity_key_selector: Callable[[TEntity], TKey],
        load_existing: Callable[[IRepository[TEntity], builtins.list[TKey]], Awaitable[Sequence[TEntity]]],
        on_add: Callable[[TSource, TEntity], None] | None = None,
        on_update: Callable[[TSource, TEntity], None] | None = None,
        *,
        allow_add: bool = True,
        allow_update: bool = True,
        allow_delete: bool = False,
        page_size: int | None = None,
    ) -> UpsertResult:
        """``upsert`` in pages of source keys; one commit after the last page."""
        source_by_key = {key_selector(item): item for item in source}
        keys = list(source_by_key)
        totals = [0, 0, 0]

        async def fetch_page(index: int, size: int) -> builtins.list[TKey]:
            return keys[(index - 1) * size : index * size]

        async def operation(page: Sequence[TKey]) -> None:
            existing = await load_existing(self.repository, list(page))
            result = await self._reconcile(
                source_by_key,
                page,
                existing,
                entity_key_selector,
                on_add,
                on_update,
                allow_add,
                allow_update,
                allow_delete,
            )
            totals[0] += result.added
            totals[1] += result.updated
            totals[2] += result.deleted

        batch = BatchOperation(
            fetch_page, operation, page_size or self.options.batch_page_size
        )
        await batch.run()
        await self.unit_of_work.commit()
        return UpsertResult(added=totals[0], updated=totals[1], deleted=totals[2])
