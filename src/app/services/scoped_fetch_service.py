from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.app.ports.output import IRecordSource
from src.app.services.ownership_resolver import OwnershipResolver, require_owner_id
from src.app.services.request_gate import LatestRequestGate
from src.domain.algorithms.ownership import filter_owned
from src.domain.algorithms.pagination import reconcile_local, reconcile_remote
from src.domain.algorithms.record_filters import (
    RecordPredicate,
    apply_filters,
    day_end_matches,
    ticket_matches,
    trip_matches,
)
from src.domain.exceptions import FetchError, SupersededRequest
from src.domain.models import (
    DayEnd,
    FilterSpec,
    ForeignRef,
    PageRequest,
    PageResult,
    Ticket,
    Trip,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class RecordFamily(Generic[T]):
    """Everything the scoped fetch needs to know about one record type."""

    name: str
    source: IRecordSource[T]
    extract_ref: Callable[[T], ForeignRef | None]
    predicate: RecordPredicate


def ticket_family(source: IRecordSource[Ticket]) -> RecordFamily[Ticket]:
    return RecordFamily(
        name="tickets",
        source=source,
        extract_ref=lambda t: t.bus,
        predicate=ticket_matches,
    )


def trip_family(source: IRecordSource[Trip]) -> RecordFamily[Trip]:
    return RecordFamily(
        name="trips", source=source, extract_ref=lambda t: t.bus, predicate=trip_matches
    )


def day_end_family(source: IRecordSource[DayEnd]) -> RecordFamily[DayEnd]:
    return RecordFamily(
        name="day-ends",
        source=source,
        extract_ref=lambda d: d.bus,
        predicate=day_end_matches,
    )


async def _guarded(family: RecordFamily, call: Awaitable[R]) -> R:
    try:
        return await call
    except FetchError:
        raise
    except Exception as exc:
        raise FetchError(
            f"Fetching {family.name} failed: {exc}",
            status=getattr(exc, "status", None),
        ) from exc


@dataclass(slots=True)
class ScopedFetchStrategy:
    """Owner-scoped, paginated record listing for any record family.

    A selected, owned bus is filtered by the backend and its page metadata
    is trusted. Otherwise the full set matching the remaining filters is
    fetched, narrowed to the owner's buses locally, then paginated.
    """

    resolver: OwnershipResolver

    async def fetch_scoped(
        self,
        family: RecordFamily[T],
        owner_id: str,
        filters: FilterSpec,
        page_request: PageRequest,
    ) -> PageResult[T]:
        resource_ids = await self.resolver.resolve(owner_id)
        if not resource_ids:
            return PageResult.empty()

        if filters.bus_id is not None:
            if filters.bus_id not in resource_ids:
                logger.info(
                    "Bus %s is not owned by %s; returning no %s",
                    filters.bus_id,
                    owner_id,
                    family.name,
                )
                return PageResult.empty()
            return await self._server_filtered(family, filters, page_request)

        return await self._locally_filtered(
            family, resource_ids, filters, page_request
        )

    async def _server_filtered(
        self, family: RecordFamily[T], filters: FilterSpec, page_request: PageRequest
    ) -> PageResult[T]:
        requested = PageRequest(
            page=max(1, page_request.page), limit=page_request.limit
        )
        remote = await _guarded(family, family.source.fetch_page(filters, requested))
        result = reconcile_remote(remote, requested)

        # Past the last page: fetch the page the result was clamped to.
        if result.total > 0 and result.current_page != requested.page:
            clamped = PageRequest(page=result.current_page, limit=page_request.limit)
            remote = await _guarded(family, family.source.fetch_page(filters, clamped))
            result = reconcile_remote(remote, clamped)
        return result

    async def _locally_filtered(
        self,
        family: RecordFamily[T],
        resource_ids: frozenset[str],
        filters: FilterSpec,
        page_request: PageRequest,
    ) -> PageResult[T]:
        records = await _guarded(family, family.source.fetch_all(filters.without_bus()))
        owned = filter_owned(records, resource_ids, extract_ref=family.extract_ref)
        eligible = apply_filters(owned.kept, filters, family.predicate)
        return reconcile_local(eligible, page_request)


@dataclass(slots=True)
class ScopedRecordsService:
    """Entry points used by the dashboard for owner-scoped listings.

    With a `gate`, each (record family, owner) pair is one last-request-wins
    channel: a listing overtaken by a newer one on its channel raises
    `SupersededRequest` instead of returning stale data.
    """

    strategy: ScopedFetchStrategy
    tickets: RecordFamily[Ticket]
    trips: RecordFamily[Trip]
    day_ends: RecordFamily[DayEnd]
    gate: LatestRequestGate | None = None

    async def fetch_scoped_tickets(
        self, owner_id: str, filters: FilterSpec, page: int = 1, limit: int = 20
    ) -> PageResult[Ticket]:
        return await self._fetch(self.tickets, owner_id, filters, page, limit)

    async def fetch_scoped_trips(
        self, owner_id: str, filters: FilterSpec, page: int = 1, limit: int = 20
    ) -> PageResult[Trip]:
        return await self._fetch(self.trips, owner_id, filters, page, limit)

    async def fetch_scoped_day_ends(
        self, owner_id: str, filters: FilterSpec, page: int = 1, limit: int = 20
    ) -> PageResult[DayEnd]:
        return await self._fetch(self.day_ends, owner_id, filters, page, limit)

    async def _fetch(
        self,
        family: RecordFamily[T],
        owner_id: str,
        filters: FilterSpec,
        page: int,
        limit: int,
    ) -> PageResult[T]:
        owner_id = require_owner_id(owner_id)
        page_request = PageRequest(page=page, limit=limit)
        if self.gate is None:
            return await self.strategy.fetch_scoped(
                family, owner_id, filters, page_request
            )

        channel = f"{family.name}:{owner_id}"
        result = await self.gate.run(
            channel,
            lambda: self.strategy.fetch_scoped(family, owner_id, filters, page_request),
        )
        if result is None:
            raise SupersededRequest(
                f"A newer {family.name} request for owner {owner_id} replaced this one"
            )
        return result
