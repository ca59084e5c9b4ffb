from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from src.adapters.api.dependencies import (
    get_owner_route_sections_service,
    get_ownership_resolver,
    get_scoped_records_service,
)
from src.adapters.api.schemas.records import (
    DayEndSchema,
    DayEndsPageSchema,
    OwnerScopeSchema,
    TicketSchema,
    TicketsPageSchema,
    TripSchema,
    TripsPageSchema,
)
from src.adapters.api.schemas.route_sections import (
    OwnerRouteSectionsSchema,
    RouteSectionSchema,
)
from src.app.services.owner_route_sections import OwnerRouteSectionsService
from src.app.services.ownership_resolver import OwnershipResolver
from src.app.services.scoped_fetch_service import ScopedRecordsService
from src.domain.models import DayEnd, FilterSpec, Ticket, Trip, ref_id

router = APIRouter(prefix="/owners", tags=["owners"])


def filter_spec(
    bus_id: str | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    payment_method: str | None = Query(default=None),
    trip_number: str | None = Query(default=None),
    from_stop_id: str | None = Query(default=None),
    to_stop_id: str | None = Query(default=None),
    status: str | None = Query(default=None),
) -> FilterSpec:
    # "all" is what the dashboard's select boxes send for "no filter".
    def _clean(value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return None if not value or value.lower() == "all" else value

    return FilterSpec(
        bus_id=_clean(bus_id),
        start_date=start_date,
        end_date=end_date,
        payment_method=_clean(payment_method),
        trip_number=_clean(trip_number),
        from_stop_id=_clean(from_stop_id),
        to_stop_id=_clean(to_stop_id),
        status=_clean(status),
    )


def _ticket_to_schema(t: Ticket) -> TicketSchema:
    return TicketSchema(
        id=t.id,
        bus_id=ref_id(t.bus),
        ticket_id=t.ticket_id,
        route_id=t.route_id,
        date_time=t.date_time,
        payment_method=t.payment_method,
        trip_number=t.trip_number,
        from_stop_id=t.from_stop_id,
        to_stop_id=t.to_stop_id,
        fare_paid=t.fare_paid,
        total_passengers=t.total_passengers,
    )


def _trip_to_schema(t: Trip) -> TripSchema:
    return TripSchema(
        id=t.id,
        bus_id=ref_id(t.bus),
        trip_number=t.trip_number,
        route_id=ref_id(t.route),
        departure_time=t.departure_time,
        arrival_time=t.arrival_time,
        status=t.status,
    )


def _day_end_to_schema(d: DayEnd) -> DayEndSchema:
    return DayEndSchema(
        id=d.id,
        bus_id=ref_id(d.bus),
        date=d.date,
        total_revenue=d.total_revenue,
        total_expenses=d.total_expenses,
        profit=d.profit,
        status=d.status,
    )


@router.get("/{owner_id}/tickets", response_model=TicketsPageSchema)
async def list_tickets(
    owner_id: str,
    filters: FilterSpec = Depends(filter_spec),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    service: ScopedRecordsService = Depends(get_scoped_records_service),
) -> TicketsPageSchema:
    result = await service.fetch_scoped_tickets(owner_id, filters, page, limit)
    return TicketsPageSchema(
        items=[_ticket_to_schema(t) for t in result.items],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.get("/{owner_id}/trips", response_model=TripsPageSchema)
async def list_trips(
    owner_id: str,
    filters: FilterSpec = Depends(filter_spec),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    service: ScopedRecordsService = Depends(get_scoped_records_service),
) -> TripsPageSchema:
    result = await service.fetch_scoped_trips(owner_id, filters, page, limit)
    return TripsPageSchema(
        items=[_trip_to_schema(t) for t in result.items],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.get("/{owner_id}/day-ends", response_model=DayEndsPageSchema)
async def list_day_ends(
    owner_id: str,
    filters: FilterSpec = Depends(filter_spec),
    page: int = Query(default=1),
    limit: int = Query(default=20),
    service: ScopedRecordsService = Depends(get_scoped_records_service),
) -> DayEndsPageSchema:
    result = await service.fetch_scoped_day_ends(owner_id, filters, page, limit)
    return DayEndsPageSchema(
        items=[_day_end_to_schema(d) for d in result.items],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
    )


@router.get("/{owner_id}/buses", response_model=OwnerScopeSchema)
async def list_owned_buses(
    owner_id: str,
    resolver: OwnershipResolver = Depends(get_ownership_resolver),
) -> OwnerScopeSchema:
    ids = await resolver.resolve(owner_id)
    return OwnerScopeSchema(owner_id=owner_id, ids=sorted(ids))


@router.get("/{owner_id}/routes", response_model=OwnerScopeSchema)
async def list_owned_routes(
    owner_id: str,
    resolver: OwnershipResolver = Depends(get_ownership_resolver),
) -> OwnerScopeSchema:
    ids = await resolver.resolve_routes(owner_id)
    return OwnerScopeSchema(owner_id=owner_id, ids=sorted(ids))


@router.get("/{owner_id}/route-sections", response_model=OwnerRouteSectionsSchema)
async def list_owner_route_sections(
    owner_id: str,
    service: OwnerRouteSectionsService = Depends(get_owner_route_sections_service),
) -> OwnerRouteSectionsSchema:
    sections = await service.list_route_sections(owner_id)
    return OwnerRouteSectionsSchema(
        owner_id=owner_id,
        items=[
            RouteSectionSchema(
                id=s.id,
                route_id=s.route_id,
                stop_id=s.stop_id,
                category=s.category,
                fare=s.fare,
                order=s.order,
                is_active=s.is_active,
            )
            for s in sections
        ],
    )
