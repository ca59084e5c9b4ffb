from __future__ import annotations

from functools import lru_cache

from src.adapters.backend.http_bus_directory import HttpBusDirectory
from src.adapters.backend.http_record_source import (
    http_day_end_source,
    http_ticket_source,
    http_trip_source,
)
from src.adapters.backend.http_route_catalog import HttpRouteCatalog
from src.adapters.backend.http_route_section_store import HttpRouteSectionStore
from src.adapters.backend_api import BackendClient
from src.app.services.owner_route_sections import OwnerRouteSectionsService
from src.app.services.ownership_resolver import OwnershipResolver
from src.app.services.request_gate import LatestRequestGate
from src.app.services.route_section_generator import RouteSectionFareGenerator
from src.app.services.scoped_fetch_service import (
    ScopedFetchStrategy,
    ScopedRecordsService,
    day_end_family,
    ticket_family,
    trip_family,
)


@lru_cache(maxsize=1)
def get_request_gate() -> LatestRequestGate:
    # Shared across requests: it remembers the newest request per channel.
    return LatestRequestGate()


def get_ownership_resolver() -> OwnershipResolver:
    return OwnershipResolver(bus_directory=HttpBusDirectory(client=BackendClient()))


def get_scoped_records_service() -> ScopedRecordsService:
    client = BackendClient()
    resolver = OwnershipResolver(bus_directory=HttpBusDirectory(client=client))
    return ScopedRecordsService(
        strategy=ScopedFetchStrategy(resolver=resolver),
        tickets=ticket_family(http_ticket_source(client)),
        trips=trip_family(http_trip_source(client)),
        day_ends=day_end_family(http_day_end_source(client)),
        gate=get_request_gate(),
    )


def get_owner_route_sections_service() -> OwnerRouteSectionsService:
    client = BackendClient()
    return OwnerRouteSectionsService(
        resolver=OwnershipResolver(bus_directory=HttpBusDirectory(client=client)),
        section_store=HttpRouteSectionStore(client=client),
    )


@lru_cache(maxsize=1)
def get_route_section_generator() -> RouteSectionFareGenerator:
    # Shared across requests: it holds the per-route generation locks.
    client = BackendClient()
    return RouteSectionFareGenerator(
        route_catalog=HttpRouteCatalog(client=client),
        section_store=HttpRouteSectionStore(client=client),
    )
