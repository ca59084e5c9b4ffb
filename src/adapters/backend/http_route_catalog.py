from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote

from src.adapters.backend.parsers import parse_fare_entry, parse_route, parse_stop
from src.adapters.backend_api import (
    BackendClient,
    BackendRequestError,
    unwrap_data,
    unwrap_list,
)
from src.app.ports.output import IRouteCatalog
from src.domain.models import FareEntry, Route, Stop


@dataclass(slots=True)
class HttpRouteCatalog(IRouteCatalog):
    client: BackendClient = field(default_factory=BackendClient)

    async def get_route(self, route_id: str) -> Route | None:
        try:
            body = await self.client.get(f"/routes/{quote(route_id, safe='')}")
        except BackendRequestError as exc:
            if exc.status == 404:
                return None
            raise

        data = unwrap_data(body)
        if not isinstance(data, Mapping):
            return None
        return parse_route(data)

    async def list_stops(self, route_id: str) -> tuple[Stop, ...]:
        body = await self.client.get(f"/stops/route/{quote(route_id, safe='')}")
        stops = (parse_stop(row) for row in unwrap_list(body))
        return tuple(s for s in stops if s is not None)

    async def list_fares(self, category: str) -> tuple[FareEntry, ...]:
        rows = await self.client.get_all_pages(
            "/sections", params={"category": category}
        )
        entries = (parse_fare_entry(row) for row in rows)
        return tuple(e for e in entries if e is not None)
