from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from src.adapters.backend.parsers import parse_route_section
from src.adapters.backend_api import (
    BackendClient,
    BackendRequestError,
    unwrap_data,
    unwrap_list,
)
from src.app.ports.output import IRouteSectionStore
from src.domain.models import RouteSection


def _section_from_body(body: Any) -> RouteSection:
    data = unwrap_data(body)
    section = parse_route_section(data) if isinstance(data, Mapping) else None
    if section is None:
        raise BackendRequestError("Backend returned an unreadable route section")
    return section


@dataclass(slots=True)
class HttpRouteSectionStore(IRouteSectionStore):
    client: BackendClient = field(default_factory=BackendClient)

    async def list_for_route(self, route_id: str) -> tuple[RouteSection, ...]:
        path = f"/route-sections/route/{quote(route_id, safe='')}"
        body = await self.client.get(path)
        sections = (parse_route_section(row) for row in unwrap_list(body))
        return tuple(s for s in sections if s is not None)

    async def create(self, section: RouteSection) -> RouteSection:
        body = await self.client.post(
            "/route-sections",
            json={
                "routeId": section.route_id,
                "stopId": section.stop_id,
                "category": section.category,
                "fare": section.fare,
                "order": section.order,
                "isActive": section.is_active,
            },
        )
        return _section_from_body(body)

    async def update(
        self, section_id: str, *, category: str, fare: float, order: int
    ) -> RouteSection:
        body = await self.client.put(
            f"/route-sections/{quote(section_id, safe='')}",
            json={"category": category, "fare": fare, "order": order},
        )
        return _section_from_body(body)
