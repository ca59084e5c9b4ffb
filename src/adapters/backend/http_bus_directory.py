from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote

from src.adapters.backend.parsers import parse_bus
from src.adapters.backend_api import BackendClient, unwrap_list
from src.app.ports.output import IBusDirectory
from src.domain.models import Bus


@dataclass(slots=True)
class HttpBusDirectory(IBusDirectory):
    """Reads an owner's buses from `GET /buses/owner/{ownerId}`."""

    client: BackendClient = field(default_factory=BackendClient)

    async def list_owner_buses(self, owner_id: str) -> tuple[Bus, ...]:
        body = await self.client.get(f"/buses/owner/{quote(owner_id, safe='')}")
        buses = (parse_bus(row) for row in unwrap_list(body))
        return tuple(b for b in buses if b is not None)
