from __future__ import annotations

from dataclasses import dataclass

from src.app.ports.output import IBusDirectory
from src.domain.exceptions import InvalidInput, ResolutionError
from src.domain.models import Bus, ref_id


def require_owner_id(owner_id: str | None) -> str:
    if not isinstance(owner_id, str) or not owner_id.strip():
        raise InvalidInput("Owner id is required")
    return owner_id.strip()


@dataclass(slots=True)
class OwnershipResolver:
    """Resolves the buses (and through them, the routes) an owner controls.

    Nothing is cached between calls: every call reads the bus directory.
    """

    bus_directory: IBusDirectory

    async def resolve(self, owner_id: str) -> frozenset[str]:
        buses = await self._owner_buses(owner_id)
        return frozenset(bus.id for bus in buses if bus.id)

    async def resolve_routes(self, owner_id: str) -> frozenset[str]:
        buses = await self._owner_buses(owner_id)
        route_ids: set[str] = set()
        for bus in buses:
            rid = ref_id(bus.route)
            if rid:
                route_ids.add(rid)
        return frozenset(route_ids)

    async def _owner_buses(self, owner_id: str) -> tuple[Bus, ...]:
        owner_id = require_owner_id(owner_id)
        try:
            return tuple(await self.bus_directory.list_owner_buses(owner_id))
        except Exception as exc:
            raise ResolutionError(
                f"Could not resolve buses for owner {owner_id}: {exc}"
            ) from exc
