from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from src.app.ports.output import IRouteSectionStore
from src.app.services.ownership_resolver import OwnershipResolver
from src.domain.exceptions import FetchError
from src.domain.models import RouteSection

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OwnerRouteSectionsService:
    """Route sections of every route served by an owner's buses.

    A route whose sections cannot be read fails the whole listing; a partial
    list would look like a route with no sections.
    """

    resolver: OwnershipResolver
    section_store: IRouteSectionStore

    async def list_route_sections(self, owner_id: str) -> tuple[RouteSection, ...]:
        route_ids = sorted(await self.resolver.resolve_routes(owner_id))
        if not route_ids:
            return ()

        try:
            batches = await asyncio.gather(
                *(self.section_store.list_for_route(rid) for rid in route_ids)
            )
        except Exception as exc:
            raise FetchError(
                f"Fetching route sections for owner {owner_id} failed: {exc}",
                status=getattr(exc, "status", None),
            ) from exc

        sections = tuple(s for batch in batches for s in batch)
        logger.debug(
            "Owner %s: %d route section(s) over %d route(s)",
            owner_id,
            len(sections),
            len(route_ids),
        )
        return sections
