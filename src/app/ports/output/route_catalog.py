from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import FareEntry, Route, Stop


class IRouteCatalog(ABC):
    """Read-only port over routes, their stops and the fare table."""

    @abstractmethod
    async def get_route(self, route_id: str) -> Route | None:
        """Return the route, or None when the backend does not know it."""

    @abstractmethod
    async def list_stops(self, route_id: str) -> tuple[Stop, ...]:
        raise NotImplementedError

    @abstractmethod
    async def list_fares(self, category: str) -> tuple[FareEntry, ...]:
        raise NotImplementedError
