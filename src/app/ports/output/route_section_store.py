from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import RouteSection


class IRouteSectionStore(ABC):
    """Port for persisting generated route sections."""

    @abstractmethod
    async def list_for_route(self, route_id: str) -> tuple[RouteSection, ...]:
        raise NotImplementedError

    @abstractmethod
    async def create(self, section: RouteSection) -> RouteSection:
        raise NotImplementedError

    @abstractmethod
    async def update(
        self, section_id: str, *, category: str, fare: float, order: int
    ) -> RouteSection:
        raise NotImplementedError
