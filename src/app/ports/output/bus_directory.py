from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import Bus


class IBusDirectory(ABC):
    """Port for looking up the buses an owner controls."""

    @abstractmethod
    async def list_owner_buses(self, owner_id: str) -> tuple[Bus, ...]:
        raise NotImplementedError
